# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import user, kpi, appraisal, project

# Explicit class exports for cleaner imports
from .user import User, UserRole
from .kpi import KPI, KpiStatus
from .appraisal import Appraisal, AppraisalStatus
from .project import Project, ProjectTask

__all__ = [
    "User",
    "UserRole",
    "KPI",
    "KpiStatus",
    "Appraisal",
    "AppraisalStatus",
    "Project",
    "ProjectTask",
]
