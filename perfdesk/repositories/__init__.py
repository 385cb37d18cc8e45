from perfdesk.repositories.base import SqlAlchemyRepository
from perfdesk.repositories.records import (
    AppraisalRepository,
    KpiRepository,
    ProjectRepository,
    UserRepository,
)

__all__ = [
    "SqlAlchemyRepository",
    "AppraisalRepository",
    "KpiRepository",
    "ProjectRepository",
    "UserRepository",
]
