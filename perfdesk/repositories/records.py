from typing import List, Optional

from perfdesk.models.appraisal import Appraisal
from perfdesk.models.kpi import KPI, KpiStatus
from perfdesk.models.project import Project
from perfdesk.models.user import User
from perfdesk.repositories.base import SqlAlchemyRepository


class UserRepository(SqlAlchemyRepository[User]):
    model = User

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()


class KpiRepository(SqlAlchemyRepository[KPI]):
    model = KPI

    def list_for(self, owner_id: Optional[int] = None) -> List[KPI]:
        filters = {"assigned_to": owner_id} if owner_id is not None else {}
        return self.find(filters, order_by=[KPI.created_at.desc(), KPI.id.desc()])

    def completed_scores(self, owner_id: int) -> List[float]:
        rows = self.find({"assigned_to": owner_id, "status": KpiStatus.COMPLETED})
        return [k.score for k in rows]


class AppraisalRepository(SqlAlchemyRepository[Appraisal]):
    model = Appraisal

    def list_for(self, owner_id: Optional[int] = None) -> List[Appraisal]:
        filters = {"employee_id": owner_id} if owner_id is not None else {}
        return self.find(filters, order_by=[Appraisal.created_at.desc(), Appraisal.id.desc()])


class ProjectRepository(SqlAlchemyRepository[Project]):
    model = Project
