from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from perfdesk.core.context import RequestContext
from perfdesk.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from perfdesk.models.kpi import KPI, KPI_TERMINAL_STATUSES, KpiStatus
from perfdesk.repositories import KpiRepository, UserRepository
from perfdesk.services.base import BaseService
from perfdesk.services.performance import KPI_CAPABILITIES, merge_update
from perfdesk.services.scoring import kpi_progress, kpi_score


def recalculate_kpi(current: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Derived fields for a KPI whose merged values are `current`.
    Progress always follows achieved/target; score only once the KPI is terminal.
    """
    achieved = current.get("achieved_value") or 0
    target = current.get("target") or 0
    derived = {"progress": kpi_progress(achieved, target)}
    if current.get("status") in KPI_TERMINAL_STATUSES:
        derived["score"] = kpi_score(achieved, target)
    return derived


class KpiService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.kpis = KpiRepository(db)
        self.users = UserRepository(db)

    def list(self, ctx: RequestContext, owner_id: Optional[int] = None) -> List[KPI]:
        # Non-admins only ever see their own KPIs, whatever they ask for
        if not ctx.is_admin:
            owner_id = ctx.user_id
        return self.kpis.list_for(owner_id)

    def get(self, ctx: RequestContext, kpi_id: int) -> KPI:
        kpi = self._get_or_404(kpi_id)
        if not ctx.is_admin and not ctx.owns(kpi):
            raise AuthorizationError("Unauthorized")
        return kpi

    def create(self, ctx: RequestContext, data: Dict[str, Any]) -> KPI:
        data = dict(data)
        owner_id = data.pop("assigned_to", None) or ctx.user_id
        if owner_id != ctx.user_id:
            if not ctx.is_admin:
                raise AuthorizationError("Only admins can assign KPIs to other users")
            if self.users.get(owner_id) is None:
                raise ValidationError(f"Assignee {owner_id} does not exist")
            data["assigned_by"] = ctx.user_id

        data.setdefault("status", KpiStatus.NOT_STARTED)
        data.update(recalculate_kpi(data))
        kpi = self.kpis.create(KPI(assigned_to=owner_id, **data))
        self.log_info(f"KPI {kpi.id} created for user {owner_id}", kpi_id=kpi.id)
        return kpi

    def update(self, ctx: RequestContext, kpi_id: int, changes: Mapping[str, Any]) -> KPI:
        kpi = self._get_or_404(kpi_id)
        accepted = merge_update(kpi, ctx, changes, KPI_CAPABILITIES)
        self._check_assignor(accepted)

        current = {
            "achieved_value": kpi.achieved_value,
            "target": kpi.target,
            "status": kpi.status,
            **accepted,
        }
        accepted.update(recalculate_kpi(current))
        kpi = self.kpis.update(kpi, accepted)
        self.log_info(f"KPI {kpi.id} updated by user {ctx.user_id}", kpi_id=kpi.id, status=kpi.status.value)
        return kpi

    def replace(self, ctx: RequestContext, kpi_id: int, changes: Mapping[str, Any]) -> KPI:
        """Full update; admin only."""
        if not ctx.is_admin:
            raise AuthorizationError("Only admins can fully update KPIs")
        return self.update(ctx, kpi_id, changes)

    def delete(self, ctx: RequestContext, kpi_id: int) -> None:
        if not ctx.is_admin:
            raise AuthorizationError("Only admins can delete KPIs")
        kpi = self._get_or_404(kpi_id)
        self.kpis.delete(kpi)
        self.log_info(f"KPI {kpi_id} deleted by user {ctx.user_id}", kpi_id=kpi_id)

    def _get_or_404(self, kpi_id: int) -> KPI:
        kpi = self.kpis.get(kpi_id)
        if kpi is None:
            raise NotFoundError("KPI", kpi_id)
        return kpi

    def _check_assignor(self, accepted: Mapping[str, Any]) -> None:
        assignor = accepted.get("assigned_by")
        if assignor is not None and self.users.get(assignor) is None:
            raise ValidationError(f"Assignor {assignor} does not exist")
