from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from perfdesk.core.context import RequestContext
from perfdesk.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from perfdesk.models.appraisal import APPRAISAL_TERMINAL_STATUSES, Appraisal, AppraisalStatus
from perfdesk.repositories import AppraisalRepository, KpiRepository, UserRepository
from perfdesk.services.base import BaseService
from perfdesk.services.performance import APPRAISAL_CAPABILITIES, merge_update
from perfdesk.services.scoring import appraisal_final_score


class AppraisalService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.appraisals = AppraisalRepository(db)
        self.kpis = KpiRepository(db)
        self.users = UserRepository(db)

    def list(self, ctx: RequestContext, owner_id: Optional[int] = None) -> List[Appraisal]:
        if not ctx.is_admin:
            owner_id = ctx.user_id
        return self.appraisals.list_for(owner_id)

    def get(self, ctx: RequestContext, appraisal_id: int) -> Appraisal:
        appraisal = self._get_or_404(appraisal_id)
        if not ctx.is_admin and not ctx.owns(appraisal):
            raise AuthorizationError("Unauthorized")
        return appraisal

    def create(self, ctx: RequestContext, data: Dict[str, Any]) -> Appraisal:
        data = dict(data)
        owner_id = data.pop("employee_id", None) or ctx.user_id
        if owner_id != ctx.user_id:
            if not ctx.is_admin:
                raise AuthorizationError("Only admins can create appraisals for other users")
            if self.users.get(owner_id) is None:
                raise ValidationError(f"Employee {owner_id} does not exist")

        review_fields = {"reviewer_id", "reviewer_comments", "reviewer_score"} & {
            k for k, v in data.items() if v is not None
        }
        if review_fields and not ctx.is_admin:
            raise AuthorizationError("Only admins can set reviewer fields")
        self._check_reviewer(data)

        data["status"] = data.get("status") or AppraisalStatus.DRAFT
        if data["status"] in APPRAISAL_TERMINAL_STATUSES:
            data["final_score"] = self._final_score(owner_id, data.get("reviewer_score"))

        appraisal = self.appraisals.create(Appraisal(employee_id=owner_id, **data))
        self.log_info(f"Appraisal {appraisal.id} created for user {owner_id}", appraisal_id=appraisal.id)
        return appraisal

    def update(self, ctx: RequestContext, appraisal_id: int, changes: Mapping[str, Any]) -> Appraisal:
        appraisal = self._get_or_404(appraisal_id)
        accepted = merge_update(appraisal, ctx, changes, APPRAISAL_CAPABILITIES)
        self._check_reviewer(accepted)

        status = accepted.get("status", appraisal.status)
        rescore = "status" in accepted or "reviewer_score" in accepted
        if status in APPRAISAL_TERMINAL_STATUSES and rescore:
            reviewer_score = accepted.get("reviewer_score", appraisal.reviewer_score)
            accepted["final_score"] = self._final_score(appraisal.employee_id, reviewer_score)

        appraisal = self.appraisals.update(appraisal, accepted)
        self.log_info(
            f"Appraisal {appraisal.id} updated by user {ctx.user_id}",
            appraisal_id=appraisal.id,
            status=appraisal.status.value,
        )
        return appraisal

    def _final_score(self, owner_id: int, reviewer_score: Optional[float]) -> Optional[float]:
        return appraisal_final_score(self.kpis.completed_scores(owner_id), reviewer_score)

    def _get_or_404(self, appraisal_id: int) -> Appraisal:
        appraisal = self.appraisals.get(appraisal_id)
        if appraisal is None:
            raise NotFoundError("APAR", appraisal_id)
        return appraisal

    def _check_reviewer(self, data: Mapping[str, Any]) -> None:
        reviewer_id = data.get("reviewer_id")
        if reviewer_id is not None and self.users.get(reviewer_id) is None:
            raise ValidationError(f"Reviewer {reviewer_id} does not exist")
