"""
Role-gated update merging for performance records (KPIs and appraisals).

Each record kind has a capability table: role -> set of fields that role may
write. Admin-equivalent roles may write their set on any record; every other
role may write its set only on records it owns. The owner reference is in no
set, so it can never change after creation.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Mapping

from perfdesk.core.context import RequestContext
from perfdesk.core.exceptions import AuthorizationError
from perfdesk.models.user import ADMIN_ROLES, UserRole

logger = logging.getLogger(__name__)

Capabilities = Mapping[UserRole, FrozenSet[str]]

KPI_OWNER_FIELDS = frozenset({
    "achieved_value",
    "status",
    "progress_notes",
    "qualitative_score",
    "remarks",
})
KPI_ADMIN_FIELDS = KPI_OWNER_FIELDS | frozenset({
    "supervisor_comments",
    "assigned_by",
    "kpi_name",
    "metric",
    "description",
    "unit",
    "period",
    "deadline",
    "target",
    "weightage",
})

APPRAISAL_OWNER_FIELDS = frozenset({
    "achievements",
    "challenges",
    "goals",
    "draft",
    "self_appraisal",
    "status",
})
APPRAISAL_ADMIN_FIELDS = APPRAISAL_OWNER_FIELDS | frozenset({
    "reviewer_id",
    "reviewer_comments",
    "reviewer_score",
})


def _table(owner_fields: FrozenSet[str], admin_fields: FrozenSet[str]) -> Dict[UserRole, FrozenSet[str]]:
    return {
        role: admin_fields if role in ADMIN_ROLES else owner_fields
        for role in UserRole
    }


KPI_CAPABILITIES: Capabilities = _table(KPI_OWNER_FIELDS, KPI_ADMIN_FIELDS)
APPRAISAL_CAPABILITIES: Capabilities = _table(APPRAISAL_OWNER_FIELDS, APPRAISAL_ADMIN_FIELDS)


def authorize_mutation(record, ctx: RequestContext, message: str = "You can only update your own records") -> None:
    if not ctx.is_admin and not ctx.owns(record):
        logger.warning(
            f"Rejected update of {type(record).__name__} {record.id} by user {ctx.user_id}",
            extra={"role": ctx.role.value},
        )
        raise AuthorizationError(message)


def merge_update(
    record,
    ctx: RequestContext,
    changes: Mapping[str, Any],
    capabilities: Capabilities,
) -> Dict[str, Any]:
    """
    Returns the subset of `changes` the caller may apply to `record`, stamped
    with `last_updated`. Does not touch `record`; raises AuthorizationError
    when the caller is neither its owner nor an admin.
    """
    authorize_mutation(record, ctx)

    permitted = capabilities.get(ctx.role, frozenset())
    accepted = {k: v for k, v in changes.items() if k in permitted}
    dropped = sorted(set(changes) - set(accepted))
    if dropped:
        logger.debug(
            f"Ignoring fields not writable by {ctx.role.value}: {', '.join(dropped)}"
        )

    accepted["last_updated"] = datetime.now(timezone.utc)
    return accepted
