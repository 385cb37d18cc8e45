from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from perfdesk.core.context import RequestContext
from perfdesk.core.schemas import ApiResponse
from perfdesk.database import get_db
from perfdesk.routers.auth_deps import get_request_context
from perfdesk.schemas.kpi import KpiCreate, KpiResponse, KpiUpdate
from perfdesk.services.kpi_service import KpiService

router = APIRouter(
    prefix="/kpi",
    tags=["kpi"]
)


@router.get("", response_model=ApiResponse[List[KpiResponse]])
def list_kpis(
    owner_id: Optional[int] = Query(default=None),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    kpis = KpiService(db).list(ctx, owner_id)
    return ApiResponse.ok([KpiResponse.model_validate(k) for k in kpis])


@router.post("", response_model=ApiResponse[KpiResponse], status_code=status.HTTP_201_CREATED)
def create_kpi(
    payload: KpiCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    kpi = KpiService(db).create(ctx, payload.model_dump(exclude_none=True))
    return ApiResponse.ok(KpiResponse.model_validate(kpi))


@router.get("/{kpi_id}", response_model=ApiResponse[KpiResponse])
def get_kpi(
    kpi_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return ApiResponse.ok(KpiResponse.model_validate(KpiService(db).get(ctx, kpi_id)))


@router.patch("/{kpi_id}", response_model=ApiResponse[KpiResponse])
def update_kpi(
    kpi_id: int,
    payload: KpiUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Progress update: employees on their own KPIs, admins on any."""
    kpi = KpiService(db).update(ctx, kpi_id, payload.model_dump(exclude_unset=True))
    return ApiResponse.ok(KpiResponse.model_validate(kpi))


@router.put("/{kpi_id}", response_model=ApiResponse[KpiResponse])
def replace_kpi(
    kpi_id: int,
    payload: KpiUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Full update (admin only)."""
    kpi = KpiService(db).replace(ctx, kpi_id, payload.model_dump(exclude_unset=True))
    return ApiResponse.ok(KpiResponse.model_validate(kpi))


@router.delete("/{kpi_id}", response_model=ApiResponse[dict])
def delete_kpi(
    kpi_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    KpiService(db).delete(ctx, kpi_id)
    return ApiResponse.ok({"id": kpi_id}, metadata={"message": "KPI deleted successfully"})
