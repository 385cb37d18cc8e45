from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from perfdesk.core.context import RequestContext
from perfdesk.core.schemas import ApiResponse
from perfdesk.database import get_db
from perfdesk.routers.auth_deps import get_request_context
from perfdesk.schemas.appraisal import (
    AppraisalCreate,
    AppraisalResponse,
    AppraisalUpdate,
    DraftRequest,
    DraftResponse,
)
from perfdesk.services.appraisal_service import AppraisalService
from perfdesk.services.drafting import generate_apar_draft

router = APIRouter(
    prefix="/apar",
    tags=["apar"]
)


@router.get("", response_model=ApiResponse[List[AppraisalResponse]])
def list_appraisals(
    owner_id: Optional[int] = Query(default=None),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    appraisals = AppraisalService(db).list(ctx, owner_id)
    return ApiResponse.ok([AppraisalResponse.model_validate(a) for a in appraisals])


@router.post("", response_model=ApiResponse[AppraisalResponse], status_code=status.HTTP_201_CREATED)
def create_appraisal(
    payload: AppraisalCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    appraisal = AppraisalService(db).create(ctx, payload.model_dump(exclude_none=True))
    return ApiResponse.ok(AppraisalResponse.model_validate(appraisal))


@router.post("/draft", response_model=ApiResponse[DraftResponse])
def draft_appraisal(
    payload: DraftRequest,
    ctx: RequestContext = Depends(get_request_context),
):
    """Generate an AI draft from the form notes. Nothing is saved."""
    draft = generate_apar_draft(**payload.model_dump())
    return ApiResponse.ok(DraftResponse(draft=draft))


@router.get("/{appraisal_id}", response_model=ApiResponse[AppraisalResponse])
def get_appraisal(
    appraisal_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return ApiResponse.ok(AppraisalResponse.model_validate(AppraisalService(db).get(ctx, appraisal_id)))


@router.patch("/{appraisal_id}", response_model=ApiResponse[AppraisalResponse])
def update_appraisal(
    appraisal_id: int,
    payload: AppraisalUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    appraisal = AppraisalService(db).update(ctx, appraisal_id, payload.model_dump(exclude_unset=True))
    return ApiResponse.ok(AppraisalResponse.model_validate(appraisal))


# PUT behaves exactly like PATCH for appraisals
router.add_api_route(
    "/{appraisal_id}",
    update_appraisal,
    methods=["PUT"],
    response_model=ApiResponse[AppraisalResponse],
)
