"""Workflow API router: thin pass-through to the database's workflow procedures."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from foodtech.db.session import get_db
from foodtech.schemas.schemas import (
    DeclineRequest, NotificationEventRequest, ProcedureResult, TestingResultRequest,
)
from foodtech.services.workflow_store import workflow_store
from foodtech.core.security import require_notifier, require_rd

router = APIRouter(tags=["workflow"])


@router.post("/rd/requests/{request_id}/recipes", response_model=ProcedureResult)
async def create_recipe(
    request_id: int,
    db: Session = Depends(get_db),
    payload: dict = Depends(require_rd),
):
    return ProcedureResult(result=workflow_store.create_development_recipe(db, request_id))


@router.post("/rd/recipes/{recipe_id}/copy", response_model=ProcedureResult)
async def copy_recipe(
    recipe_id: int,
    db: Session = Depends(get_db),
    payload: dict = Depends(require_rd),
):
    return ProcedureResult(result=workflow_store.copy_development_recipe(db, recipe_id))


@router.post("/rd/testing-samples/{testing_sample_id}/result", response_model=ProcedureResult)
async def set_testing_result(
    testing_sample_id: int,
    body: TestingResultRequest,
    db: Session = Depends(get_db),
    payload: dict = Depends(require_rd),
):
    result = workflow_store.set_sample_testing_result(db, testing_sample_id, body.result, body.comment)
    return ProcedureResult(result=result)


@router.post("/rd/requests/{request_id}/decline-from-testing", response_model=ProcedureResult)
async def decline_from_testing(
    request_id: int,
    body: DeclineRequest,
    db: Session = Depends(get_db),
    payload: dict = Depends(require_rd),
):
    return ProcedureResult(result=workflow_store.decline_request_from_testing(db, request_id, body.reason))


@router.post("/notifications/events", response_model=ProcedureResult)
async def enqueue_notification(
    body: NotificationEventRequest,
    db: Session = Depends(get_db),
    payload: dict = Depends(require_notifier),
):
    """Fan an event out to the notification outbox."""
    result = workflow_store.enqueue_notification_event(
        db, body.event_type, body.payload,
        event_id=body.event_id,
        recipient_profile_ids=body.recipient_profile_ids,
    )
    return ProcedureResult(result=result)
