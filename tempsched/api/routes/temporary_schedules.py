"""Temporary Schedule Routes: list, set and clear overrides for one schedule.

Invariants:
    - Caller identity comes from the X-User-ID header; the service authorizes it
    - Bodies are shape-validated by pydantic; scheduling rules by the service
    - Writes return 204 with no body
"""

import logging

from fastapi import APIRouter, Depends, Header, Request, status

from tempsched.core.domain_types import Caller
from tempsched.schemas.temporary_schedule import (
    ClearTemporarySchedulesBody,
    TemporaryScheduleBody,
    TemporarySchedulesResponse,
)
from tempsched.services.temporary_schedules import TemporaryScheduleService

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/v1/schedules/{schedule_id}/temporary-schedules",
    tags=["temporary-schedules"],
)


def get_service(request: Request) -> TemporaryScheduleService:
    return request.app.state.temporary_schedule_service


def get_caller(x_user_id: str | None = Header(default=None)) -> Caller:
    return Caller(user_id=x_user_id)


@router.get("", response_model=TemporarySchedulesResponse)
async def list_temporary_schedules(
    schedule_id: str,
    caller: Caller = Depends(get_caller),
    service: TemporaryScheduleService = Depends(get_service),
):
    schedules = await service.list_temporary_schedules(caller, schedule_id)
    return TemporarySchedulesResponse(
        schedule_id=schedule_id,
        temporary_schedules=[
            TemporaryScheduleBody.from_domain(t) for t in schedules
        ],
    )


@router.put("", status_code=status.HTTP_204_NO_CONTENT)
async def set_temporary_schedule(
    schedule_id: str,
    body: TemporaryScheduleBody,
    caller: Caller = Depends(get_caller),
    service: TemporaryScheduleService = Depends(get_service),
):
    await service.set_temporary_schedule(caller, schedule_id, body.to_domain())


@router.post("/clear", status_code=status.HTTP_204_NO_CONTENT)
async def clear_temporary_schedules(
    schedule_id: str,
    body: ClearTemporarySchedulesBody,
    caller: Caller = Depends(get_caller),
    service: TemporaryScheduleService = Depends(get_service),
):
    await service.clear_temporary_schedules(
        caller, schedule_id, body.start, body.end,
    )
