from fastapi import APIRouter, Depends, HTTPException
from spacebook.api.v1.schemas import (
    AvailabilityCheckRequestSchema,
    AvailabilityCheckResponseSchema,
    SlotSchema,
)
from spacebook.wiring.dependencies import get_check_availability_use_case
from spacebook.application.use_cases.check_availability import CheckAvailabilityUseCase
from spacebook.application.exceptions import DataSourceError, InvalidRequest
from spacebook.domain.entities.time_interval import format_closing_minutes, format_minutes

router = APIRouter()


@router.post("/availability/check", response_model=AvailabilityCheckResponseSchema)
async def check_availability(
    req: AvailabilityCheckRequestSchema,
    uc: CheckAvailabilityUseCase = Depends(get_check_availability_use_case),
):
    try:
        request, verdict = await uc.execute(
            space_id=req.space_id,
            date=req.date,
            start_time=req.start_time,
            duration_hours=req.duration_hours,
        )
    except InvalidRequest as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DataSourceError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return AvailabilityCheckResponseSchema(
        space_id=request.space_id,
        date=request.date,
        has_conflict=verdict.has_conflict,
        conflict_type=verdict.kind if verdict.has_conflict else None,
        message=verdict.message,
        available_slots=[
            SlotSchema(start=format_minutes(slot.start_minutes), end=format_closing_minutes(slot.end_minutes))
            for slot in verdict.alternatives
        ],
    )
