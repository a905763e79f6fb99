from pydantic import BaseModel, Field

from spacebook.domain.entities.verdict import ConflictKind


class AvailabilityCheckRequestSchema(BaseModel):
    space_id: str = Field(min_length=1)
    date: str
    start_time: str
    duration_hours: float


class SlotSchema(BaseModel):
    start: str
    end: str


class AvailabilityCheckResponseSchema(BaseModel):
    space_id: str
    date: str
    has_conflict: bool
    conflict_type: ConflictKind | None = None
    message: str | None = None
    available_slots: list[SlotSchema] = Field(default_factory=list)
