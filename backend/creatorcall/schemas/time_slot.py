# backend/creatorcall/schemas/time_slot.py
"""Time slot schemas."""

from pydantic import model_validator

from ._strict_base import StrictModel, StrictRequestModel
from .base import UtcDatetime


class TimeSlotCreate(StrictRequestModel):
    start_time: UtcDatetime
    end_time: UtcDatetime

    @model_validator(mode="after")
    def _check_order(self) -> "TimeSlotCreate":
        if self.end_time <= self.start_time:
            raise ValueError("endTime must be after startTime")
        return self


class TimeSlotResponse(StrictModel):
    id: int
    creator_id: int
    start_time: UtcDatetime
    end_time: UtcDatetime
    is_available: bool
