from __future__ import annotations
from datetime import date as dt_date, time
from typing import Optional
from pydantic import BaseModel, Field, model_validator

class AvailabilityIn(BaseModel):
    date: dt_date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    is_all_day: bool = False
    notes: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode="after")
    def check_range(self):
        if self.is_all_day:
            # times are meaningless for an all-day slot
            self.start_time = None
            self.end_time = None
            return self
        if self.start_time is None or self.end_time is None:
            raise ValueError("start_time and end_time are required unless is_all_day is set")
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self

class AvailabilityOut(BaseModel):
    id: int
    date: dt_date
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    is_all_day: bool
    notes: Optional[str] = None
