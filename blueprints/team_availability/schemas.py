from __future__ import annotations
from datetime import date
from typing import Optional, List
from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

DEFAULT_MAX_DAYS = 366


def normalize_emails(raw) -> List[str]:
    """Split/trim/lower-case and dedupe, keeping the first-seen order."""
    if raw is None:
        return []
    items = raw.split(",") if isinstance(raw, str) else list(raw)
    out: List[str] = []
    for e in items:
        e = str(e).strip().lower()
        if e and e not in out:
            out.append(e)
    return out


class TeamAvailabilityQuery(BaseModel):
    emails: List[str] = Field(default_factory=list, validate_default=True)
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("emails", mode="before")
    @classmethod
    def _split_emails(cls, v):
        if not v:
            raise ValueError("emails parameter is required")
        emails = normalize_emails(v)
        if len(emails) < 2:
            raise ValueError("At least 2 instructor emails are required")
        return emails

    @model_validator(mode="after")
    def _check_range(self, info: ValidationInfo):
        if self.start_date is None or self.end_date is None:
            raise ValueError("start_date and end_date are required")
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        max_days = (info.context or {}).get("max_days", DEFAULT_MAX_DAYS)
        if (self.end_date - self.start_date).days + 1 > max_days:
            raise ValueError(f"Date range may not exceed {max_days} days")
        return self


class TeamViewIn(BaseModel):
    name: str = Field(default="", max_length=200, validate_default=True)
    instructor_emails: List[str] = Field(default_factory=list, validate_default=True)

    @field_validator("name")
    @classmethod
    def _name_required(cls, v: str):
        if not v or not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator("instructor_emails", mode="before")
    @classmethod
    def _emails(cls, v):
        if not isinstance(v, (list, tuple)):
            raise ValueError("At least 2 instructor emails are required")
        emails = normalize_emails(v)
        if len(emails) < 2:
            raise ValueError("At least 2 instructor emails are required")
        return emails
