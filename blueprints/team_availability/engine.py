# blueprints/team_availability/engine.py
"""Team availability overlap engine.

Pure functions over already-fetched availability rows: no database, no
request state. Times are handled as minutes since midnight and formatted to
``HH:MM`` only when a window is serialized.

Intervals are half-open, ``[start, end)``. Coverage of a segment between two
consecutive boundary points is decided at its midpoint, so two slots that
only touch (09:00-10:00 and 10:00-11:00) never overlap.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date as dt_date
from typing import Dict, Iterable, List, Mapping, Sequence

from .timeutils import DAY_START, DAY_END, time_to_minutes, minutes_to_time

DEFAULT_START = "00:00"
DEFAULT_END = "23:59"


@dataclass(frozen=True)
class AvailabilitySlot:
    """One availability row, normalized at the fetch boundary."""
    instructor_email: str
    instructor_name: str | None
    date: dt_date
    start_time: str | None = None
    end_time: str | None = None
    is_all_day: bool = False

    def interval(self) -> "InstructorDaySlot":
        if self.is_all_day:
            return InstructorDaySlot(DAY_START, DAY_END)
        return InstructorDaySlot(
            time_to_minutes(self.start_time or DEFAULT_START),
            time_to_minutes(self.end_time or DEFAULT_END),
        )


@dataclass(frozen=True)
class InstructorDaySlot:
    start: int
    end: int

    def covers(self, point: float) -> bool:
        return self.start <= point < self.end


@dataclass
class OverlapWindow:
    date: dt_date
    start: int
    end: int

    @property
    def duration_minutes(self) -> int:
        return self.end - self.start

    @property
    def day_name(self) -> str:
        # e.g. "Monday, September 1, 2025"
        return f"{self.date:%A}, {self.date:%B} {self.date.day}, {self.date.year}"

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "day_name": self.day_name,
            "start_time": minutes_to_time(self.start),
            "end_time": minutes_to_time(self.end),
            "duration_minutes": self.duration_minutes,
        }


@dataclass
class InstructorListing:
    name: str
    email: str
    slots: List[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"name": self.name, "email": self.email, "slots": list(self.slots)}


@dataclass
class TeamAvailabilityReport:
    overlaps: List[OverlapWindow] = field(default_factory=list)
    individual: List[InstructorListing] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "overlaps": [w.to_dict() for w in self.overlaps],
            "individual": [i.to_dict() for i in self.individual],
        }


SlotIndex = Dict[str, Dict[dt_date, List[InstructorDaySlot]]]


def build_instructor_slots(slots: Iterable[AvailabilitySlot]) -> SlotIndex:
    """email -> date -> intervals, in input order. Same-day rows are not merged."""
    index: SlotIndex = {}
    for s in slots:
        if not s.instructor_email:
            continue
        index.setdefault(s.instructor_email, {}).setdefault(s.date, []).append(s.interval())
    return index


def merge_windows(windows: Sequence[OverlapWindow]) -> List[OverlapWindow]:
    merged: List[OverlapWindow] = []
    for w in windows:
        last = merged[-1] if merged else None
        if last is not None and last.date == w.date and last.end == w.start:
            last.end = w.end
        else:
            merged.append(OverlapWindow(w.date, w.start, w.end))
    return merged


def compute_overlap(
    day: dt_date,
    instructor_slots: Mapping[str, Sequence[InstructorDaySlot]],
    required_emails: Sequence[str],
) -> List[OverlapWindow]:
    """Windows on ``day`` during which every required instructor is available."""
    # an instructor with nothing on this day rules the day out
    for email in required_emails:
        if not instructor_slots.get(email):
            return []

    boundaries = sorted({
        point
        for email in required_emails
        for slot in instructor_slots[email]
        for point in (slot.start, slot.end)
    })

    segments: List[OverlapWindow] = []
    for seg_start, seg_end in zip(boundaries, boundaries[1:]):
        if seg_end <= seg_start:
            continue
        mid = (seg_start + seg_end) / 2
        if all(any(s.covers(mid) for s in instructor_slots[email]) for email in required_emails):
            segments.append(OverlapWindow(day, seg_start, seg_end))

    return merge_windows(segments)


def _display_slot(s: AvailabilitySlot) -> dict:
    return {
        "date": s.date.isoformat(),
        "start_time": DEFAULT_START if s.is_all_day else (s.start_time or DEFAULT_START),
        "end_time": DEFAULT_END if s.is_all_day else (s.end_time or DEFAULT_END),
        "is_all_day": s.is_all_day,
    }


def assemble_report(slots: Sequence[AvailabilitySlot], emails: Sequence[str]) -> TeamAvailabilityReport:
    """Overlaps for every date any instructor has data on, plus per-instructor listings.

    ``emails`` is the full required set; an email without rows contributes no
    availability and therefore empties every date.
    """
    index = build_instructor_slots(slots)

    all_dates = sorted({d for by_date in index.values() for d in by_date})
    overlaps: List[OverlapWindow] = []
    for day in all_dates:
        day_slots = {email: index.get(email, {}).get(day, []) for email in emails}
        overlaps.extend(compute_overlap(day, day_slots, emails))

    individual: Dict[str, InstructorListing] = {}
    for s in slots:
        if not s.instructor_email:
            continue
        entry = individual.get(s.instructor_email)
        if entry is None:
            entry = individual[s.instructor_email] = InstructorListing(
                name=s.instructor_name or s.instructor_email,
                email=s.instructor_email,
            )
        entry.slots.append(_display_slot(s))

    return TeamAvailabilityReport(overlaps=overlaps, individual=list(individual.values()))
