from .engine import (  # noqa: F401
    AvailabilitySlot, InstructorDaySlot, OverlapWindow, TeamAvailabilityReport,
    build_instructor_slots, compute_overlap, merge_windows, assemble_report,
)
from .timeutils import InvalidTimeError, time_to_minutes, minutes_to_time  # noqa: F401
