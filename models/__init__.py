from datetime import datetime, time, date as dt_date
from enum import Enum as PyEnum

from flask_login import UserMixin
from sqlalchemy import (
    ForeignKey, UniqueConstraint, Index, Boolean, Date, DateTime, Time,
    String, Text, JSON
)
from sqlalchemy.orm import relationship, Mapped, mapped_column
from werkzeug.security import generate_password_hash, check_password_hash

from extensions import db, login_manager

# largest primary key a signed 64-bit INTEGER column holds
MAX_ID = 2**63 - 1

# ---------- Roles ----------
class Role(str, PyEnum):
    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    LEAD_INSTRUCTOR = "lead_instructor"
    INSTRUCTOR = "instructor"
    VOLUNTEER_INSTRUCTOR = "volunteer_instructor"
    GUEST = "guest"

ROLE_LEVELS: dict[str, int] = {
    Role.SUPERADMIN.value: 5,
    Role.ADMIN.value: 4,
    Role.LEAD_INSTRUCTOR.value: 3,
    Role.INSTRUCTOR.value: 2,
    Role.VOLUNTEER_INSTRUCTOR.value: 2,
    Role.GUEST.value: 1,
}

# roles that post availability
INSTRUCTOR_ROLES = tuple(r for r, lvl in ROLE_LEVELS.items() if lvl >= 2)


def role_level(role: str | None) -> int:
    return ROLE_LEVELS.get((role or "").lower(), 0)


def has_min_role(role: str | None, required: Role) -> bool:
    return role_level(role) >= ROLE_LEVELS[required.value]


# ---------- Core Entities ----------
class User(UserMixin, db.Model):
    __tablename__ = "lab_users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(255))
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default=Role.INSTRUCTOR.value, index=True)
    is_active_flag: Mapped[bool] = mapped_column("is_active", Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    availability = relationship("InstructorAvailability", back_populates="instructor",
                                cascade="all, delete-orphan")

    def set_password(self, raw: str):
        self.password_hash = generate_password_hash(raw)

    def check_password(self, raw: str) -> bool:
        return check_password_hash(self.password_hash, raw)

    # Flask-Login expects .is_active
    @property
    def is_active(self):
        return bool(self.is_active_flag)

    @property
    def display_name(self) -> str:
        return self.name or self.email

    def __repr__(self):
        return f"<User {self.email}>"


@login_manager.user_loader
def load_user(user_id: str):
    try:
        return db.session.get(User, int(user_id))
    except (TypeError, ValueError):
        return None


class InstructorAvailability(db.Model):
    __tablename__ = "instructor_availability"

    id: Mapped[int] = mapped_column(primary_key=True)
    instructor_id: Mapped[int] = mapped_column(ForeignKey("lab_users.id", ondelete="CASCADE"), nullable=False, index=True)
    date: Mapped[dt_date] = mapped_column(Date, nullable=False, index=True)
    # both NULL when is_all_day
    start_time: Mapped[time | None] = mapped_column(Time)
    end_time: Mapped[time | None] = mapped_column(Time)
    is_all_day: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    instructor = relationship("User", back_populates="availability")

    __table_args__ = (
        UniqueConstraint("instructor_id", "date", "start_time", name="uq_availability_instructor_date_start"),
        Index("ix_availability_instructor_date", "instructor_id", "date"),
    )


class TeamAvailabilityView(db.Model):
    __tablename__ = "team_availability_views"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    instructor_emails: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    created_by: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "instructor_emails": list(self.instructor_emails or []),
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat(timespec="seconds") if self.created_at else None,
        }
