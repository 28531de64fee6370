from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class Lab(Base, TimestampMixin):
    __tablename__ = "labs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True)
    room_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    capacity: Mapped[int] = mapped_column(Integer, default=0)
    current_count: Mapped[int] = mapped_column(Integer, default=0)
    seating_config: Mapped[dict[str, int]] = mapped_column(JSON, default=dict)
    used_slots: Mapped[dict[str, int]] = mapped_column(JSON, default=dict)


class Participant(Base, TimestampMixin):
    __tablename__ = "participants"

    participant_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    team_id: Mapped[str] = mapped_column(String(64), index=True)
    assigned_lab: Mapped[str | None] = mapped_column(String(255), nullable=True)
    assigned_seat: Mapped[str | None] = mapped_column(String(64), nullable=True)
    domain: Mapped[str | None] = mapped_column(String(255), nullable=True)
    has_confirmed_problem: Mapped[bool] = mapped_column(Boolean, default=False)


class ProblemAssignmentRecord(Base, TimestampMixin):
    __tablename__ = "problem_assignments"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    participant_id: Mapped[str] = mapped_column(
        ForeignKey("participants.participant_id"), unique=True, index=True
    )
    team_id: Mapped[str] = mapped_column(String(64), index=True)
    offered_problems: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    selected_problem: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    is_confirmed: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    refresh_count: Mapped[int] = mapped_column(Integer, default=0)
    max_refreshes: Mapped[int] = mapped_column(Integer, default=2)
    refresh_history: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    assigned_by: Mapped[str] = mapped_column(String(255), default="system")
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    selected_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class AuditLog(Base, TimestampMixin):
    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    actor: Mapped[str] = mapped_column(String(255))
    action: Mapped[str] = mapped_column(String(255))
    meta: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
