"""Job and absence models consumed by scheduling and payroll."""

from __future__ import annotations

from datetime import date, datetime, time
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Integer, String, Text, Time, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from arkelium.models.base import Base, TimestampMixin, tenant_fk, uuid_pk

DEFAULT_START_TIME = time(9, 0)
DEFAULT_DURATION_MINUTES = 120


class Job(Base, TimestampMixin):
    """A scheduled unit of cleaning work."""

    __tablename__ = "job"

    job_id: Mapped[UUID] = uuid_pk()
    tenant_id: Mapped[UUID] = tenant_fk()
    client_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("client.client_id"),
        nullable=False,
    )
    cleaner_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("employee.employee_id"),
        nullable=True,
    )
    scheduled_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="scheduled")
    job_type: Mapped[str | None] = mapped_column(String, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('scheduled', 'in_progress', 'completed', 'cancelled')",
            name="job_status_check",
        ),
        CheckConstraint(
            "duration_minutes IS NULL OR duration_minutes >= 0",
            name="job_duration_check",
        ),
    )

    @property
    def effective_start_time(self) -> time:
        return self.start_time or DEFAULT_START_TIME

    @property
    def effective_duration_minutes(self) -> int:
        """Booked length; a missing or zero duration books the default slot."""
        return self.duration_minutes or DEFAULT_DURATION_MINUTES


class AbsenceRequest(Base, TimestampMixin):
    """Time-off request for a cleaner."""

    __tablename__ = "absence_request"

    absence_request_id: Mapped[UUID] = uuid_pk()
    tenant_id: Mapped[UUID] = tenant_fk()
    cleaner_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="absence_request_status_check",
        ),
        CheckConstraint("end_date >= start_date", name="absence_request_dates_check"),
    )
