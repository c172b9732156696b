# pawsclinic/db/models/appointment.py

from __future__ import annotations
from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from pawsclinic.db.session import Base


class AppointmentRequest(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        sa.Index("ix_appointments_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    owner_name: Mapped[str] = mapped_column(sa.Text, nullable=False)
    phone: Mapped[str] = mapped_column(sa.Text, nullable=False)
    email: Mapped[str | None] = mapped_column(sa.Text)
    pet_name: Mapped[str] = mapped_column(sa.Text, nullable=False)
    species: Mapped[str] = mapped_column(sa.Text, nullable=False, server_default="Unknown")
    service: Mapped[str] = mapped_column(sa.Text, nullable=False)
    preferred_date: Mapped[str | None] = mapped_column(sa.Text)
    preferred_time: Mapped[str | None] = mapped_column(sa.Text)
    notes: Mapped[str | None] = mapped_column(sa.Text)

    # UTC, stamped by SQLite when the row is written
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("(strftime('%Y-%m-%d %H:%M:%f', 'now'))"),
    )
