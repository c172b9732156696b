# pawsclinic/crud/appointment.py

from __future__ import annotations
from pathlib import Path
from typing import Iterator, Optional, Sequence

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError

from pawsclinic.core.errors import NotFoundError, PersistenceError
from pawsclinic.db.models.appointment import AppointmentRequest
from pawsclinic.db.session import Database

SNAPSHOT_CHUNK_SIZE = 64 * 1024


class AppointmentStore:
    """
    Append-only access to the appointments table.

    Rows are only ever inserted by the intake path and read by the admin
    path; there is no update or delete.
    """

    def __init__(self, database: Database):
        self.database = database

    async def insert(
        self,
        *,
        owner_name: str,
        phone: str,
        pet_name: str,
        species: str,
        service: str,
        email: Optional[str] = None,
        preferred_date: Optional[str] = None,
        preferred_time: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        appt = AppointmentRequest(
            owner_name=owner_name,
            phone=phone,
            email=email,
            pet_name=pet_name,
            species=species,
            service=service,
            preferred_date=preferred_date,
            preferred_time=preferred_time,
            notes=notes,
        )
        try:
            async with self.database.sessionmaker() as db:
                db.add(appt)
                await db.commit()
                return appt.id
        except (SQLAlchemyError, OSError) as e:
            raise PersistenceError(f"Failed to save appointment: {e}") from e

    async def list_recent(self, limit: int) -> Sequence[AppointmentRequest]:
        q = (
            sa.select(AppointmentRequest)
            .order_by(AppointmentRequest.created_at.desc(), AppointmentRequest.id.desc())
            .limit(max(limit, 0))
        )
        try:
            async with self.database.sessionmaker() as db:
                res = await db.execute(q)
                return res.scalars().all()
        except (SQLAlchemyError, OSError) as e:
            raise PersistenceError(f"Failed to fetch appointments: {e}") from e

    def export_snapshot(self) -> Iterator[bytes]:
        """
        Stream the raw database file.

        A missing file is reported here, before any response is started.
        The handle itself is only opened once the first chunk is pulled, so
        a stream that is discarded unread leaves nothing open. Inserts are
        not locked out while the stream is read.
        """
        if not self.database.path.is_file():
            raise NotFoundError("Database file not found")
        return _read_chunks(self.database.path)


def _read_chunks(path: Path) -> Iterator[bytes]:
    with path.open("rb") as fh:
        while True:
            chunk = fh.read(SNAPSHOT_CHUNK_SIZE)
            if not chunk:
                break
            yield chunk
