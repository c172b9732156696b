# pawsclinic/services/admin.py
from __future__ import annotations

import secrets
from datetime import date, datetime, timezone
from typing import Iterator, Optional, Sequence, Tuple

from pawsclinic.core.errors import AuthorizationError, ConfigurationError
from pawsclinic.crud.appointment import AppointmentStore
from pawsclinic.db.models.appointment import AppointmentRequest

ADMIN_LIST_LIMIT = 200


class AdminGate:
    """Shared-secret check for the admin endpoints. Fails closed."""

    def __init__(self, admin_secret: Optional[str]):
        self.admin_secret = admin_secret or ""

    def authorize(self, supplied: Optional[str]) -> None:
        if not self.admin_secret:
            raise ConfigurationError("ADMIN_SECRET not configured on server")
        if not supplied or not secrets.compare_digest(supplied.encode(), self.admin_secret.encode()):
            raise AuthorizationError("Unauthorized")


def backup_filename(today: Optional[date] = None) -> str:
    today = today or datetime.now(timezone.utc).date()
    return f"appointments-backup-{today.isoformat()}.db"


class AdminQueryService:
    def __init__(self, store: AppointmentStore):
        self.store = store

    async def list_appointments(self) -> Sequence[AppointmentRequest]:
        return await self.store.list_recent(ADMIN_LIST_LIMIT)

    def export_database_file(self) -> Tuple[str, Iterator[bytes]]:
        """Return the download filename and a byte stream of the whole store."""
        return backup_filename(), self.store.export_snapshot()
