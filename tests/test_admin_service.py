#!/usr/bin/env python3
"""
Tests for the admin secret gate and admin queries.
"""

from datetime import date

import pytest

from pawsclinic.core.errors import AuthorizationError, ConfigurationError, NotFoundError
from pawsclinic.crud.appointment import AppointmentStore
from pawsclinic.db.session import Database
from pawsclinic.services.admin import ADMIN_LIST_LIMIT, AdminGate, AdminQueryService, backup_filename


class TestAdminGate:

    def test_correct_secret_allowed(self):
        AdminGate("hunter2").authorize("hunter2")

    @pytest.mark.parametrize("supplied", ["hunter3", "hunter2 ", "Hunter2", "", None])
    def test_wrong_secret_denied(self, supplied):
        with pytest.raises(AuthorizationError):
            AdminGate("hunter2").authorize(supplied)

    @pytest.mark.parametrize("configured", [None, ""])
    @pytest.mark.parametrize("supplied", ["", None, "anything"])
    def test_unconfigured_secret_fails_closed(self, configured, supplied):
        with pytest.raises(ConfigurationError):
            AdminGate(configured).authorize(supplied)

    def test_non_ascii_secret(self):
        AdminGate("pâté-secret").authorize("pâté-secret")
        with pytest.raises(AuthorizationError):
            AdminGate("pâté-secret").authorize("pate-secret")


def test_backup_filename_is_date_stamped():
    assert backup_filename(date(2026, 10, 18)) == "appointments-backup-2026-10-18.db"


@pytest.mark.asyncio
async def test_list_appointments_caps_at_limit(store):
    for i in range(ADMIN_LIST_LIMIT + 5):
        await store.insert(owner_name=f"owner-{i}", phone="555", pet_name="Rex",
                           species="Dog", service="Checkup")

    rows = await AdminQueryService(store).list_appointments()

    assert len(rows) == ADMIN_LIST_LIMIT == 200
    assert rows[0].owner_name == f"owner-{ADMIN_LIST_LIMIT + 4}"


def test_export_missing_database(tmp_path):
    queries = AdminQueryService(AppointmentStore(Database(tmp_path / "gone.db")))
    with pytest.raises(NotFoundError):
        queries.export_database_file()
