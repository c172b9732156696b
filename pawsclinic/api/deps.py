# pawsclinic/api/deps.py
"""
FastAPI dependencies handing out the services built at startup.
"""
from typing import Optional

from fastapi import Depends, Header, Query, Request

from pawsclinic.db.session import Database
from pawsclinic.services.admin import AdminGate, AdminQueryService
from pawsclinic.services.intake import IntakeHandler


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_intake_handler(request: Request) -> IntakeHandler:
    return request.app.state.intake


def get_admin_gate(request: Request) -> AdminGate:
    return request.app.state.admin_gate


def get_admin_queries(request: Request) -> AdminQueryService:
    return request.app.state.admin_queries


def require_admin(
    x_admin_secret: Optional[str] = Header(None, alias="X-Admin-Secret"),
    secret: Optional[str] = Query(None, description="Admin secret (alternative to the header)"),
    gate: AdminGate = Depends(get_admin_gate),
) -> None:
    gate.authorize(secret or x_admin_secret)


def require_admin_header(
    x_admin_secret: Optional[str] = Header(None, alias="X-Admin-Secret"),
    gate: AdminGate = Depends(get_admin_gate),
) -> None:
    gate.authorize(x_admin_secret)
