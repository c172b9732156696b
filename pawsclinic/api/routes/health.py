# pawsclinic/api/routes/health.py
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError

from pawsclinic.api.deps import get_database
from pawsclinic.core.errors import ErrorSeverity, log_error
from pawsclinic.db.session import Database

router = APIRouter(tags=["health"])


# -------- Health / readiness (public) --------
@router.get("/health", include_in_schema=False)
async def health():
    return {"ok": True}


@router.get("/readyz", include_in_schema=False)
async def readyz(db: Database = Depends(get_database)):
    try:
        await db.ping()
    except (SQLAlchemyError, OSError) as e:
        log_error(e, {"endpoint": "/readyz"}, ErrorSeverity.HIGH)
        return JSONResponse({"db": "unavailable"}, status_code=503)
    return {"db": "ok"}


# The front end is hosted separately; send stray visitors there
@router.get("/", include_in_schema=False)
async def home(request: Request):
    return RedirectResponse(request.app.state.settings.PAGES_URL, status_code=302)
