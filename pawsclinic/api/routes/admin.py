# pawsclinic/api/routes/admin.py
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from pawsclinic.api.deps import get_admin_queries, require_admin, require_admin_header
from pawsclinic.core.logging import get_logger
from pawsclinic.schemas.appointment import AppointmentListResponse, AppointmentOut
from pawsclinic.services.admin import AdminQueryService

router = APIRouter(prefix="/api", tags=["admin"])

logger = get_logger(__name__)


@router.get("/appointments", response_model=AppointmentListResponse, dependencies=[Depends(require_admin)])
async def list_appointments(
    queries: AdminQueryService = Depends(get_admin_queries),
) -> AppointmentListResponse:
    rows = await queries.list_appointments()
    return AppointmentListResponse(
        success=True,
        appointments=[AppointmentOut.model_validate(r) for r in rows],
    )


@router.get("/download-db", dependencies=[Depends(require_admin_header)])
async def download_db(
    queries: AdminQueryService = Depends(get_admin_queries),
) -> StreamingResponse:
    filename, stream = queries.export_database_file()
    logger.info("database_export", filename=filename)
    return StreamingResponse(
        stream,
        media_type="application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
