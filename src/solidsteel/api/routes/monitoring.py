"""Browser-reported image-load monitoring."""

from typing import Any

from fastapi import APIRouter, Depends, Request, status

from solidsteel.api.rate_limit import limiter
from solidsteel.auth.dependencies import require_admin
from solidsteel.monitoring import (
    BlobErrorReport,
    ImageLoadMetric,
    ImageLoadMonitor,
    image_load_monitor,
    report_blob_error,
)

router = APIRouter(prefix="/api/monitoring", tags=["monitoring"])


def get_image_load_monitor() -> ImageLoadMonitor:
    return image_load_monitor


@router.post("/image-loads", status_code=status.HTTP_202_ACCEPTED)
@limiter.limit("120/minute")
async def record_image_load(
    request: Request,
    metric: ImageLoadMetric,
    monitor: ImageLoadMonitor = Depends(get_image_load_monitor),
) -> dict[str, bool]:
    monitor.record(metric)
    return {"success": True}


@router.post("/blob-errors", status_code=status.HTTP_202_ACCEPTED)
@limiter.limit("60/minute")
async def record_blob_error(request: Request, report: BlobErrorReport) -> dict[str, bool]:
    report_blob_error(report, request.client.host if request.client else None)
    return {"success": True}


@router.get("/image-loads/stats", dependencies=[Depends(require_admin)])
async def image_load_stats(
    monitor: ImageLoadMonitor = Depends(get_image_load_monitor),
) -> dict[str, Any]:
    return {"stats": monitor.stats()}
