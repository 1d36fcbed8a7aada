import logging
from fastapi import APIRouter, Depends, Query, status
from cafe_api.core.auth import require
from cafe_api.models.user import User
from cafe_api.schemas.report import SalesReportRequest
from cafe_api.schemas.response import SuccessResponse
from cafe_api.services.report_service import (
    generate_inventory_report,
    generate_sales_report,
    get_dashboard_metrics,
    get_report_history,
    get_staff_dashboard,
    get_top_selling,
)

log = logging.getLogger("uvicorn")

dashboard_router = APIRouter()
router = APIRouter()


@dashboard_router.get("/stats", response_model=SuccessResponse)
async def dashboard_stats(user: User = Depends(require("dashboard:read"))):
    metrics = await get_dashboard_metrics()
    return SuccessResponse(data=metrics.model_dump(mode="json"))


@dashboard_router.get("/staff", response_model=SuccessResponse)
async def staff_dashboard(user: User = Depends(require("dashboard:staff"))):
    """Today's order counts per status."""
    return SuccessResponse(data=await get_staff_dashboard())


@dashboard_router.get("/top-selling", response_model=SuccessResponse)
async def top_selling(
    limit: int = Query(5, ge=1, le=50),
    user: User = Depends(require("dashboard:read")),
):
    items = await get_top_selling(limit)
    return SuccessResponse(data=[item.model_dump(mode="json") for item in items])


@router.post("/sales", status_code=status.HTTP_200_OK, response_model=SuccessResponse)
async def sales_report(payload: SalesReportRequest, user: User = Depends(require("reports:read"))):
    report = await generate_sales_report(payload.start_date, payload.end_date)
    log.info(f"Sales report {payload.start_date} to {payload.end_date} requested by {user.username}.")
    return SuccessResponse(data=report.model_dump(mode="json"))


@router.get("/inventory", response_model=SuccessResponse)
async def inventory_report(user: User = Depends(require("reports:read"))):
    report = await generate_inventory_report()
    return SuccessResponse(data=report.model_dump(mode="json"))


@router.get("/history", response_model=SuccessResponse)
async def report_history(user: User = Depends(require("reports:read"))):
    history = await get_report_history()
    return SuccessResponse(data=[entry.model_dump() for entry in history])
