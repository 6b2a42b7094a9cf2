"""CSV import API endpoints."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from postlift.api.attribution import AttributionResponse, get_engine
from postlift.logging_config import get_logger
from postlift.models.fields import parse_timestamp
from postlift.services.attribution import AttributionEngine
from postlift.services.csv_importer import CsvImportError, CsvImporter

router = APIRouter(prefix="/api/v1/imports", tags=["imports"])

logger = get_logger(__name__)


class ImportReportResponse(BaseModel):
    """Row-level outcome of one CSV file."""

    import_type: str
    rows_total: int
    rows_imported: int
    rows_skipped: int
    errors: list[dict]


class CsvAttributionResponse(BaseModel):
    """Attribution computed from uploaded exports."""

    orders_import: ImportReportResponse
    posts_import: ImportReportResponse
    attribution: AttributionResponse


def _parse_form_datetime(value: str, field_name: str) -> datetime:
    try:
        return parse_timestamp(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {field_name} format")


def _import_and_compute(
    orders_content: bytes,
    posts_content: bytes,
    start: datetime,
    end: datetime,
    engine: AttributionEngine,
) -> CsvAttributionResponse:
    """Parse both exports and run attribution (CPU-bound, runs off the event loop)."""
    importer = CsvImporter()
    orders, orders_report = importer.load_orders(orders_content)
    influencers, posts_report = importer.load_influencers(posts_content)

    result = engine.compute_attribution(orders, influencers, start, end)

    return CsvAttributionResponse(
        orders_import=ImportReportResponse(**orders_report.to_dict()),
        posts_import=ImportReportResponse(**posts_report.to_dict()),
        attribution=AttributionResponse(**result.to_dict()),
    )


@router.post("/attribution", response_model=CsvAttributionResponse)
async def import_and_attribute(
    orders_file: Annotated[UploadFile, File(description="CSV export of orders, one row per line item")],
    posts_file: Annotated[UploadFile, File(description="CSV export of influencer posts")],
    campaign_start: Annotated[str, Form(description="Campaign start (ISO format)")],
    campaign_end: Annotated[str, Form(description="Campaign end (ISO format)")],
    engine: Annotated[AttributionEngine, Depends(get_engine)],
) -> CsvAttributionResponse:
    """
    Run attribution straight from CSV exports.

    Orders CSV columns:
    - order_id/id/name, created_at/date, total_price/total (required)
    - email, item_title/lineitem name, item_quantity, item_price (optional)

    Posts CSV columns:
    - username/influencer, post_id/id/shortcode, timestamp/posted_at (required)
    - caption, likes, comments, mentions_product, followers, budget (optional)
    """
    start = _parse_form_datetime(campaign_start, "campaign_start")
    end = _parse_form_datetime(campaign_end, "campaign_end")

    orders_content = await orders_file.read()
    posts_content = await posts_file.read()

    try:
        return await run_in_threadpool(
            _import_and_compute, orders_content, posts_content, start, end, engine
        )
    except CsvImportError as e:
        logger.info("csv_import_rejected", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
