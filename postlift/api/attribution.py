"""Attribution API endpoints."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from postlift.config import settings
from postlift.logging_config import get_logger
from postlift.models import Influencer, LineItem, Order, Post
from postlift.services.attribution import AttributionEngine
from postlift.services.baseline import calculate_seasonal_baseline
from postlift.services.report import AttributionReporter
from postlift.services.timeline import build_hourly_timeline

router = APIRouter(prefix="/api/v1/attribution", tags=["attribution"])

logger = get_logger(__name__)


def get_engine() -> AttributionEngine:
    """Dependency: engine tuned from application settings."""
    return AttributionEngine(settings.attribution_weights())


class LineItemPayload(BaseModel):
    """A purchased line item."""

    title: str = ""
    quantity: int = 1
    price: float | str | None = None


class OrderPayload(BaseModel):
    """An order as supplied by the order collaborator."""

    id: int | str
    created_at: datetime
    total_price: float | str | None = None
    customer_email: str | None = None
    line_items: list[LineItemPayload] = []

    def to_order(self) -> Order:
        return Order.create(
            id=self.id,
            created_at=self.created_at,
            total_price=self.total_price,
            customer_email=self.customer_email,
            line_items=[
                LineItem.create(title=i.title, quantity=i.quantity, price=i.price)
                for i in self.line_items
            ],
        )


class PostPayload(BaseModel):
    """A scraped post; mentions_product is true, false or null (unclassified)."""

    id: int | str
    timestamp: datetime
    caption: str | None = ""
    likes_count: int = 0
    comments_count: int = 0
    mentions_product: bool | None = None

    def to_post(self) -> Post:
        return Post.create(
            id=self.id,
            timestamp=self.timestamp,
            caption=self.caption,
            likes_count=self.likes_count,
            comments_count=self.comments_count,
            mentions_product=self.mentions_product,
        )


class InfluencerPayload(BaseModel):
    """A campaign influencer with their posts."""

    username: str
    full_name: str | None = None
    followers_count: int = 0
    budget: float = 0.0
    posts: list[PostPayload] = []

    def to_influencer(self) -> Influencer:
        return Influencer(
            username=self.username,
            full_name=self.full_name,
            followers_count=self.followers_count,
            budget=max(self.budget, 0.0),
            posts=tuple(p.to_post() for p in self.posts),
        )


class AttributionRequest(BaseModel):
    """Orders, influencers and the campaign window to analyze."""

    orders: list[OrderPayload]
    influencers: list[InfluencerPayload]
    campaign_start: datetime
    campaign_end: datetime

    def domain_orders(self) -> list[Order]:
        return [o.to_order() for o in self.orders]

    def domain_influencers(self) -> list[Influencer]:
        return [i.to_influencer() for i in self.influencers]


class BaselineRequest(BaseModel):
    """Order history and the date the baseline window ends at."""

    orders: list[OrderPayload]
    reference_date: datetime
    lookback_days: int = Field(default=30, ge=1, le=365)


class BaselineResponse(BaseModel):
    """
    Seasonal baseline.

    by_day_of_week is indexed Monday = 0 ... Sunday = 6; by_hour_of_day is
    indexed by UTC hour 0-23.
    """

    daily_average: float
    by_day_of_week: list[float]
    by_hour_of_day: list[float]
    order_count: int
    lookback_days: int


class ConfidenceResponse(BaseModel):
    """Confidence score response."""

    score: float
    level: str
    reasons: list[str]
    min_orders_met: bool


class SignalBreakdownResponse(BaseModel):
    """Attributed revenue per signal."""

    temporal: float
    new_customer: float
    product_match: float
    anomaly: float
    baseline: float


class InfluencerAttributionResponse(BaseModel):
    """Attribution for one influencer."""

    username: str
    posts: list[dict]
    total_attributed_revenue: float
    total_attributed_orders: float
    average_confidence: float
    signals: SignalBreakdownResponse


class AttributionResponse(BaseModel):
    """Response from campaign attribution."""

    influencers: list[InfluencerAttributionResponse]
    total_attributed_revenue: float
    total_attributed_orders: float
    campaign_revenue: float
    campaign_days: int
    baseline_revenue: float
    incremental_revenue: float
    confidence_score: float
    confidence: ConfidenceResponse
    methodology: list[str]


class HourlyPointResponse(BaseModel):
    """One hour of the sales timeline."""

    hour: datetime
    revenue: float
    orders: int
    expected_revenue: float
    is_anomaly: bool
    post_influencer: str | None


class TimelineResponse(BaseModel):
    """Hour-by-hour sales over the campaign window."""

    points: list[HourlyPointResponse]


class ReportResponse(BaseModel):
    """Campaign report, structured and as text."""

    report: dict
    text: str


@router.post("/compute", response_model=AttributionResponse)
def compute_campaign_attribution(
    request: AttributionRequest,
    engine: Annotated[AttributionEngine, Depends(get_engine)],
) -> AttributionResponse:
    """
    Attribute campaign revenue to influencer posts.

    Returns:
    - Per-influencer attributed revenue, fractional orders and signal breakdown
    - Campaign revenue vs seasonal baseline (incremental lift)
    - Global confidence score with reasons
    """
    logger.info(
        "attribution_requested",
        orders=len(request.orders),
        influencers=len(request.influencers),
    )

    result = engine.compute_attribution(
        request.domain_orders(),
        request.domain_influencers(),
        request.campaign_start,
        request.campaign_end,
    )

    return AttributionResponse(**result.to_dict())


@router.post("/baseline", response_model=BaselineResponse)
def get_baseline(request: BaselineRequest) -> BaselineResponse:
    """
    Seasonal revenue baseline for the lookback window ending at reference_date.

    Baseline is used to measure lift and to detect hourly sales spikes.
    """
    baseline = calculate_seasonal_baseline(
        [o.to_order() for o in request.orders],
        reference_date=request.reference_date,
        lookback_days=request.lookback_days,
    )

    return BaselineResponse(**baseline.to_dict())


@router.post("/timeline", response_model=TimelineResponse)
def get_timeline(
    request: AttributionRequest,
    engine: Annotated[AttributionEngine, Depends(get_engine)],
) -> TimelineResponse:
    """Hourly revenue vs expectation, with anomaly flags and post markers."""
    orders = request.domain_orders()
    baseline = engine.calculate_baseline(orders, baseline_end=request.campaign_start)

    points = build_hourly_timeline(
        orders,
        request.domain_influencers(),
        request.campaign_start,
        request.campaign_end,
        baseline,
        detector=engine.anomaly_detector,
    )

    return TimelineResponse(
        points=[HourlyPointResponse(**point.to_dict()) for point in points]
    )


@router.post("/report", response_model=ReportResponse)
def get_report(
    request: AttributionRequest,
    engine: Annotated[AttributionEngine, Depends(get_engine)],
) -> ReportResponse:
    """
    Campaign report with per-influencer ROI and confidence tiers.

    Suitable for email digests or plain text display.
    """
    influencers = request.domain_influencers()
    result = engine.compute_attribution(
        request.domain_orders(),
        influencers,
        request.campaign_start,
        request.campaign_end,
    )

    reporter = AttributionReporter()
    report = reporter.build_report(result, influencers)

    return ReportResponse(
        report=report.to_dict(),
        text=reporter.format_report_text(report),
    )
