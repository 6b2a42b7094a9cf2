"""Domain records for PostLift."""

from postlift.models.attribution import (
    AttributedOrder,
    AttributionResult,
    ConfidenceResult,
    InfluencerAttribution,
    PostAttribution,
    Signal,
    SignalBreakdown,
    SignalType,
)
from postlift.models.influencer import Influencer
from postlift.models.order import LineItem, Order
from postlift.models.social_post import MentionStatus, Post

__all__ = [
    "AttributedOrder",
    "AttributionResult",
    "ConfidenceResult",
    "Influencer",
    "InfluencerAttribution",
    "LineItem",
    "MentionStatus",
    "Order",
    "Post",
    "PostAttribution",
    "Signal",
    "SignalBreakdown",
    "SignalType",
]
