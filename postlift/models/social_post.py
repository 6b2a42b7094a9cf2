"""Social media post model."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from postlift.models.fields import parse_count, parse_timestamp


class MentionStatus(str, Enum):
    """
    Whether a post promotes the campaign product.

    UNCLASSIFIED is a real state: nobody (human or heuristic) has looked at
    the post yet. Only MENTIONS posts take part in attribution.
    """

    MENTIONS = "mentions"
    NO_MENTION = "no_mention"
    UNCLASSIFIED = "unclassified"

    @classmethod
    def from_flag(cls, flag: Any) -> "MentionStatus":
        """Map the upstream true/false/null flag (or its string form)."""
        if isinstance(flag, cls):
            return flag
        if flag is None:
            return cls.UNCLASSIFIED
        if isinstance(flag, bool):
            return cls.MENTIONS if flag else cls.NO_MENTION

        text = str(flag).strip().lower()
        if text in ("true", "1", "yes", "y", cls.MENTIONS.value):
            return cls.MENTIONS
        if text in ("false", "0", "no", "n", cls.NO_MENTION.value):
            return cls.NO_MENTION
        return cls.UNCLASSIFIED


@dataclass(frozen=True)
class Post:
    """
    A scraped post from an influencer.

    Engagement counters are the latest known cumulative values. Fields are
    normalized on construction: UTC timestamp, non-negative counters and a
    MentionStatus for whatever flag the scraper supplied.
    """

    id: str
    timestamp: datetime
    caption: str = ""
    likes_count: int = 0
    comments_count: int = 0
    mentions_product: MentionStatus = MentionStatus.UNCLASSIFIED

    def __post_init__(self):
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "timestamp", parse_timestamp(self.timestamp))
        object.__setattr__(self, "caption", self.caption or "")
        object.__setattr__(self, "likes_count", parse_count(self.likes_count))
        object.__setattr__(self, "comments_count", parse_count(self.comments_count))
        object.__setattr__(
            self, "mentions_product", MentionStatus.from_flag(self.mentions_product)
        )

    @classmethod
    def create(
        cls,
        id: str | int,
        timestamp: datetime | str,
        caption: str | None = "",
        likes_count: Any = 0,
        comments_count: Any = 0,
        mentions_product: Any = None,
    ) -> "Post":
        return cls(
            id=id,
            timestamp=timestamp,
            caption=caption,
            likes_count=likes_count,
            comments_count=comments_count,
            mentions_product=mentions_product,
        )

    @property
    def is_product_post(self) -> bool:
        return self.mentions_product is MentionStatus.MENTIONS
