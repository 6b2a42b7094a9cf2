"""Fuzzy matching of purchased products against a post caption."""

from dataclasses import dataclass, field
from typing import Sequence

from postlift.models import LineItem


@dataclass(frozen=True)
class ProductMatch:
    matches: bool
    matched_products: list[str] = field(default_factory=list)
    confidence: float = 0.0


NO_MATCH = ProductMatch(matches=False)


def title_tokens(title: str, min_length: int = 4) -> list[str]:
    """Lowercased words of a product title long enough to be distinctive."""
    return [word for word in title.lower().split() if len(word) >= min_length]


def match_product_mention(
    line_items: Sequence[LineItem],
    caption: str,
    min_token_length: int = 4,
) -> ProductMatch:
    """
    Check which purchased line items the caption talks about.

    A line item matches when any of its title words appears anywhere in the
    caption (case-insensitive substring). Confidence is the matched fraction
    of line items.
    """
    if not caption or not line_items:
        return NO_MATCH

    caption_lower = caption.lower()
    matched = [
        item.title
        for item in line_items
        if any(
            token in caption_lower
            for token in title_tokens(item.title, min_token_length)
        )
    ]

    if not matched:
        return NO_MATCH

    return ProductMatch(
        matches=True,
        matched_products=matched,
        confidence=min(1.0, len(matched) / len(line_items)),
    )
