"""Run the attribution engine on a synthetic campaign and print the report."""

import random
from datetime import datetime, timedelta, timezone

from postlift.config import settings
from postlift.logging_config import setup_logging
from postlift.models import Influencer, LineItem, Order, Post
from postlift.services.attribution import AttributionEngine
from postlift.services.report import AttributionReporter

PRODUCTS = [
    LineItem(title="Hydrating Serum Glow", price=39.0),
    LineItem(title="Vitamin Cream Night", price=49.0),
    LineItem(title="Cleansing Balm", price=29.0),
]


def generate_orders(
    rng: random.Random,
    start: datetime,
    days: int,
    orders_per_day: int,
) -> list[Order]:
    """Baseline traffic: orders spread evenly over `days` days from `start`."""
    orders = []
    for day in range(days):
        for n in range(orders_per_day):
            created_at = start + timedelta(days=day, minutes=rng.randint(0, 24 * 60 - 1))
            item = rng.choice(PRODUCTS)
            orders.append(
                Order.create(
                    id=f"base-{day:03d}-{n:02d}",
                    created_at=created_at,
                    total_price=item.price,
                    customer_email=f"customer{rng.randint(1, 400)}@example.com",
                    line_items=[item],
                )
            )
    return orders


def generate_spike(
    rng: random.Random,
    post_time: datetime,
    count: int,
    prefix: str,
) -> list[Order]:
    """Orders clustered in the hours after a post, mostly new customers."""
    orders = []
    for n in range(count):
        created_at = post_time + timedelta(minutes=rng.randint(5, 6 * 60))
        item = PRODUCTS[0] if n % 3 else rng.choice(PRODUCTS)
        orders.append(
            Order.create(
                id=f"{prefix}-{n:03d}",
                created_at=created_at,
                total_price=item.price,
                customer_email=f"{prefix}{n}@example.com",
                line_items=[item],
            )
        )
    return orders


def build_campaign() -> tuple[list[Order], list[Influencer], datetime, datetime]:
    rng = random.Random(42)
    campaign_start = datetime(2024, 3, 1, tzinfo=timezone.utc)
    campaign_end = campaign_start + timedelta(days=7)

    orders = generate_orders(rng, campaign_start - timedelta(days=30), days=37, orders_per_day=6)

    sarah_post = Post.create(
        id="sarah-1",
        timestamp=campaign_start + timedelta(days=1, hours=18),
        caption="Obsessed with this hydrating serum, my skin has never been this glow-y",
        likes_count=5400,
        comments_count=210,
        mentions_product=True,
    )
    leo_post = Post.create(
        id="leo-1",
        timestamp=campaign_start + timedelta(days=4, hours=12),
        caption="Night routine: the vitamin cream is doing the heavy lifting",
        likes_count=1900,
        comments_count=95,
        mentions_product=True,
    )
    leo_unrelated = Post.create(
        id="leo-2",
        timestamp=campaign_start + timedelta(days=2),
        caption="Weekend hike",
        likes_count=800,
        comments_count=12,
        mentions_product=False,
    )

    orders += generate_spike(rng, sarah_post.timestamp, count=40, prefix="sarah")
    orders += generate_spike(rng, leo_post.timestamp, count=15, prefix="leo")

    influencers = [
        Influencer(username="sarahcontent", followers_count=120_000, budget=1500.0, posts=(sarah_post,)),
        Influencer(username="leo.skin", followers_count=45_000, budget=600.0, posts=(leo_post, leo_unrelated)),
    ]

    return orders, influencers, campaign_start, campaign_end


def main() -> None:
    setup_logging(settings.log_level, settings.log_format)

    orders, influencers, start, end = build_campaign()
    print(f"Generated {len(orders)} orders for {len(influencers)} influencers")

    engine = AttributionEngine(settings.attribution_weights())
    result = engine.compute_attribution(orders, influencers, start, end)

    reporter = AttributionReporter()
    report = reporter.build_report(result, influencers)
    print(reporter.format_report_text(report))


if __name__ == "__main__":
    main()
