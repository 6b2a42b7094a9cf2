"""CSV import service - turns order and post exports into engine inputs."""

import io
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

import pandas as pd

from postlift.logging_config import get_logger
from postlift.models import Influencer, LineItem, Order, Post
from postlift.models.fields import parse_count, parse_price

logger = get_logger(__name__)


class CsvImportError(Exception):
    """Error during CSV import."""

    pass


class ImportType(str, Enum):
    """Kinds of CSV exports we understand."""

    ORDERS = "orders"
    POSTS = "posts"


@dataclass
class ImportReport:
    """Row-level outcome of one import."""

    import_type: ImportType
    rows_total: int = 0
    rows_imported: int = 0
    rows_skipped: int = 0
    errors: list[dict] = field(default_factory=list)

    def skip(self, row: int, error: str) -> None:
        self.errors.append({"row": row, "error": error})
        self.rows_skipped += 1

    def to_dict(self) -> dict:
        return {
            "import_type": self.import_type.value,
            "rows_total": self.rows_total,
            "rows_imported": self.rows_imported,
            "rows_skipped": self.rows_skipped,
            "errors": self.errors,
        }


class CsvImporter:
    """
    Parses order and post exports with tolerant column naming.

    Orders come one row per line item (Shopify export layout): order-level
    columns may be blank on continuation rows and are taken from the first
    row that has them.
    """

    # Required columns for each import type
    REQUIRED_COLUMNS = {
        ImportType.ORDERS: {
            "order_id": ["order_id", "id", "name", "order"],
            "created_at": ["created_at", "created at", "order_date", "date"],
            "total_price": ["total_price", "total", "amount"],
        },
        ImportType.POSTS: {
            "username": ["username", "influencer", "handle", "owner_username"],
            "post_id": ["post_id", "id", "shortcode", "short_code"],
            "timestamp": ["timestamp", "posted_at", "post_date", "date"],
        },
    }

    # Optional columns that we'll try to extract
    OPTIONAL_COLUMNS = {
        ImportType.ORDERS: {
            "email": ["email", "customer_email"],
            "item_title": ["item_title", "lineitem name", "lineitem_name", "product", "title"],
            "item_quantity": ["item_quantity", "lineitem quantity", "lineitem_quantity", "quantity"],
            "item_price": ["item_price", "lineitem price", "lineitem_price", "price"],
        },
        ImportType.POSTS: {
            "caption": ["caption", "description", "text"],
            "likes": ["likes", "likes_count", "like_count"],
            "comments": ["comments", "comments_count", "comment_count"],
            "mentions_product": ["mentions_product", "product_post", "mentions"],
            "followers": ["followers", "followers_count"],
            "budget": ["budget", "fee"],
            "full_name": ["full_name", "display_name"],
        },
    }

    def load_orders(self, file_content: bytes) -> tuple[list[Order], ImportReport]:
        """
        Parse an orders export.

        Returns:
            (orders in first-seen order, import report)
        """
        df = self._read(file_content)
        mapping = self._map_columns(df.columns.tolist(), ImportType.ORDERS)
        report = ImportReport(import_type=ImportType.ORDERS, rows_total=len(df))

        grouped: dict[str, dict[str, Any]] = {}

        for idx, row in df.iterrows():
            try:
                order_id = self._cell(row, mapping, "order_id")
                if not order_id:
                    raise ValueError("missing order id")

                created_raw = self._cell(row, mapping, "created_at")
                created_at = self._to_datetime(created_raw) if created_raw else None

                title = self._cell(row, mapping, "item_title")
                item = None
                if title:
                    item = LineItem.create(
                        title=title,
                        quantity=self._cell(row, mapping, "item_quantity") or 1,
                        price=self._cell(row, mapping, "item_price"),
                    )

                entry = grouped.setdefault(
                    order_id,
                    {"row": idx, "created_at": None, "total_price": "", "email": None, "items": []},
                )
                if created_at is not None and entry["created_at"] is None:
                    entry["created_at"] = created_at
                if not entry["total_price"]:
                    entry["total_price"] = self._cell(row, mapping, "total_price")
                if not entry["email"]:
                    entry["email"] = self._cell(row, mapping, "email") or None
                if item is not None:
                    entry["items"].append(item)

                report.rows_imported += 1

            except (ValueError, TypeError, OverflowError) as e:
                logger.warning("csv_row_skipped", import_type="orders", row=idx, error=str(e))
                report.skip(idx, str(e))

        orders = []
        for order_id, entry in grouped.items():
            if entry["created_at"] is None:
                report.errors.append(
                    {"row": entry["row"], "error": f"Order {order_id} has no created_at"}
                )
                continue
            orders.append(
                Order.create(
                    id=order_id,
                    created_at=entry["created_at"],
                    total_price=entry["total_price"],
                    customer_email=entry["email"],
                    line_items=entry["items"],
                )
            )

        return orders, report

    def load_influencers(
        self, file_content: bytes
    ) -> tuple[list[Influencer], ImportReport]:
        """
        Parse a posts export into influencers with their posts.

        Returns:
            (influencers in first-seen order, import report)
        """
        df = self._read(file_content)
        mapping = self._map_columns(df.columns.tolist(), ImportType.POSTS)
        report = ImportReport(import_type=ImportType.POSTS, rows_total=len(df))

        grouped: dict[str, dict[str, Any]] = {}

        for idx, row in df.iterrows():
            try:
                username = self._cell(row, mapping, "username").lstrip("@")
                if not username:
                    raise ValueError("missing username")
                post_id = self._cell(row, mapping, "post_id")
                if not post_id:
                    raise ValueError("missing post id")

                timestamp_raw = self._cell(row, mapping, "timestamp")
                if not timestamp_raw:
                    raise ValueError("missing timestamp")

                post = Post.create(
                    id=post_id,
                    timestamp=self._to_datetime(timestamp_raw),
                    caption=self._cell(row, mapping, "caption"),
                    likes_count=self._cell(row, mapping, "likes") or 0,
                    comments_count=self._cell(row, mapping, "comments") or 0,
                    mentions_product=self._cell(row, mapping, "mentions_product") or None,
                )

                entry = grouped.setdefault(
                    username,
                    {"followers": "", "budget": "", "full_name": None, "posts": []},
                )
                if not entry["followers"]:
                    entry["followers"] = self._cell(row, mapping, "followers")
                if not entry["budget"]:
                    entry["budget"] = self._cell(row, mapping, "budget")
                if not entry["full_name"]:
                    entry["full_name"] = self._cell(row, mapping, "full_name") or None
                entry["posts"].append(post)

                report.rows_imported += 1

            except (ValueError, TypeError, OverflowError) as e:
                logger.warning("csv_row_skipped", import_type="posts", row=idx, error=str(e))
                report.skip(idx, str(e))

        influencers = [
            Influencer(
                username=username,
                followers_count=parse_count(entry["followers"]),
                budget=parse_price(entry["budget"]),
                posts=tuple(entry["posts"]),
                full_name=entry["full_name"],
            )
            for username, entry in grouped.items()
        ]

        return influencers, report

    def _read(self, file_content: bytes) -> pd.DataFrame:
        try:
            return pd.read_csv(
                io.BytesIO(file_content),
                dtype=str,
                keep_default_na=False,
            )
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise CsvImportError(f"Failed to parse CSV: {e}") from e

    def _map_columns(
        self, columns: list[str], import_type: ImportType
    ) -> dict[str, str]:
        """Map CSV columns to standard field names."""
        columns_lower = {str(c).lower().strip(): c for c in columns}
        mapping = {}

        # Required columns
        for field_name, variants in self.REQUIRED_COLUMNS.get(import_type, {}).items():
            for variant in variants:
                if variant in columns_lower:
                    mapping[field_name] = columns_lower[variant]
                    break
            else:
                raise CsvImportError(
                    f"Missing required column: {field_name} (tried: {variants})"
                )

        # Optional columns
        for field_name, variants in self.OPTIONAL_COLUMNS.get(import_type, {}).items():
            for variant in variants:
                if variant in columns_lower and columns_lower[variant] not in mapping.values():
                    mapping[field_name] = columns_lower[variant]
                    break

        return mapping

    @staticmethod
    def _cell(row: pd.Series, mapping: dict[str, str], field_name: str) -> str:
        column = mapping.get(field_name)
        if column is None:
            return ""
        return str(row[column]).strip()

    @staticmethod
    def _to_datetime(value: str) -> datetime:
        timestamp = pd.to_datetime(value, utc=True)
        if pd.isna(timestamp):
            raise ValueError(f"Invalid timestamp: {value!r}")
        return timestamp.to_pydatetime()
