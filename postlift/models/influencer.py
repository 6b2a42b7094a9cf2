"""Influencer model - the talent running posts for a campaign."""

from dataclasses import dataclass, field

from postlift.models.social_post import Post


@dataclass(frozen=True)
class Influencer:
    """An influencer taking part in a campaign, with their scraped posts."""

    username: str
    followers_count: int = 0
    budget: float = 0.0
    posts: tuple[Post, ...] = field(default_factory=tuple)
    full_name: str | None = None

    @property
    def product_posts(self) -> list[Post]:
        """Posts flagged as mentioning the campaign product."""
        return [post for post in self.posts if post.is_product_post]

    def engagement(self, comment_factor: float = 2.0) -> float:
        """Likes plus weighted comments over product posts."""
        return sum(
            post.likes_count + comment_factor * post.comments_count
            for post in self.product_posts
        )
