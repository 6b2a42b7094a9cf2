"""PostLift - influencer campaign attribution."""

__version__ = "0.1.0"
