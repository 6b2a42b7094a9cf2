"""PostLift services."""

from postlift.services.anomaly import AnomalyDetector
from postlift.services.attribution import AttributionEngine, compute_attribution
from postlift.services.baseline import SeasonalBaseline, calculate_seasonal_baseline
from postlift.services.confidence import ConfidenceScorer
from postlift.services.csv_importer import CsvImporter
from postlift.services.report import AttributionReporter
from postlift.services.timeline import build_hourly_timeline
from postlift.services.weights import DEFAULT_WEIGHTS, AttributionWeights

__all__ = [
    "AnomalyDetector",
    "AttributionEngine",
    "AttributionReporter",
    "AttributionWeights",
    "ConfidenceScorer",
    "CsvImporter",
    "DEFAULT_WEIGHTS",
    "SeasonalBaseline",
    "build_hourly_timeline",
    "calculate_seasonal_baseline",
    "compute_attribution",
]
