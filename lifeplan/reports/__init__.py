"""Report aggregation package."""

from lifeplan.reports.aggregator import ReportAggregationError, ReportAggregator

__all__ = ["ReportAggregationError", "ReportAggregator"]
