"""Exceptions raised by the projection engine."""


class ProjectionError(Exception):
    """Base exception for projection failures."""
    pass


class InvalidPlanRange(ProjectionError):
    """Plan settings describe an empty or inverted year range."""

    def __init__(self, start_year: int, end_year: int, reason: str):
        self.start_year = start_year
        self.end_year = end_year
        super().__init__(
            f"Invalid plan range {start_year}-{end_year}: {reason}"
        )


class DataSourceError(ProjectionError):
    """A data source could not supply a snapshot or a year's transactions."""
    pass
