"""
Diagnostics Recorder

DESIGN DECISION: Every tolerated condition found during a projection is
both kept (so callers can tell "worth zero" from "data missing") and
written to the structured log.

The recorder:
- Keeps diagnostics in the order they were found
- Logs each one at the level matching its severity
- Never raises because of a diagnostic
"""

import logging
from typing import Iterable, Optional

import structlog

from lifeplan.models.diagnostic import Diagnostic, DiagnosticSeverity, DiagnosticType


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class DiagnosticsRecorder:
    """
    Collects and logs diagnostics for one projection run.
    """

    def __init__(
        self,
        run_id: Optional[str] = None,
        log_level: Optional[str] = None,
    ):
        """
        Initialize recorder.

        Args:
            run_id: Bound to every log line of this run, if given.
            log_level: Level for the "lifeplan" stdlib logger, if given.
        """
        self._diagnostics: list[Diagnostic] = []
        if log_level is not None:
            logging.getLogger("lifeplan").setLevel(log_level)
        self._logger = structlog.get_logger("lifeplan")
        if run_id is not None:
            self._logger = self._logger.bind(run_id=run_id)

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    def record(self, diagnostic: Diagnostic) -> None:
        """Keep a diagnostic and log it."""
        self._diagnostics.append(diagnostic)
        log_dict = diagnostic.to_log_dict()

        if diagnostic.severity == DiagnosticSeverity.ERROR:
            self._logger.error("projection_diagnostic", **log_dict)
        elif diagnostic.severity == DiagnosticSeverity.WARNING:
            self._logger.warning("projection_diagnostic", **log_dict)
        else:
            self._logger.info("projection_diagnostic", **log_dict)

    def record_all(self, diagnostics: Iterable[Diagnostic]) -> None:
        for diagnostic in diagnostics:
            self.record(diagnostic)

    def count(self, diagnostic_type: DiagnosticType) -> int:
        return sum(1 for d in self._diagnostics if d.diagnostic_type == diagnostic_type)

    def log_run_started(
        self,
        plan_start_year: int,
        plan_end_year: int,
        account_count: int,
        asset_count: int,
    ) -> None:
        self._logger.info(
            "projection_started",
            plan_start_year=plan_start_year,
            plan_end_year=plan_end_year,
            account_count=account_count,
            asset_count=asset_count,
        )

    def log_run_finished(
        self,
        transaction_count: int,
        goal_year: Optional[int],
    ) -> None:
        self._logger.info(
            "projection_finished",
            transaction_count=transaction_count,
            diagnostic_count=len(self._diagnostics),
            malformed_records=self.count(DiagnosticType.MALFORMED_RECORD),
            price_gaps=self.count(DiagnosticType.PRICE_GAP),
            over_sells=self.count(DiagnosticType.OVER_SELL),
            misfiled_records=self.count(DiagnosticType.MISFILED_RECORD),
            goal_year=goal_year,
        )

    def log_run_failed(self, error_type: str, error_message: str) -> None:
        self._logger.error(
            "projection_failed",
            error_type=error_type,
            error_message=error_message,
        )
