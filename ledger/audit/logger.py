"""
Audit Logger

DESIGN DECISION: Every mutation, history move and persistence call is
logged as a structured event. This provides:
1. Traceability of what changed the ledger and when
2. Debugging capability when balances look wrong
3. A record of failed operations the UI turned into messages

The history log is the user-facing record; this logger is the
developer-facing one. Logging never alters ledger behaviour.
"""

import logging
from typing import Optional

import structlog

from ledger.config import get_settings
from ledger.models.history import HistorySnapshot


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

LOGGER_NAME = "ledger"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Set the stdlib level the structured logger filters on.

    Defaults to the configured log level.
    """
    level = level or get_settings().app.log_level
    logging.getLogger(LOGGER_NAME).setLevel(level)


class AuditLogger:
    """
    Central audit logging service.

    Wraps a structlog logger with one method per kind of ledger event.
    """

    def __init__(self, logger_name: str = LOGGER_NAME):
        self._logger = structlog.get_logger(logger_name)

    def log_snapshot(self, snapshot: HistorySnapshot) -> None:
        """Log a recorded mutation."""
        self._logger.info("ledger_changed", **snapshot.to_log_dict())

    def log_undo(self, snapshot: Optional[HistorySnapshot]) -> None:
        if snapshot is None:
            self._logger.debug("undo_ignored", reason="nothing_to_undo")
            return
        self._logger.info(
            "history_undo",
            snapshot_id=str(snapshot.id),
            description=snapshot.description,
        )

    def log_redo(self, snapshot: Optional[HistorySnapshot]) -> None:
        if snapshot is None:
            self._logger.debug("redo_ignored", reason="nothing_to_redo")
            return
        self._logger.info(
            "history_redo",
            snapshot_id=str(snapshot.id),
            description=snapshot.description,
        )

    def log_restore(self, snapshot: HistorySnapshot) -> None:
        self._logger.info(
            "history_restored",
            snapshot_id=str(snapshot.id),
            description=snapshot.description,
            snapshot_timestamp=snapshot.timestamp.isoformat(),
        )

    def log_history_cleared(self, snapshot_count: int) -> None:
        self._logger.info("history_cleared", snapshot_count=snapshot_count)

    def log_export(self, account_count: int, transaction_count: int) -> None:
        self._logger.info(
            "data_exported",
            accounts=account_count,
            transactions=transaction_count,
        )

    def log_import_rejected(self, issues: list[dict]) -> None:
        self._logger.warning(
            "import_rejected",
            issue_count=len(issues),
            issues=issues,
        )

    def log_operation_failed(self, operation: str, error: Exception) -> None:
        """Log a rejected operation. The state is unchanged."""
        self._logger.warning(
            "operation_failed",
            operation=operation,
            error_type=type(error).__name__,
            error=str(error),
        )

    def log_storage_event(self, action: str, location: str, success: bool) -> None:
        if success:
            self._logger.info("storage_" + action, location=location)
        else:
            self._logger.error("storage_" + action + "_failed", location=location)

    def log_conversion_fallback(self, code: str, main_code: str) -> None:
        """Log an amount counted at face value because its currency is unknown."""
        self._logger.warning(
            "conversion_fallback",
            currency=code,
            treated_as=main_code,
        )
