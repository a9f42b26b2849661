"""Observability: structured logging for form engines."""

from eventform.observability.logging import (
    PIIRedactor,
    bind_form_logger,
    get_logger,
    setup_logging,
)

__all__ = ["PIIRedactor", "bind_form_logger", "get_logger", "setup_logging"]
