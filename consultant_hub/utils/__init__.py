"""Utility functions for common operations."""

from consultant_hub.utils.date_utils import (
    parse_iso_datetime,
    format_date_display
)
from consultant_hub.utils.text_utils import (
    TRUNCATION_MARKER,
    truncate_text,
    clean_names,
    format_names
)
from consultant_hub.utils.logging_utils import (
    StructuredLogger,
    generate_correlation_id,
    log_pipeline_step
)

__all__ = [
    'parse_iso_datetime',
    'format_date_display',
    'TRUNCATION_MARKER',
    'truncate_text',
    'clean_names',
    'format_names',
    'StructuredLogger',
    'generate_correlation_id',
    'log_pipeline_step',
]
