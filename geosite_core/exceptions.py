"""
Custom exceptions for the geosite platform
"""
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)


class GeositeError(Exception):
    """Base exception for geosite."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

        logger.error(f"{self.__class__.__name__}: {message}", extra={'details': self.details})


class SourceUnavailable(GeositeError):
    """A survey source could not be read (I/O error or non-success HTTP status)."""

    def __init__(self, source: str, message: str,
                 status_code: Optional[int] = None,
                 original_error: Optional[Exception] = None):
        details = {'source': source}
        if status_code is not None:
            details['status_code'] = status_code
        if original_error is not None:
            details['original_error'] = str(original_error)
            details['error_type'] = type(original_error).__name__
        super().__init__(message, details)
        self.source = source
        self.status_code = status_code
        self.original_error = original_error


class SourceFormatError(GeositeError):
    """A survey source was read but is not in its expected format."""

    def __init__(self, source: str, message: str, missing_columns: Optional[list] = None):
        details = {'source': source}
        if missing_columns:
            details['missing_columns'] = list(missing_columns)
        super().__init__(message, details)
        self.source = source
        self.missing_columns = list(missing_columns or [])


class EmptyResult(GeositeError):
    """No fused location met the completeness requirement."""

    def __init__(self, message: str = "No valid location data found",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
