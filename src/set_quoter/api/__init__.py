"""
API module for the Set trade quoter.

Provides FastAPI routes and models for exposing quote generation as a REST API.
"""

from set_quoter.api.models import ErrorResponse, QuoteRequestBody

__all__ = [
    "ErrorResponse",
    "QuoteRequestBody",
]
