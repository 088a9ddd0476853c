"""
Utilities module - Common helpers for API responses and exceptions.
"""

from common.utils.responses import success_response
from common.utils.exceptions import (
    APIException,
    BadRequestException,
    InternalServerException,
)

__all__ = [
    "success_response",
    "APIException",
    "BadRequestException",
    "InternalServerException",
]
