"""
Common library for reusable infrastructure components.

- database: Async MongoDB connection with Beanie ODM
- utils: Standard responses and exceptions
- config: Base settings class
"""

from common.database import MongoDB, BaseDocument
from common.utils import (
    success_response,
    APIException,
    BadRequestException,
    InternalServerException,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    "BaseDocument",
    # Utils
    "success_response",
    "APIException",
    "BadRequestException",
    "InternalServerException",
    # Config
    "BaseAppSettings",
]
