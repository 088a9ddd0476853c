"""
Productivity scoring exceptions.

Extend the common API exception hierarchy so errors raised deep in the
scoring pipeline surface with a stable status code and error code.
"""

from typing import List, Optional

from common.utils.exceptions import BadRequestException, InternalServerException


class InvalidMonthException(BadRequestException):
    """400 - Month identifier is not a valid YYYY-MM value."""

    def __init__(self, month_id: str, reason: Optional[str] = None):
        message = f"Invalid month identifier '{month_id}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message=message,
            code="INVALID_MONTH_ID",
            details={"month": month_id},
        )
        self.month_id = month_id


class ScoreValidationException(InternalServerException):
    """500 - A computed score failed structural or consistency validation."""

    def __init__(self, month_id: str, errors: List[str]):
        super().__init__(
            message=f"Score validation failed for {month_id}: {'; '.join(errors)}",
            code="SCORE_VALIDATION_FAILED",
            details={"month": month_id, "errors": errors},
        )
        self.month_id = month_id
        self.errors = errors
