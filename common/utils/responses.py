"""
Standard API response helpers.

Provides consistent response formatting for successful requests.

Example:
    from common.utils import success_response

    @router.get("/months/{month_id}/score")
    async def get_score(month_id: str, service: ServiceDep):
        score = await service.calculate_monthly_score(month_id)
        return success_response(score.model_dump(mode="json"))
"""

from typing import Any, Optional, Dict


def success_response(
    data: Any = None,
    message: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a standard success response.

    Args:
        data: The response data (can be dict, list, or any serializable type)
        message: Optional success message

    Returns:
        Dictionary with success=True and optional data/message
    """
    response: Dict[str, Any] = {"success": True}

    if data is not None:
        response["data"] = data

    if message:
        response["message"] = message

    return response
