"""Response formatting utilities"""
from typing import Optional, TypeVar

from fastapi import HTTPException

T = TypeVar("T")


def format_success_response(message: str, data: Optional[dict] = None, **kwargs) -> dict:
    """
    Format a standardized success response

    Args:
        message: Success message
        data: Optional data payload
        **kwargs: Additional fields to include in response

    Returns:
        Dict with success details

    Example:
        return format_success_response(
            "Support request submitted",
            data={"specialist_id": "ops"}
        )
    """
    response = {"message": message}
    if data:
        response["data"] = data
    response.update(kwargs)
    return response


def not_found(entity_name: str, identifier: Optional[str] = None) -> HTTPException:
    """Build a 404 for a missing entity"""
    detail = f"{entity_name} not found"
    if identifier:
        detail = f"{entity_name} {identifier} not found"
    return HTTPException(status_code=404, detail=detail)


def get_or_404(value: Optional[T], entity_name: str, identifier: Optional[str] = None) -> T:
    """
    Return a looked-up value or raise 404

    Example:
        invoice = get_or_404(archive.find(number), "Invoice", number)
    """
    if value is None:
        raise not_found(entity_name, identifier)
    return value
