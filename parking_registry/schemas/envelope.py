# parking_registry/schemas/envelope.py
"""
Uniform JSON response envelope: {success, message, data?, error?, total?}.
Optional keys are omitted rather than sent as null.
"""

from typing import Any, Optional

from fastapi.encoders import jsonable_encoder


def success(message: str, data: Any = None, total: Optional[int] = None) -> dict:
    body = {"success": True, "message": message}
    if data is not None:
        body["data"] = jsonable_encoder(data, by_alias=True)
    if total is not None:
        body["total"] = total
    return body


def failure(message: str, error: Optional[str] = None) -> dict:
    body = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    return body
