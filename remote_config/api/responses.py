"""
Response envelope helpers.

Success: ``{"success": true, "data": ...}``
Failure: ``{"success": false, "error": {"message": ..., "code": ...}}`` with an
optional top-level ``details``.
"""
from typing import Any, Dict, Optional

from fastapi import Response
from fastapi.responses import JSONResponse


def ok(data: Any, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(status_code=200, content={"success": True, "data": data}, headers=headers)


def created(data: Any) -> JSONResponse:
    return JSONResponse(status_code=201, content={"success": True, "data": data})


def no_content() -> Response:
    return Response(status_code=204, headers={"Content-Type": "application/json"})


def error_response(status_code: int, message: str, code: Optional[str] = None,
                   details: Any = None) -> JSONResponse:
    body: Dict[str, Any] = {
        "success": False,
        "error": {"message": message, "code": code},
    }
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)
