from datetime import datetime,timezone
from typing import Any, Dict, Optional, Union

from fastapi.responses import JSONResponse
from storefront.common.constants import request_id_ctx

def now() -> datetime:
    return datetime.now(timezone.utc)


def build_success(data: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "status": "ok",
        "data": data,
        "error": None,
        "request_id": request_id if request_id is not None else request_id_ctx.get(),
    }

def build_error(code: Union[str, int] = "UNKNOWN_ERROR",
                details: Optional[Any] = None,
                request_id: Optional[str] = None) -> Dict[str, Any]:

    return {
        "status": "error",
        "data": None,
        "error": {"code": code, "details": details},
        "request_id": request_id if request_id is not None else request_id_ctx.get(),
    }

def json_ok(content: Dict[str, Any], status_code: int = 200, headers=None) -> JSONResponse:
    return JSONResponse(content, status_code=status_code, headers=headers)

def json_error(content: Dict[str, Any], status_code: int = 500, headers=None) -> JSONResponse:
    return JSONResponse(content, status_code=status_code, headers=headers)

def success_response(data: Dict[str, Any], status_code: int = 200,
                     headers: Optional[Dict[str, Any]] = None) -> JSONResponse:
    return json_ok(build_success(data), status_code=status_code, headers=headers)


def error_message(payload: Any, default: str) -> str:
    """Pull the human readable message out of an error envelope."""
    try:
        details = payload["error"]["details"]
    except (KeyError, TypeError):
        details = None
    if isinstance(details, dict) and details.get("message"):
        return str(details["message"])
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return default
