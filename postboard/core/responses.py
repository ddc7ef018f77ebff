# postboard/core/responses.py

from typing import Any
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def send_success(data: Any = None, message: str = "Operation successful", status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"message": message, "data": jsonable_encoder(data), "success": True},
    )


def send_error(message: str, errors: list[str] | None = None, status_code: int = 404) -> JSONResponse:
    """
    Error envelope. `data` is only present when there are details to report.
    """
    content = {"message": message, "success": False}
    if errors:
        content["data"] = {"error": errors}
    return JSONResponse(status_code=status_code, content=content)
