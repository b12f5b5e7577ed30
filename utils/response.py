# utils/response.py
from typing import Any, List, Optional

from bson import ObjectId
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

CREATED = "Created successfully"
SELECT_ALL = "Select all successfully"
SELECT_ONE = "Select one successfully"
UPDATED = "Updated successfully"
DELETED = "Deleted successfully"
REGISTERED = "Register successfully"
LOGGED_IN = "Login successfully"


def encode(data: Any) -> Any:
    return jsonable_encoder(data, custom_encoder={ObjectId: str})


def send_success(message: str, data: Any = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message, "data": encode(data)})


def send_create(message: str, data: Any = None) -> JSONResponse:
    return send_success(message, data, status_code=201)


def send_error(
    status_code: int,
    message: str,
    error: Any = None,
    errors: Optional[List[str]] = None,
) -> JSONResponse:
    content = {"status": status_code, "message": message}
    if error is not None:
        content["error"] = encode(error)
    if errors is not None:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)
