from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

def success_response(data: Any):
    return JSONResponse(
        content={"success": True, "data": jsonable_encoder(data), "error": None},
        status_code=200
    )

def error_response(message: str, status_code: int = 500):
    return JSONResponse(
        content={"success": False, "data": None, "error": message},
        status_code=status_code
    )
