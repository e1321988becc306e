# agentchat/core/responses.py
"""
Envelopes for the function-style endpoints.

Success is `{"data": ...}` with status 200; every failure is
`{"error": {"code": ..., "message": ...}}` with status 500. Both carry the
permissive CORS headers, and OPTIONS answers 200 with no body.
"""
from typing import Any

from fastapi import Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from agentchat.core.config import CORS_HEADERS
from agentchat.core.errors import AppError


def function_data(data: Any) -> JSONResponse:
    return JSONResponse(content={"data": jsonable_encoder(data)}, headers=CORS_HEADERS)


def function_error(code: str, error: Exception) -> JSONResponse:
    message = error.message if isinstance(error, AppError) else str(error) or error.__class__.__name__
    return JSONResponse(
        status_code=500,
        content={"error": {"code": code, "message": message}},
        headers=CORS_HEADERS,
    )


def preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


async def get_raw_body(request: Request) -> bytes:
    """The unparsed request body. Function endpoints validate it inside their own error envelope."""
    return await request.body()
