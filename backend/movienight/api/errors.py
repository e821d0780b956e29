"""
Standard error envelope shared by every router.
"""
from fastapi import HTTPException


def error_detail(code: str, message: str) -> dict:
    """Standard error envelope."""
    return {"error": {"code": code, "message": message}}


def http_error(status_code: int, code: str, exc: Exception | str) -> HTTPException:
    return HTTPException(status_code=status_code, detail=error_detail(code, str(exc)))
