from typing import Any

from fastapi import HTTPException


def error_response(error: type[HTTPException]) -> dict[int, dict[str, Any]]:
    """OpenAPI `responses` entry for an HTTPException subclass."""
    return {
        error.status_code: {
            "description": error.detail,
            "content": {
                "application/json": {
                    "example": {"error": error.detail}
                }
            },
        }
    }
