import os
import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

API_KEY_HEADER_NAME = "X-API-Key"

api_key_header = APIKeyHeader(name=API_KEY_HEADER_NAME, auto_error=False)


def get_api_keys() -> list[str]:
    """Accepted keys from ``API_KEY``; several may be given comma-separated."""
    raw = os.environ.get("API_KEY") or ""
    return [key.strip() for key in raw.split(",") if key.strip()]


def is_valid_api_key(api_key: str | None, accepted: list[str]) -> bool:
    if not api_key or not accepted:
        return False
    candidate = api_key.encode("utf-8")
    return any(secrets.compare_digest(candidate, key.encode("utf-8")) for key in accepted)


async def verify_api_key(
    api_key: Annotated[str | None, Depends(api_key_header)],
) -> str | None:
    if not is_valid_api_key(api_key, get_api_keys()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
    return api_key
