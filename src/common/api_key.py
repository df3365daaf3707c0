import logging
import secrets
from fastapi import Depends, HTTPException, Security, status
from fastapi.security.api_key import APIKeyHeader

from src.config import Settings, get_settings

logger = logging.getLogger(__name__)

MISSING_API_KEY_MESSAGE = "API key is missing"
INVALID_API_KEY_MESSAGE = "API key is invalid"

api_key_header = APIKeyHeader(name="x-api-key", auto_error=False)


def get_api_key(
    api_key: str | None = Security(api_key_header),
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject requests without the configured key. Open when no key is set."""
    if not settings.TASKS_API_KEY:
        return

    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=MISSING_API_KEY_MESSAGE,
        )

    if not secrets.compare_digest(api_key.encode(), settings.TASKS_API_KEY.encode()):
        logger.warning("Rejected request with an invalid API key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_API_KEY_MESSAGE,
        )
