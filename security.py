"""
Security Module
Version: 1.0

Curator key verification for write endpoints.
DEPENDS ON: config.py only
"""

import hmac
import logging
from typing import Optional

from fastapi import Request, HTTPException

from config import get_settings

logger = logging.getLogger(__name__)

CURATOR_KEY_HEADER = "X-Curator-Key"


def verify_curator_key(provided: Optional[str], expected: Optional[str], debug: bool = False) -> bool:
    """
    Check a curator key.

    With no key configured, access is allowed only in development.
    """
    if not expected:
        if not debug:
            logger.warning("CURATOR_API_KEY is not configured. Curator access denied.")
        return debug

    if not provided:
        return False

    return hmac.compare_digest(provided.encode(), expected.encode())


async def require_curator(request: Request) -> bool:
    """
    FastAPI dependency guarding curator endpoints.

    Raises HTTPException if the key is missing or wrong.
    """
    settings = get_settings()
    provided = request.headers.get(CURATOR_KEY_HEADER)

    if not verify_curator_key(provided, settings.CURATOR_API_KEY, debug=settings.DEBUG):
        client_host = request.client.host if request.client else 'unknown'
        logger.warning(f"Rejected curator request from {client_host}")
        raise HTTPException(status_code=401, detail="Curator key required")

    return True
