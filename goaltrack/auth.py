"""API key guard for every goal, insight, preference and data-wipe route.

Attached router-wide in goaltrack.engine.router; /, /health and the docs stay
open. The key comes from GOALTRACK_API_KEY.
"""

import logging

from fastapi import HTTPException, Header

from goaltrack.config import settings

logger = logging.getLogger(__name__)


async def verify_api_key(
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
    authorization: str | None = Header(default=None),
) -> str:
    """Validate API key via X-API-Key or Authorization: Bearer.

    With no key configured the service is single-user and local, so
    requests pass through. Otherwise a mismatch raises 401.
    """
    if settings.goaltrack_api_key is None:
        return ""

    key = x_api_key
    if key is None and authorization and authorization.startswith("Bearer "):
        key = authorization[7:].strip()

    if key != settings.goaltrack_api_key:
        logger.warning("Rejected request with %s API key", "missing" if key is None else "invalid")
        raise HTTPException(status_code=401, detail="Invalid or missing API key")

    return key
