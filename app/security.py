"""
Session token verification.

Tokens are issued by the external identity provider. HS256 tokens are checked
against the shared secret, RS* tokens against the provider's JWKS.
"""

import logging
import time
from typing import Any, Dict, Optional

import httpx
from jose import JWTError, jwt

from app.config import settings
from app.exceptions import UnauthorizedError

logger = logging.getLogger("foodops.security")

_jwks_cache: Dict[str, Any] = {"jwks": None, "ts": 0.0}


def get_jwks() -> dict:
    """Return the provider JWKS, refreshing the in-process copy when stale."""
    if not settings.auth_jwks_url:
        raise UnauthorizedError("RS256 tokens are not accepted: no JWKS endpoint configured")

    age = time.time() - _jwks_cache["ts"]
    if not _jwks_cache["jwks"] or age > settings.auth_jwks_cache_seconds:
        try:
            with httpx.Client(timeout=5) as client:
                r = client.get(settings.auth_jwks_url)
                r.raise_for_status()
                jwks = r.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("JWKS fetch from %s failed: %s", settings.auth_jwks_url, e)
            raise UnauthorizedError("Signing keys are unavailable") from e
        _jwks_cache["jwks"] = jwks
        _jwks_cache["ts"] = time.time()
        logger.info("Fetched JWKS from %s", settings.auth_jwks_url)
    return _jwks_cache["jwks"]


def _decode_options() -> Dict[str, Any]:
    return {
        "verify_aud": settings.auth_audience is not None,
        "verify_iss": settings.auth_issuer is not None,
    }


def verify_session_token(token: str) -> dict:
    """
    Verify a session token and return its claims.

    Raises:
        UnauthorizedError: If the token is malformed, expired, or signed with
            an unsupported algorithm or unknown key.
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTError as e:
        raise UnauthorizedError("Malformed session token") from e

    algorithm = header.get("alg", "")
    key: Optional[Any] = None

    if algorithm == "HS256":
        if not settings.auth_jwt_secret:
            raise UnauthorizedError("HS256 tokens are not accepted")
        key = settings.auth_jwt_secret
        algorithms = ["HS256"]
    elif algorithm.startswith("RS"):
        for k in get_jwks().get("keys", []):
            if k.get("kid") == header.get("kid"):
                key = k
                break
        if key is None:
            raise UnauthorizedError("Signing key not found")
        algorithms = [key.get("alg", algorithm)]
    else:
        raise UnauthorizedError(f"Unsupported token algorithm: {algorithm or 'none'}")

    try:
        claims = jwt.decode(
            token,
            key,
            algorithms=algorithms,
            audience=settings.auth_audience,
            issuer=settings.auth_issuer,
            options=_decode_options(),
        )
    except JWTError as e:
        logger.info("Rejected session token: %s", e)
        raise UnauthorizedError("Invalid session token") from e

    if not claims.get("sub"):
        raise UnauthorizedError("Session token has no subject")
    return claims
