import logging

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from firebase_token.config import Settings, get_settings

log = logging.getLogger(__name__)

ALGO = "HS256"
DEV_TOKEN = "dev-token"  # nosec B105
security = HTTPBearer(auto_error=False)


def get_current_client(
    credentials: HTTPAuthorizationCredentials = Security(security),
    settings: Settings = Depends(get_settings),
) -> dict[str, str]:
    """Authenticate the service caller that asks for a Firebase token."""
    if credentials is None or (credentials.scheme or "").lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing Authorization header"
        )

    token = credentials.credentials

    if token == DEV_TOKEN:
        if settings.ENABLE_DEV_TOKEN:
            return {"id": "dev-client"}
        log.warning("Rejected dev-token: ENABLE_DEV_TOKEN is off")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    if not settings.SERVICE_JWT_SECRET:
        raise HTTPException(
            status_code=500, detail="Server misconfigured: SERVICE_JWT_SECRET not set"
        )

    try:
        payload = jwt.decode(token, settings.SERVICE_JWT_SECRET, algorithms=[ALGO])
    except ExpiredSignatureError as e:
        log.error(f"Caller JWT expired: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired") from e
    except JWTError as e:
        log.error(f"Caller JWT validation failed: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from e

    sub = payload.get("sub") or payload.get("client") or "unknown"
    return {"id": str(sub)}
