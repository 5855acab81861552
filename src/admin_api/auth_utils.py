from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from src.admin_api import config, repositories

_bearer = HTTPBearer(auto_error=False)


# PUBLIC_INTERFACE
def create_session_token(session_id: str, user_id: int, expires: datetime) -> str:
    """Sign a session id into the token handed to the client (cookie or bearer)."""
    return jwt.encode(
        {"sid": session_id, "sub": str(user_id), "exp": expires},
        config.session_secret(),
        algorithm=config.session_algorithm(),
    )


def _unauthorized(detail: str = "Not authenticated") -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


# PUBLIC_INTERFACE
def decode_session_token(token: str) -> str:
    """Return the session id carried by a token; bad signature or expiry raises 401."""
    try:
        payload = jwt.decode(token, config.session_secret(), algorithms=[config.session_algorithm()])
    except JWTError:
        raise _unauthorized("Invalid session")
    session_id = payload.get("sid")
    if not session_id:
        raise _unauthorized("Invalid session payload")
    return str(session_id)


def _request_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(config.session_cookie_name())


# PUBLIC_INTERFACE
def get_current_session(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> Dict[str, Any]:
    """Dependency returning the active session joined with its user row."""
    token = _request_token(request, credentials)
    if not token:
        raise _unauthorized()

    session = repositories.get("sessions").get_active(decode_session_token(token))
    if not session:
        raise _unauthorized("Session expired or not found")
    return session


# PUBLIC_INTERFACE
def require_admin(session: Dict[str, Any] = Depends(get_current_session)) -> Dict[str, Any]:
    """Dependency that ensures the session belongs to an admin."""
    if not session.get("admin"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return session
