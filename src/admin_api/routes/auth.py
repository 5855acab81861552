import logging
from datetime import timedelta
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Response, status

from src.admin_api import config, repositories
from src.admin_api.auth_utils import create_session_token, get_current_session
from src.admin_api.passwords import verify_password
from src.admin_api.schemas import LoginRequest, LoginResponse, User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])


def _invalid_credentials() -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")


@router.post("/login", response_model=LoginResponse, summary="Login")
def login(payload: LoginRequest, response: Response) -> Dict[str, Any]:
    """Check credentials, open a session and set the session cookie."""
    user = repositories.get("users").get_credentials(payload.email)
    if not user or not verify_password(payload.password, user.get("password") or ""):
        logger.info("Failed login attempt", extra={"path": "/api/login"})
        raise _invalid_credentials()

    ttl = timedelta(minutes=config.session_ttl_minutes())
    session = repositories.get("sessions").open(user["id"], ttl)
    token = create_session_token(session["id"], user["id"], session["expires"])
    response.set_cookie(
        key=config.session_cookie_name(),
        value=token,
        max_age=int(ttl.total_seconds()),
        httponly=True,
        secure=config.session_cookie_secure(),
        samesite="lax",
    )
    logger.info("User logged in", extra={"user_id": user["id"]})

    user.pop("password", None)
    return {"token": token, "token_type": "bearer", "expires": session["expires"], "user": user}


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, summary="Logout")
def logout(session: Dict[str, Any] = Depends(get_current_session)) -> Response:
    """Close the current session and clear the cookie."""
    repositories.get("sessions").close(session["session_id"])
    logger.info("User logged out", extra={"user_id": session.get("id")})
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(config.session_cookie_name())
    return response


@router.get("/me", response_model=User, summary="Get current user")
def me(session: Dict[str, Any] = Depends(get_current_session)) -> Dict[str, Any]:
    """Return the user of the current session."""
    return session
