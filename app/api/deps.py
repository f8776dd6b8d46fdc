"""API dependencies for dependency injection."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.context import AppContext
from app.services.tasks import TaskService

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class UserInfo:
    """Caller identity taken from identity-provider token claims."""

    user_id: str
    email: str


def get_app_context(request: Request) -> AppContext:
    """Get the context the application was created with."""
    return request.app.state.context


AppCtx = Annotated[AppContext, Depends(get_app_context)]


def get_task_service(context: AppCtx) -> TaskService:
    return context.task_service


TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]


def get_current_user(
    context: AppCtx,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> UserInfo | None:
    """Read caller identity from an optional bearer token.

    The signature is checked when JWT_SECRET is configured (an HS256
    secret, or a PEM public key for RS256 identity-provider tokens).
    Otherwise the token is trusted as already verified by a gateway
    authorizer; without one, any caller can choose the claims.
    Returns None when no token is sent or the claims lack sub or email.
    """
    if credentials is None:
        return None

    settings = context.settings
    try:
        if settings.JWT_SECRET:
            claims = jwt.decode(
                credentials.credentials,
                settings.JWT_SECRET,
                algorithms=[settings.JWT_ALGORITHM],
                options={"verify_aud": False},
            )
        else:
            claims = jwt.get_unverified_claims(credentials.credentials)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = claims.get("sub")
    email = claims.get("email")
    if not user_id or not email:
        return None
    return UserInfo(user_id=user_id, email=email)


CurrentUser = Annotated[UserInfo | None, Depends(get_current_user)]
