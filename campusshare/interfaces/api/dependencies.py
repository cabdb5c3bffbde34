"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from campusshare.application.use_cases.messages import MessageDispatcher
from campusshare.domain.entities import UserProfile
from campusshare.infrastructure.database import get_db
from campusshare.infrastructure.repositories import UserRepository
from campusshare.infrastructure.security import user_id_from_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> UserProfile:
    """Resolve the authenticated user for the provided token."""

    try:
        user_id = user_id_from_token(token)
    except ValueError as exc:
        raise _credentials_error() from exc

    user = UserRepository(db).get_profile(user_id)
    if user is None:
        raise _credentials_error("User not found")
    if not user.is_active:
        raise _credentials_error("Inactive user")
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> UserProfile:
    """Return the authenticated user from the bearer token."""

    return resolve_current_user(token, db)


def get_dispatcher(request: Request) -> MessageDispatcher:
    """Return the message dispatcher created when the application started."""

    return request.app.state.message_dispatcher
