"""
Request dependencies: bearer authentication and the admin gate.
"""
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from skillswap.core.exceptions import Forbidden, Unauthenticated
from skillswap.core.security import decode_access_token
from skillswap.db.session import get_db
from skillswap.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)


def authenticate(token: Optional[str], db: Session) -> User:
    """Resolve a bearer token to an active user."""
    if not token:
        raise Unauthenticated("Access denied. No token provided.")

    payload = decode_access_token(token)
    user_id = payload.get("user_id") if payload else None
    if not isinstance(user_id, int):
        raise Unauthenticated("Invalid token.")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise Unauthenticated("Invalid token.")
    if user.is_banned:
        raise Forbidden("Account has been banned.")
    return user


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Dependency for routes that need a signed-in user."""
    return authenticate(credentials.credentials if credentials else None, db)


def require_admin(user: User) -> User:
    if not user.is_admin:
        raise Forbidden("Access denied. Admin privileges required.")
    return user


def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    """Dependency for admin-only routes."""
    return require_admin(current_user)
