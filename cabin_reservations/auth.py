# cabin_reservations/auth.py
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cabin_reservations import database, models
from cabin_reservations.config import settings
from cabin_reservations.exceptions import AuthenticationError, ForbiddenActionError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict:
    """Verify a token issued by the identity provider and return its claims."""
    options = {"verify_aud": settings.JWT_AUDIENCE is not None}
    return jwt.decode(
        token,
        settings.JWT_SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        options=options,
    )


def default_full_name(email: str, metadata: Optional[dict] = None) -> str:
    name = (metadata or {}).get("full_name")
    if name:
        return name
    return email.split("@")[0]


def ensure_profile(db: Session, user_id: str, email: str, full_name: str) -> models.UserProfile:
    """Return the profile for ``user_id``, creating it on first sight."""
    profile = db.get(models.UserProfile, user_id)
    if profile is not None:
        return profile

    profile = models.UserProfile(id=user_id, email=email, full_name=full_name, is_admin=False)
    db.add(profile)
    try:
        db.flush()
        logger.info("Created profile for %s", email)
    except IntegrityError:
        # A concurrent request created it first; nothing else is pending yet
        db.rollback()
        profile = db.get(models.UserProfile, user_id)
        if profile is None:
            raise AuthenticationError("A different account already uses this email")
    return profile


# JWT verification and profile retrieval
def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(database.get_db),
) -> models.UserProfile:
    if credentials is None:
        raise AuthenticationError("Authentication required")

    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError:
        raise AuthenticationError()

    user_id = payload.get("sub")
    email = payload.get("email")
    if not user_id or not email:
        raise AuthenticationError()

    return ensure_profile(db, user_id, email, default_full_name(email, payload.get("user_metadata")))


def verify_admin_user(current_user: models.UserProfile = Depends(get_current_user)) -> models.UserProfile:
    if not current_user.is_admin:
        raise ForbiddenActionError("You do not have permission to perform this action (Admin Only).")
    return current_user
