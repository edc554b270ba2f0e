# cabin_reservations/routes/users.py
import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cabin_reservations import auth, database, models, schemas
from cabin_reservations.exceptions import ForbiddenActionError, NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["Users"]
)


def _get_profile_or_404(db: Session, user_id: str) -> models.UserProfile:
    profile = db.get(models.UserProfile, user_id)
    if not profile:
        raise NotFoundError("User profile not found")
    return profile


# Own profile, created on first authenticated request
@router.get("/me", response_model=schemas.UserProfileResponse)
def read_own_profile(current_user: models.UserProfile = Depends(auth.get_current_user)):
    return schemas.UserProfileResponse.model_validate(current_user)


# Admin - list all profiles
@router.get("/", response_model=List[schemas.UserProfileResponse])
def list_users(
    db: Session = Depends(database.get_db),
    admin: models.UserProfile = Depends(auth.verify_admin_user),
):
    profiles = db.query(models.UserProfile).order_by(models.UserProfile.created_at.desc()).all()
    return [schemas.UserProfileResponse.model_validate(p) for p in profiles]


# Admin - edit name or admin flag
@router.patch("/{user_id}", response_model=schemas.UserProfileResponse)
def update_user(
    user_id: str,
    changes: schemas.UserProfileUpdate,
    db: Session = Depends(database.get_db),
    admin: models.UserProfile = Depends(auth.verify_admin_user),
):
    if (
        user_id == admin.id
        and changes.is_admin is not None
        and changes.is_admin != admin.is_admin
    ):
        raise ForbiddenActionError("Cannot change your own admin status")

    profile = _get_profile_or_404(db, user_id)
    if changes.full_name is not None:
        profile.full_name = changes.full_name
    if changes.is_admin is not None and changes.is_admin != profile.is_admin:
        profile.is_admin = changes.is_admin
        logger.info("Admin %s set is_admin=%s for %s", admin.id, profile.is_admin, profile.id)

    db.flush()
    return schemas.UserProfileResponse.model_validate(profile)


# Admin - delete a user together with their bookings
@router.delete("/{user_id}", response_model=schemas.MessageResponse)
def delete_user(
    user_id: str,
    db: Session = Depends(database.get_db),
    admin: models.UserProfile = Depends(auth.verify_admin_user),
):
    if user_id == admin.id:
        raise ForbiddenActionError("Cannot delete yourself")

    profile = _get_profile_or_404(db, user_id)
    db.delete(profile)
    logger.info("Admin %s deleted user %s", admin.id, user_id)
    return {"message": "User deleted successfully"}
