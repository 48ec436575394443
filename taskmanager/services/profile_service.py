"""
Profile service module for the Task Manager
"""
import uuid

from sqlmodel import Session

from ..models.profile import Profile, ProfileUpdate
from ..utils.clock import utcnow
from ..utils.errors import RecordNotFoundException
from ..utils.logging import log_error
from .result import TRANSPORT_ERRORS, ServiceResult, failure_result


class ProfileService:
    """Service class for profile operations"""

    @staticmethod
    def get_profile(db: Session, user_id: uuid.UUID) -> ServiceResult[Profile]:
        """Get the profile belonging to a user."""
        context = "ProfileService.get_profile"
        try:
            profile = db.get(Profile, user_id)
            if profile is None:
                raise RecordNotFoundException("Profile", user_id)
            return ServiceResult.success(profile)
        except TRANSPORT_ERRORS as e:
            log_error(e, context, user_id)
            raise
        except Exception as e:
            return failure_result(db, e, context, user_id)

    @staticmethod
    def update_profile(db: Session, user_id: uuid.UUID, profile_data: ProfileUpdate) -> ServiceResult[Profile]:
        """
        Update a user's display name and/or avatar URL.

        The email address is immutable through this call.
        """
        context = "ProfileService.update_profile"
        try:
            profile = db.get(Profile, user_id)
            if profile is None:
                raise RecordNotFoundException("Profile", user_id)

            for field, value in profile_data.model_dump(exclude_unset=True).items():
                setattr(profile, field, value)
            profile.updated_at = utcnow()

            db.add(profile)
            db.commit()
            db.refresh(profile)
            return ServiceResult.success(profile)
        except TRANSPORT_ERRORS as e:
            log_error(e, context, user_id)
            db.rollback()
            raise
        except Exception as e:
            return failure_result(db, e, context, user_id)
