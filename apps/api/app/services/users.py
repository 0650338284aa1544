"""User account service layer."""

from datetime import UTC, datetime
import logging

from app.adapters.base import BackendError, ResourceNotFoundError, UserAccount, UserDirectory
from app.core.logging_safety import safe_log_identifier
from app.domain.result import Err, Ok, Result
from app.errors import internal, not_found
from app.schemas.error import MessageResponse
from app.schemas.user import CreateUserRequest, CreateUserResponse, ProfileUpdateRequest, UserProfile

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, directory: UserDirectory) -> None:
        self._directory = directory

    def create_user(self, payload: CreateUserRequest) -> Result[CreateUserResponse]:
        fields = payload.model_dump(mode="json", exclude_none=True)
        try:
            account = self._directory.create_user(fields)
        except BackendError as exc:
            logger.warning("user.create_failed reason=%s", type(exc).__name__)
            return Err(internal("Failed to create user", exc))

        logger.info("user.created uid=%s", safe_log_identifier(account.uid, prefix="pid"))
        return Ok(CreateUserResponse(message="User created successfully", uid=account.uid), status_code=201)

    def get_profile(self, uid: str, *, include_disabled: bool = False) -> Result[UserProfile]:
        error_message = "Failed to fetch user" if include_disabled else "Failed to fetch user profile"
        try:
            account = self._directory.get_user(uid)
        except ResourceNotFoundError:
            return Err(not_found("User not found"))
        except BackendError as exc:
            return Err(internal(error_message, exc))

        profile = self._to_profile(account, include_disabled=include_disabled)
        profile.created_at = account.created_at
        profile.last_sign_in_time = account.last_sign_in_at
        return Ok(profile)

    def update_profile(
        self,
        uid: str,
        payload: ProfileUpdateRequest,
        *,
        include_disabled: bool = False,
    ) -> Result[UserProfile]:
        error_message = "Failed to update user" if include_disabled else "Failed to update user profile"
        changes = payload.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        try:
            account = self._directory.update_user(uid, changes)
        except ResourceNotFoundError:
            return Err(not_found("User not found"))
        except BackendError as exc:
            return Err(internal(error_message, exc))

        logger.info(
            "user.updated uid=%s fields=%s",
            safe_log_identifier(uid, prefix="pid"),
            ",".join(sorted(key for key in changes if key != "password")) or "-",
        )
        profile = self._to_profile(account, include_disabled=include_disabled)
        profile.updated_at = datetime.now(UTC)
        return Ok(profile)

    def delete_user(self, uid: str) -> Result[MessageResponse]:
        try:
            self._directory.delete_user(uid)
        except ResourceNotFoundError:
            return Err(not_found("User not found"))
        except BackendError as exc:
            return Err(internal("Failed to delete user", exc))

        logger.info("user.deleted uid=%s", safe_log_identifier(uid, prefix="pid"))
        return Ok(MessageResponse(message="User deleted successfully"))

    @staticmethod
    def _to_profile(account: UserAccount, *, include_disabled: bool) -> UserProfile:
        return UserProfile(
            uid=account.uid,
            email=account.email,
            display_name=account.display_name,
            photo_url=account.photo_url,
            disabled=account.disabled if include_disabled else None,
            email_verified=account.email_verified,
        )
