"""Account operations: registration, credential checks and profile updates.

These functions only touch the record store; binding the resulting user to
a session is left to the HTTP layer.
"""

from typing import List, Optional

from core.exceptions import AuthenticationError, DuplicateError, NotFoundError, ValidationError
from core.logger import get_logger
from core.repository import UniqueConflict
from core.security import get_password_hash, verify_password
from database.store import RecordStore
from schemas.user_schema import RegisterRequest, UpdateProfileRequest, UserRecord, clean_allergies

logger = get_logger("services.auth_service")

UNIQUE_USER_FIELDS = ("username", "email")
DUPLICATE_MESSAGES = {
    "username": "Username already taken",
    "email": "Email already registered",
}


class AuthService:
    """Class-based account service used by the auth router."""

    def register(self, store: RecordStore, payload: RegisterRequest) -> UserRecord:
        """Create a user after checking the confirmation and uniqueness.

        Raises:
            ValidationError: If the passwords don't match.
            DuplicateError: If the username or email is already registered.
        """
        if payload.password != payload.confirm_password:
            raise ValidationError("Passwords don't match", field="confirmPassword")
        # early exit before hashing; create_unique repeats the check atomically
        for field, existing in (
            ("username", store.get_user_by_username(payload.username)),
            ("email", store.get_user_by_email(payload.email)),
        ):
            if existing is not None:
                raise DuplicateError(DUPLICATE_MESSAGES[field], field=field)

        try:
            user = store.users.create_unique(
                {
                    "username": payload.username,
                    "email": payload.email,
                    "password_hash": get_password_hash(payload.password),
                    "name": payload.name,
                    "allergies": payload.allergies or [],
                },
                unique=UNIQUE_USER_FIELDS,
            )
        except UniqueConflict as exc:
            raise DuplicateError(DUPLICATE_MESSAGES[exc.field], field=exc.field) from exc
        logger.info("Registered user %s (id=%s)", user.username, user.id)
        return user

    def authenticate(self, store: RecordStore, username: str, password: str) -> UserRecord:
        """Return the user for a valid username/password pair.

        Raises:
            AuthenticationError: If the username is unknown or the password is wrong.
        """
        user = store.get_user_by_username(username)
        if user is None:
            logger.info("Login failed: unknown username %s", username)
            raise AuthenticationError("Incorrect username.")
        if not verify_password(password, user.password_hash):
            logger.info("Login failed: wrong password for %s", username)
            raise AuthenticationError("Incorrect password.")
        return user

    def update_profile(self, store: RecordStore, user: UserRecord, payload: UpdateProfileRequest) -> UserRecord:
        """Apply name, email and password changes present in the payload.

        Raises:
            DuplicateError: If the new email belongs to another user.
        """
        changes = {}
        data = payload.model_dump(exclude_unset=True)
        if "name" in data:
            changes["name"] = data["name"]
        if data.get("email"):
            changes["email"] = data["email"].strip()
        if data.get("new_password"):
            changes["password_hash"] = get_password_hash(data["new_password"])
        return self._apply(store, user, changes)

    def update_allergies(self, store: RecordStore, user: UserRecord, allergies: List[str]) -> UserRecord:
        return self._apply(store, user, {"allergies": clean_allergies(allergies)})

    def _apply(self, store: RecordStore, user: UserRecord, changes: dict) -> UserRecord:
        if not changes:
            updated: Optional[UserRecord] = store.users.get(user.id)
        else:
            try:
                updated = store.users.update_unique(user.id, changes, unique=UNIQUE_USER_FIELDS)
            except UniqueConflict as exc:
                raise DuplicateError(DUPLICATE_MESSAGES[exc.field], field=exc.field) from exc
        if updated is None:
            raise NotFoundError("User", user.id)
        if changes:
            logger.info("Updated user id=%s fields=%s", user.id, sorted(k for k in changes if k != "password_hash"))
        return updated


auth_service = AuthService()
__all__ = ["AuthService", "auth_service"]
