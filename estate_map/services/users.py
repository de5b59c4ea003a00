"""User directory backing sign-in."""

import logging
import uuid
from datetime import datetime

from estate_map.config import EstateMapConfig
from estate_map.exceptions import UserNotFoundError, ValidationError
from estate_map.models import GoogleProfile, User, UserStatus
from estate_map.store import DocumentStore, Session

logger = logging.getLogger(__name__)

USERS = "users"
USER_EMAILS = "user_emails"


class UserDirectory:
    """Registers users on first sign-in and tracks their last login.

    Email uniqueness is enforced by an index collection keyed by email that
    every registration reads inside its transaction, so two concurrent
    first sign-ins for the same email cannot both register.
    """

    def __init__(self, store: DocumentStore, config: EstateMapConfig | None = None) -> None:
        self.store = store
        self.config = config or EstateMapConfig()

    def sign_in(self, profile: GoogleProfile) -> User:
        """Return the user for ``profile``, registering it if new."""
        if not profile.email or not profile.google_id:
            raise ValidationError("Unauthenticated: profile lacks email or id")
        email = profile.email.strip().lower()

        def unit_of_work(session: Session) -> tuple[User, bool]:
            now = datetime.now()
            index = session.get(USER_EMAILS, email)
            if index is not None:
                doc = session.get(USERS, index["user_id"])
                if doc is None:
                    raise UserNotFoundError(f"User {index['user_id']} not found")
                doc["last_login"] = now.isoformat()
                session.put(USERS, index["user_id"], doc)
                return User.from_document(doc), False

            user = User(
                user_id=uuid.uuid4().hex,
                google_id=profile.google_id,
                email=email,
                display_name=f"{profile.first_name} {profile.last_name}".strip(),
                profile_picture=profile.picture,
                status=UserStatus.ACTIVE,
                created_at=now,
                last_login=now,
            )
            session.put(USER_EMAILS, email, {"user_id": user.user_id})
            session.put(USERS, user.user_id, user.to_document())
            return user, True

        user, registered = self.store.run_transaction(
            unit_of_work, max_retries=self.config.store.max_transaction_retries
        )
        if registered:
            logger.info("Registered user %s", user.user_id)
        return user

    def get(self, user_id: str) -> User:
        doc = self.store.get(USERS, user_id)
        if doc is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return User.from_document(doc)

    def find_by_email(self, email: str) -> User | None:
        index = self.store.get(USER_EMAILS, email.strip().lower())
        return self.get(index["user_id"]) if index else None

    def find_by_google_id(self, google_id: str) -> User | None:
        docs = self.store.find(USERS, lambda doc: doc["google_id"] == google_id)
        return User.from_document(docs[0]) if docs else None
