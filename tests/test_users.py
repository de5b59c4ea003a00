"""Tests for UserDirectory."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from estate_map.config import EstateMapConfig, StoreConfig
from estate_map.exceptions import UserNotFoundError, ValidationError
from estate_map.models import GoogleProfile, UserStatus
from estate_map.services import UserDirectory
from estate_map.services.users import USERS
from estate_map.store import DocumentStore


@pytest.fixture
def profile() -> GoogleProfile:
    return GoogleProfile(
        google_id="104857600000000000001",
        email="Marko.Jovanovic@example.com",
        first_name="Marko",
        last_name="Jovanović",
        picture="https://example.com/marko.png",
    )


class TestSignIn:
    """Tests for sign-in registration."""

    def test_registers_new_user(self, store: DocumentStore, profile: GoogleProfile) -> None:
        user = UserDirectory(store).sign_in(profile)

        assert user.email == "marko.jovanovic@example.com"
        assert user.display_name == "Marko Jovanović"
        assert user.status is UserStatus.ACTIVE
        assert user.profile_picture == "https://example.com/marko.png"
        assert user.created_at == user.last_login
        assert store.count(USERS) == 1

    def test_existing_user_refreshes_last_login(self, store: DocumentStore, profile: GoogleProfile) -> None:
        directory = UserDirectory(store)
        first = directory.sign_in(profile)

        second = directory.sign_in(profile)

        assert second.user_id == first.user_id
        assert second.last_login >= first.last_login
        assert second.created_at == first.created_at
        assert store.count(USERS) == 1

    def test_rejects_incomplete_profile(self, store: DocumentStore) -> None:
        with pytest.raises(ValidationError):
            UserDirectory(store).sign_in(GoogleProfile(google_id="1", email="", first_name="", last_name=""))

    def test_concurrent_first_sign_in_registers_once(
        self, store: DocumentStore, profile: GoogleProfile
    ) -> None:
        directory = UserDirectory(store, EstateMapConfig(store=StoreConfig(max_transaction_retries=10_000)))
        barrier = threading.Barrier(8)

        def sign_in(_: int) -> str:
            barrier.wait()
            return directory.sign_in(profile).user_id

        with ThreadPoolExecutor(max_workers=8) as executor:
            user_ids = set(executor.map(sign_in, range(8)))

        assert len(user_ids) == 1
        assert store.count(USERS) == 1


class TestLookups:
    """Tests for user lookups."""

    def test_get(self, store: DocumentStore, profile: GoogleProfile) -> None:
        directory = UserDirectory(store)
        user = directory.sign_in(profile)

        assert directory.get(user.user_id) == user
        with pytest.raises(UserNotFoundError):
            directory.get("missing")

    def test_find_by_email_is_case_insensitive(self, store: DocumentStore, profile: GoogleProfile) -> None:
        directory = UserDirectory(store)
        user = directory.sign_in(profile)

        assert directory.find_by_email("MARKO.JOVANOVIC@example.com") == user
        assert directory.find_by_email("nobody@example.com") is None

    def test_find_by_google_id(self, store: DocumentStore, profile: GoogleProfile) -> None:
        directory = UserDirectory(store)
        user = directory.sign_in(profile)

        assert directory.find_by_google_id(profile.google_id) == user
        assert directory.find_by_google_id("0") is None
