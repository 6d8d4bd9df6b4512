"""Base test cases shared by the service and route tests."""

import unittest
from typing import Any
from unittest.mock import MagicMock, patch

from snapgram import create_app
from tests.mock_utils import MockArrayRemove, MockArrayUnion, make_mock_db

MOCK_USER_ID = "user1"
MOCK_ACCOUNT_ID = "account1"
MOCK_USER_DATA = {
    "id": MOCK_USER_ID,
    "accountId": MOCK_ACCOUNT_ID,
    "name": "User One",
    "username": "userone",
    "email": "user1@example.com",
    "imageUrl": "https://example.com/user1.png",
    "followingId": [],
    "followerId": [],
}


class FirestoreTestCase(unittest.TestCase):
    """Runs services against an in-memory Firestore inside an app context."""

    def setUp(self) -> None:
        self.db = make_mock_db()

        patchers = [
            patch("firebase_admin.firestore.ArrayUnion", new=MockArrayUnion),
            patch("firebase_admin.firestore.ArrayRemove", new=MockArrayRemove),
        ]
        for p in patchers:
            p.start()
            self.addCleanup(p.stop)

        self.app = create_app({"TESTING": True})
        self.app_context = self.app.app_context()
        self.app_context.push()
        self.addCleanup(self.app_context.pop)

    def add_user(self, user_id: str, **fields: Any) -> dict[str, Any]:
        """Create a profile document and return its data."""
        data = {
            "accountId": f"account-{user_id}",
            "name": f"Name {user_id}",
            "username": user_id,
            "email": f"{user_id}@example.com",
            "imageUrl": f"https://example.com/{user_id}.png",
            "bio": "",
            "followingId": [],
            "followerId": [],
            "createdAt": "2024-01-01T00:00:00+00:00",
        }
        data.update(fields)
        self.db.collection("users").document(user_id).set(data)
        return data

    def get_doc(self, collection: str, doc_id: str) -> dict[str, Any]:
        return self.db.collection(collection).document(doc_id).get().to_dict()


class RouteTestCase(unittest.TestCase):
    """Test client with Firestore and Storage replaced by mocks."""

    def setUp(self) -> None:
        self.mock_firestore_service = MagicMock()
        self.mock_storage_service = MagicMock()
        patchers = {
            "init_app": patch("firebase_admin.initialize_app"),
            "firestore": patch(
                "snapgram.utils.firestore", new=self.mock_firestore_service
            ),
            "storage": patch("snapgram.utils.storage", new=self.mock_storage_service),
            "load_user": patch("snapgram.get_user_by_id"),
        }

        self.mocks = {name: p.start() for name, p in patchers.items()}
        for p in patchers.values():
            self.addCleanup(p.stop)

        self.mock_db = self.mock_firestore_service.client.return_value
        self.app = create_app(
            {"TESTING": True, "WTF_CSRF_ENABLED": False, "SERVER_NAME": "localhost"}
        )
        self.client = self.app.test_client()

    def login(self, user_data: dict[str, Any] | None = None) -> dict[str, Any]:
        """Put a signed-in user into the session."""
        user = dict(user_data or MOCK_USER_DATA)
        with self.client.session_transaction() as sess:
            sess["account_id"] = user.get("accountId", MOCK_ACCOUNT_ID)
            sess["user_id"] = user["id"]
        self.mocks["load_user"].return_value = user
        return user
