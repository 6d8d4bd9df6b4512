"""Tests for the user blueprint."""

import unittest
from io import BytesIO
from unittest.mock import patch

from snapgram.errors import NotFoundError
from tests.helpers import MOCK_USER_DATA, MOCK_USER_ID, RouteTestCase

OTHER_USER = {"id": "user2", "name": "User Two", "followerId": [], "followingId": []}


class UserRoutesTestCase(RouteTestCase):
    def setUp(self):
        super().setUp()
        self.login()
        patcher = patch("snapgram.user.routes.UserService")
        self.mock_service = patcher.start()
        self.addCleanup(patcher.stop)

    def test_profile(self):
        self.mock_service.get_user_by_id.return_value = OTHER_USER
        self.mock_service.get_followers_count.return_value = 3
        self.mock_service.get_following_count.return_value = 1
        self.mock_service.is_following.return_value = True

        response = self.client.get("/user/user2")

        data = response.get_json()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(data["user"]["id"], "user2")
        self.assertEqual(data["followers_count"], 3)
        self.assertEqual(data["following_count"], 1)
        self.assertTrue(data["is_following"])
        self.mock_service.is_following.assert_called_once_with(
            self.mock_db, MOCK_USER_ID, "user2"
        )

    def test_profile_not_found(self):
        self.mock_service.get_user_by_id.side_effect = NotFoundError("User not found.")

        response = self.client.get("/user/ghost")

        self.assertEqual(response.status_code, 404)

    def test_users_with_limit(self):
        self.mock_service.get_users.return_value = [OTHER_USER]

        response = self.client.get("/user/?limit=5")

        self.assertEqual(response.get_json()["documents"], [OTHER_USER])
        self.mock_service.get_users.assert_called_once_with(self.mock_db, limit=5)

    def test_follow(self):
        self.mock_service.follow_user.return_value = {
            **MOCK_USER_DATA,
            "followingId": ["user2"],
        }

        response = self.client.post("/user/user2/follow")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["user"]["followingId"], ["user2"])
        self.mock_service.follow_user.assert_called_once_with(
            self.mock_db, MOCK_USER_ID, "user2"
        )

    def test_unfollow(self):
        self.mock_service.unfollow_user.return_value = MOCK_USER_DATA

        response = self.client.post("/user/user2/unfollow")

        self.assertEqual(response.status_code, 200)
        self.mock_service.unfollow_user.assert_called_once_with(
            self.mock_db, MOCK_USER_ID, "user2"
        )

    def test_is_following(self):
        self.mock_service.is_following.return_value = False

        response = self.client.get("/user/user2/is_following")

        self.assertEqual(response.get_json(), {"is_following": False})

    def test_followers_and_following(self):
        self.mock_service.get_followers.return_value = [OTHER_USER]
        self.mock_service.get_following.return_value = []

        followers = self.client.get("/user/user1/followers").get_json()
        following = self.client.get("/user/user1/following").get_json()

        self.assertEqual(followers["documents"], [OTHER_USER])
        self.assertEqual(following["documents"], [])

    def test_edit_own_profile_with_picture(self):
        self.mock_service.update_user.return_value = MOCK_USER_DATA

        response = self.client.post(
            f"/user/{MOCK_USER_ID}/edit",
            data={
                "name": "User One",
                "bio": "Hi",
                "file": (BytesIO(b"img"), "me.png"),
            },
            content_type="multipart/form-data",
        )

        self.assertEqual(response.status_code, 200)
        kwargs = self.mock_service.update_user.call_args.kwargs
        self.assertEqual(kwargs["name"], "User One")
        self.assertEqual(kwargs["bio"], "Hi")
        self.assertEqual(kwargs["file_storage"].filename, "me.png")

    def test_edit_rejects_non_images(self):
        response = self.client.post(
            f"/user/{MOCK_USER_ID}/edit",
            data={"name": "User One", "file": (BytesIO(b"x"), "notes.txt")},
            content_type="multipart/form-data",
        )

        self.assertEqual(response.status_code, 400)
        self.mock_service.update_user.assert_not_called()

    def test_edit_other_profile_forbidden(self):
        response = self.client.post("/user/user2/edit", data={"name": "Hacker"})

        self.assertEqual(response.status_code, 403)
        self.mock_service.update_user.assert_not_called()


if __name__ == "__main__":
    unittest.main()
