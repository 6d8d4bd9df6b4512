"""Tests for the comment service."""

from __future__ import annotations

import re
import unittest
from unittest.mock import patch

from snapgram.comment.services import (
    create_comment,
    delete_comment,
    edit_comment,
    generate_comment_id,
    get_comment,
    get_comments,
)
from snapgram.constants import DEFAULT_PROFILE_IMAGE, UNKNOWN_USER_NAME
from snapgram.core import Comment
from snapgram.errors import DuplicateResourceError, NotFoundError
from tests.helpers import FirestoreTestCase


class CommentServiceTestCase(FirestoreTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.add_user("alice", name="Alice", imageUrl="https://example.com/a.png")

    def _add_comment(self, comment_id: str, **fields: str) -> None:
        data = {
            "commentId": comment_id,
            "userId": "alice",
            "postId": "post1",
            "commentText": f"text {comment_id}",
            "createdAt": "2024-01-01T00:00:00+00:00",
        }
        data.update(fields)
        self.db.collection("comments").document(comment_id).set(data)

    def test_generate_comment_id(self) -> None:
        first = generate_comment_id()
        self.assertRegex(first, r"^[0-9a-f]{32}$")
        self.assertNotEqual(first, generate_comment_id())

    def test_create_then_list(self) -> None:
        comment = create_comment(self.db, "alice", "Nice shot!", "post1")

        comments = get_comments(self.db)
        self.assertEqual(len(comments), 1)
        self.assertEqual(comments[0]["commentId"], comment["commentId"])
        self.assertEqual(comments[0]["postId"], "post1")
        self.assertEqual(comments[0]["commentText"], "Nice shot!")
        self.assertEqual(comments[0]["userName"], "Alice")
        self.assertEqual(comments[0]["userImage"], "https://example.com/a.png")

    def test_create_stores_id_as_document_key(self) -> None:
        comment = create_comment(self.db, "alice", "Hello", "post1")

        stored = self.get_doc("comments", comment["commentId"])
        self.assertEqual(stored["commentId"], comment["commentId"])
        self.assertEqual(stored["userId"], "alice")
        self.assertTrue(re.match(r"^\d{4}-\d{2}-\d{2}T", stored["createdAt"]))

    def test_create_requires_known_user(self) -> None:
        with self.assertRaises(NotFoundError):
            create_comment(self.db, "ghost", "Hello", "post1")
        self.assertEqual(get_comments(self.db), [])

    def test_create_refuses_to_overwrite(self) -> None:
        self._add_comment("fixed")
        with patch(
            "snapgram.comment.services.generate_comment_id", return_value="fixed"
        ):
            with self.assertRaises(DuplicateResourceError):
                create_comment(self.db, "alice", "Clash", "post1")
        self.assertEqual(self.get_doc("comments", "fixed")["commentText"], "text fixed")

    def test_list_returns_all_posts_in_order(self) -> None:
        self._add_comment("c2", postId="post2", createdAt="2024-01-02T00:00:00+00:00")
        self._add_comment("c1", createdAt="2024-01-01T00:00:00+00:00")

        comments = get_comments(self.db)

        self.assertEqual([c["commentId"] for c in comments], ["c1", "c2"])

    def test_list_filtered_by_post(self) -> None:
        self._add_comment("c1")
        self._add_comment("c2", postId="post2")

        comments = get_comments(self.db, post_id="post2")

        self.assertEqual([c["commentId"] for c in comments], ["c2"])

    def test_list_skips_malformed_and_orphaned_comments(self) -> None:
        self._add_comment("good")
        self.db.collection("comments").document("no_author").set(
            {"postId": "post1", "commentText": "x", "createdAt": "2024-01-01"}
        )
        self._add_comment("gone_author", userId="deleted")

        comments = get_comments(self.db)

        self.assertEqual([c["commentId"] for c in comments], ["good"])

    def test_list_uses_defaults_for_missing_author_details(self) -> None:
        self.add_user("bare", name="", imageUrl=None)
        self._add_comment("c1", userId="bare")

        comment = get_comments(self.db)[0]

        self.assertEqual(comment["userName"], UNKNOWN_USER_NAME)
        self.assertEqual(comment["userImage"], DEFAULT_PROFILE_IMAGE)

    def test_edit_changes_only_text(self) -> None:
        self._add_comment("c1")
        before = self.get_doc("comments", "c1")

        result = edit_comment(self.db, "c1", "Edited")

        after = self.get_doc("comments", "c1")
        self.assertEqual(result["commentText"], "Edited")
        self.assertEqual(after["commentText"], "Edited")
        for field in ("userId", "postId", "createdAt", "commentId"):
            self.assertEqual(after[field], before[field])

    def test_edit_unknown_comment(self) -> None:
        with self.assertRaises(NotFoundError):
            edit_comment(self.db, "missing", "Edited")

    def test_get_comment_has_comment_fields(self) -> None:
        self._add_comment("c1")

        comment = get_comment(self.db, "c1")

        self.assertEqual(set(comment), set(Comment.__annotations__))

    def test_get_comment_with_deleted_author(self) -> None:
        self._add_comment("c1", userId="deleted")

        comment = get_comment(self.db, "c1")

        self.assertEqual(comment["commentId"], "c1")
        self.assertEqual(comment["userName"], UNKNOWN_USER_NAME)
        self.assertEqual(comment["userImage"], DEFAULT_PROFILE_IMAGE)

    def test_edit_comment_with_deleted_author(self) -> None:
        self._add_comment("c1", userId="deleted")

        result = edit_comment(self.db, "c1", "new")

        self.assertEqual(result["commentText"], "new")
        self.assertEqual(self.get_doc("comments", "c1")["commentText"], "new")

    def test_edit_incomplete_comment_writes_nothing(self) -> None:
        self.db.collection("comments").document("broken").set(
            {"commentText": "old", "postId": "post1"}
        )

        with self.assertRaises(NotFoundError):
            edit_comment(self.db, "broken", "new")

        self.assertEqual(self.get_doc("comments", "broken")["commentText"], "old")

    def test_delete_removes_comment(self) -> None:
        self._add_comment("c1")
        self._add_comment("c2")

        delete_comment(self.db, "c1")

        self.assertEqual([c["commentId"] for c in get_comments(self.db)], ["c2"])
        with self.assertRaises(NotFoundError):
            get_comment(self.db, "c1")


if __name__ == "__main__":
    unittest.main()
