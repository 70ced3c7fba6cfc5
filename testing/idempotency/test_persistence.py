"""Tests for idempotent request processing."""

import unittest
import uuid
from unittest.mock import MagicMock, patch

from fastapi import Response
from fastapi.responses import RedirectResponse

from src.database.idempotency import IdempotencyRecord
from src.idempotency import (
    Begin,
    IdempotencyError,
    IdempotencyKey,
    IdempotencyKeyInFlightError,
    Replay,
    complete,
    get_saved_response,
    try_begin,
)

PERSISTENCE = "src.idempotency.persistence"


def _completed_record(user_id: uuid.UUID, key: str) -> IdempotencyRecord:
    return IdempotencyRecord(
        user_id=user_id,
        idempotency_key=key,
        response_status_code=303,
        response_headers=[["content-length", "0"], ["location", "/admin/issues"]],
        response_body=b"",
    )


class TestTryBegin(unittest.TestCase):
    """Tests for try_begin."""

    def setUp(self) -> None:
        """Set up test fixtures."""
        self.session = MagicMock()
        self.user_id = uuid.uuid4()
        self.key = IdempotencyKey.parse("abc123")

    @patch(f"{PERSISTENCE}.get_idempotency_record")
    @patch(f"{PERSISTENCE}.insert_pending_record")
    def test_returns_begin_when_key_claimed(
        self,
        mock_insert: MagicMock,
        mock_get: MagicMock,
    ) -> None:
        """Test that a successful insert hands the session back in Begin."""
        mock_insert.return_value = True

        result = try_begin(self.session, self.user_id, self.key)

        self.assertIsInstance(result, Begin)
        self.assertIs(result.session, self.session)
        mock_insert.assert_called_once_with(self.session, self.user_id, "abc123")
        mock_get.assert_not_called()

    @patch(f"{PERSISTENCE}.get_idempotency_record")
    @patch(f"{PERSISTENCE}.insert_pending_record")
    def test_returns_replay_when_completed(
        self,
        mock_insert: MagicMock,
        mock_get: MagicMock,
    ) -> None:
        """Test that a completed record is replayed with its stored response."""
        mock_insert.return_value = False
        mock_get.return_value = _completed_record(self.user_id, "abc123")

        result = try_begin(self.session, self.user_id, self.key)

        self.assertIsInstance(result, Replay)
        self.assertEqual(result.response.status_code, 303)
        self.assertEqual(
            result.response.raw_headers,
            [(b"content-length", b"0"), (b"location", b"/admin/issues")],
        )
        self.assertEqual(result.response.body, b"")

    @patch(f"{PERSISTENCE}.get_idempotency_record")
    @patch(f"{PERSISTENCE}.insert_pending_record")
    def test_replay_keeps_stored_status_code(
        self,
        mock_insert: MagicMock,
        mock_get: MagicMock,
    ) -> None:
        """Test that the replayed status is exactly the stored one."""
        mock_insert.return_value = False
        mock_get.return_value = IdempotencyRecord(
            user_id=self.user_id,
            idempotency_key="abc123",
            response_status_code=202,
            response_headers=[],
            response_body=b"accepted",
        )

        result = try_begin(self.session, self.user_id, self.key)

        self.assertEqual(result.response.status_code, 202)
        self.assertEqual(result.response.raw_headers, [])
        self.assertEqual(result.response.body, b"accepted")

    @patch(f"{PERSISTENCE}.get_idempotency_record")
    @patch(f"{PERSISTENCE}.insert_pending_record")
    def test_raises_in_flight_when_pending(
        self,
        mock_insert: MagicMock,
        mock_get: MagicMock,
    ) -> None:
        """Test that a pending record raises the retryable in-flight error."""
        mock_insert.return_value = False
        mock_get.return_value = IdempotencyRecord(user_id=self.user_id, idempotency_key="abc123")

        with self.assertRaises(IdempotencyKeyInFlightError) as context:
            try_begin(self.session, self.user_id, self.key)

        self.assertEqual(context.exception.user_id, self.user_id)
        self.assertEqual(context.exception.idempotency_key, self.key)
        self.assertIn("abc123", str(context.exception))

    @patch(f"{PERSISTENCE}.get_idempotency_record")
    @patch(f"{PERSISTENCE}.insert_pending_record")
    def test_raises_when_conflicting_record_missing(
        self,
        mock_insert: MagicMock,
        mock_get: MagicMock,
    ) -> None:
        """Test that a conflict with no readable record is an error."""
        mock_insert.return_value = False
        mock_get.return_value = None

        with self.assertRaises(IdempotencyError):
            try_begin(self.session, self.user_id, self.key)


class TestComplete(unittest.TestCase):
    """Tests for complete."""

    def setUp(self) -> None:
        """Set up test fixtures."""
        self.session = MagicMock()
        self.user_id = uuid.uuid4()
        self.key = IdempotencyKey.parse("abc123")

    @patch(f"{PERSISTENCE}.save_response_fields")
    def test_saves_response_and_commits(self, mock_save: MagicMock) -> None:
        """Test that the response is stored and the session committed."""
        response = RedirectResponse(url="/admin/issues", status_code=303)
        expected_headers = [
            [name.decode("latin-1"), value.decode("latin-1")]
            for name, value in response.raw_headers
        ]

        result = complete(self.session, self.user_id, self.key, response)

        self.assertIs(result, response)
        mock_save.assert_called_once_with(
            self.session,
            self.user_id,
            "abc123",
            status_code=303,
            headers=expected_headers,
            body=b"",
        )
        self.assertIn(["location", "/admin/issues"], expected_headers)
        self.session.commit.assert_called_once()

    @patch(f"{PERSISTENCE}.save_response_fields")
    def test_does_not_commit_when_save_fails(self, mock_save: MagicMock) -> None:
        """Test that a failed save leaves the transaction uncommitted."""
        mock_save.side_effect = RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            complete(self.session, self.user_id, self.key, Response(content=b"ok"))

        self.session.commit.assert_not_called()


class TestResponseRoundTrip(unittest.TestCase):
    """Tests that stored responses come back byte for byte."""

    @patch(f"{PERSISTENCE}.get_idempotency_record")
    @patch(f"{PERSISTENCE}.save_response_fields")
    def test_non_ascii_header_bytes_survive(
        self,
        mock_save: MagicMock,
        mock_get: MagicMock,
    ) -> None:
        """Test that header bytes outside ASCII and header order are preserved."""
        session = MagicMock()
        user_id = uuid.uuid4()
        key = IdempotencyKey.parse("abc123")
        original = Response(content=b"\x00\xffbody", status_code=201)
        original.raw_headers = [
            (b"x-second", b"caf\xe9"),
            (b"x-first", b"1"),
            (b"x-second", b"again"),
        ]

        complete(session, user_id, key, original)
        saved = mock_save.call_args.kwargs
        mock_get.return_value = IdempotencyRecord(
            user_id=user_id,
            idempotency_key="abc123",
            response_status_code=saved["status_code"],
            response_headers=saved["headers"],
            response_body=saved["body"],
        )

        replayed = get_saved_response(session, user_id, key)

        self.assertIsNotNone(replayed)
        self.assertEqual(replayed.status_code, 201)
        self.assertEqual(replayed.raw_headers, original.raw_headers)
        self.assertEqual(replayed.body, b"\x00\xffbody")


class TestGetSavedResponse(unittest.TestCase):
    """Tests for get_saved_response."""

    @patch(f"{PERSISTENCE}.get_idempotency_record")
    def test_returns_none_for_unknown_key(self, mock_get: MagicMock) -> None:
        """Test that an unclaimed key has no saved response."""
        mock_get.return_value = None

        result = get_saved_response(MagicMock(), uuid.uuid4(), IdempotencyKey.parse("k"))

        self.assertIsNone(result)

    @patch(f"{PERSISTENCE}.get_idempotency_record")
    def test_returns_none_for_pending_key(self, mock_get: MagicMock) -> None:
        """Test that a pending key has no saved response."""
        user_id = uuid.uuid4()
        mock_get.return_value = IdempotencyRecord(user_id=user_id, idempotency_key="k")

        result = get_saved_response(MagicMock(), user_id, IdempotencyKey.parse("k"))

        self.assertIsNone(result)

    @patch(f"{PERSISTENCE}.get_idempotency_record")
    def test_returns_response_for_completed_key(self, mock_get: MagicMock) -> None:
        """Test that a completed key returns its response."""
        user_id = uuid.uuid4()
        mock_get.return_value = _completed_record(user_id, "k")

        result = get_saved_response(MagicMock(), user_id, IdempotencyKey.parse("k"))

        self.assertIsNotNone(result)
        self.assertEqual(result.status_code, 303)
        self.assertEqual(result.headers["location"], "/admin/issues")


if __name__ == "__main__":
    unittest.main()
