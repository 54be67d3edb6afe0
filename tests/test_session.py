"""Tests for SessionContext."""

from unittest.mock import MagicMock

import pytest

from src.errors import Unauthorized
from src.services.session import SessionContext, SessionUser


class TestSessionContext:
    @pytest.fixture
    def session(self):
        return SessionContext()

    def test_anonymous_session(self, session):
        """Test a new session has no user."""
        assert session.user is None
        assert session.is_authenticated is False

        with pytest.raises(Unauthorized):
            session.require_user()

    def test_sign_in_notifies_listeners(self, session):
        """Test listeners see sign-in and sign-out."""
        listener = MagicMock()
        session.subscribe(listener)
        user = SessionUser(user_id="alice")

        session.sign_in(user)
        session.sign_out()

        assert [c.args[0] for c in listener.call_args_list] == [user, None]

    def test_unsubscribe_stops_notifications(self, session):
        """Test the callable returned by subscribe removes the listener."""
        listener = MagicMock()
        unsubscribe = session.subscribe(listener)

        unsubscribe()
        session.sign_in(SessionUser(user_id="alice"))

        listener.assert_not_called()

    def test_require_user(self, session):
        """Test require_user returns the signed-in user."""
        session.sign_in(SessionUser(user_id="alice", email="alice@example.com"))

        assert session.require_user().user_id == "alice"
        assert session.is_authenticated is True

    def test_unsubscribe_unknown_listener(self, session):
        """Test removing a listener that was never added is a no-op."""
        session.unsubscribe(MagicMock())
