"""Tests for bearer-token sessions."""

from datetime import datetime, timedelta

from daylog.services.session_manager import SessionManager


class TestSessionManager:
    def test_token_resolves_to_username(self):
        sessions = SessionManager()
        token = sessions.create_session("alice")

        assert sessions.current_username(token) == "alice"

    def test_unknown_or_missing_token(self):
        sessions = SessionManager()

        assert sessions.current_username("nope") is None
        assert sessions.current_username(None) is None
        assert sessions.current_username("") is None

    def test_new_login_replaces_previous_session(self):
        sessions = SessionManager()

        first = sessions.create_session("alice")
        second = sessions.create_session("alice")

        assert first != second
        assert sessions.current_username(first) is None
        assert sessions.current_username(second) == "alice"
        assert sessions.get_active_sessions_count() == 1

    def test_sessions_of_different_users_coexist(self):
        sessions = SessionManager()

        alice = sessions.create_session("alice")
        bob = sessions.create_session("bob")

        assert sessions.current_username(alice) == "alice"
        assert sessions.current_username(bob) == "bob"

    def test_end_session(self):
        sessions = SessionManager()
        token = sessions.create_session("alice")

        assert sessions.end_session(token) is True
        assert sessions.end_session(token) is False
        assert sessions.current_username(token) is None

    def test_expired_session_is_dropped(self):
        sessions = SessionManager()
        token = sessions.create_session("alice")
        sessions.active_sessions[token].expires_at = datetime.now() - timedelta(seconds=1)

        assert sessions.current_username(token) is None
        assert token not in sessions.active_sessions

    def test_cleanup_expired_sessions(self):
        sessions = SessionManager()
        live = sessions.create_session("alice")
        stale = sessions.create_session("bob")
        sessions.active_sessions[stale].expires_at = datetime.now() - timedelta(hours=1)

        assert sessions.cleanup_expired_sessions() == 1
        assert sessions.get_active_sessions_count() == 1
        assert sessions.current_username(live) == "alice"

    def test_stale_sessions_purged_on_next_login(self):
        sessions = SessionManager()
        stale = sessions.create_session("bob")
        sessions.active_sessions[stale].expires_at = datetime.now() - timedelta(hours=1)

        sessions.create_session("alice")

        assert stale not in sessions.active_sessions
        assert "bob" not in sessions.user_sessions
        assert len(sessions.active_sessions) == 1

    def test_ending_old_token_keeps_new_session(self):
        sessions = SessionManager()
        first = sessions.create_session("alice")
        second = sessions.create_session("alice")

        assert sessions.end_session(first) is False
        assert sessions.user_sessions["alice"] == second
