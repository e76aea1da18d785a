import pytest

from hookline.auth import token_cipher
from hookline.auth.errors import InvalidLogin, InvalidPassword, LimitExceeded, StoreError
from hookline.hooks import is_error
from hookline.services.user_directory import InMemoryUserDirectory

from tests.conftest import ALICE_PASSWORD
from tests.fixtures.helpers import make_context, run

pytestmark = pytest.mark.sessions


class SpyDirectory(InMemoryUserDirectory):
    def __init__(self, users=()):
        super().__init__(users)
        self.lookups = []

    async def get_by(self, column, value):
        self.lookups.append((column, value))
        return await super().get_by(column, value)


def _credentials(username="alice", password=ALICE_PASSWORD):
    return {"username": username, "password": password, "client": "web", "platform": {}}


def _guest_context(application, sessions):
    """Context carrying a freshly issued guest token, resolved like the API does."""
    _, token = run(sessions.issue("web", {}, make_context(application)))
    ctx = make_context(application, token)
    run(ctx.get_session_id())
    return ctx, token


class TestLogin:

    def test_success_replaces_guest_session(self, application, sessions, users, store, alice):
        ctx, guest_token = _guest_context(application, sessions)
        guest_id = ctx.session.id

        err, user = run(users.login(_credentials(), ctx))

        assert err is None
        assert user is alice
        assert ctx.current_user is alice
        assert guest_id not in store.records

        assert ctx.session.user_id == alice.id
        assert ctx.session.session_id != guest_token
        assert ctx.response.headers["x-session-id"] == ctx.session.session_id
        assert token_cipher.decrypt(ctx.session.session_id) == ctx.session.id
        assert list(store.records) == [ctx.session.id]

    def test_login_by_email(self, application, sessions, users, alice):
        ctx, _ = _guest_context(application, sessions)

        err, user = run(users.login(_credentials(username="alice@example.com"), ctx))

        assert err is None
        assert user is alice

    def test_wrong_password_counts_attempt(self, application, sessions, users, store):
        ctx, _ = _guest_context(application, sessions)

        err, user = run(users.login(_credentials(password="wrong"), ctx))

        assert isinstance(err, InvalidPassword)
        assert user is None
        assert store.records[ctx.session.id]["login_attempts"] == 1

    def test_unknown_user(self, application, sessions, users):
        ctx, _ = _guest_context(application, sessions)

        err, user = run(users.login(_credentials(username="mallory"), ctx))

        assert isinstance(err, InvalidLogin)
        assert err.code == "invalid_login"
        assert user is None

    def test_login_without_session_is_not_throttled(self, application, users, alice):
        ctx = make_context(application)

        err, user = run(users.login(_credentials(), ctx))

        assert err is None
        assert user is alice
        assert ctx.session.user_id == alice.id

    def test_limit_exceeded_after_five_attempts(self, application, sessions, users, store):
        ctx, _ = _guest_context(application, sessions)

        for _ in range(5):
            err, _ = run(users.login(_credentials(password="wrong"), ctx))
            assert isinstance(err, InvalidPassword)

        err, user = run(users.login(_credentials(), ctx))

        assert isinstance(err, LimitExceeded)
        assert user is None
        assert store.records[ctx.session.id]["login_attempts"] == 5
        assert ctx.current_user is None

    def test_veto_skips_lookup_but_later_guards_run(self, application, sessions, users, store, alice):
        spy = SpyDirectory([alice])
        users.directory = spy
        seen = []

        users.on("preUserLogin", lambda can_login, credentials, ctx: InvalidLogin("Blocked"))
        users.on("preUserLogin", lambda can_login, credentials, ctx: seen.append(can_login) or can_login)

        ctx, _ = _guest_context(application, sessions)
        err, user = run(users.login(_credentials(), ctx))

        assert isinstance(err, InvalidLogin)
        assert str(err) == "Blocked"
        assert user is None
        assert spy.lookups == []
        assert len(seen) == 1 and is_error(seen[0])
        # The session guard ran before the veto
        assert store.records[ctx.session.id]["login_attempts"] == 1

    def test_store_failure_is_returned(self, application, sessions, users, store, monkeypatch):
        ctx, guest_token = _guest_context(application, sessions)

        async def failing_insert(record):
            return StoreError("disk full"), None

        monkeypatch.setattr(store, "insert", failing_insert)

        err, user = run(users.login(_credentials(), ctx))

        assert isinstance(err, StoreError)
        assert user is None
        assert ctx.session is None
        assert ctx.current_user is None
        assert "x-session-id" not in ctx.response.headers
        assert len(store) == 0

    def test_falsy_guard_result_is_invalid_login(self, application, users, alice):
        users.on("preUserLogin", lambda can_login, credentials, ctx: False)

        err, user = run(users.login(_credentials(), make_context(application)))

        assert isinstance(err, InvalidLogin)
        assert user is None


class TestLogout:

    def test_logout_issues_new_guest_session(self, application, sessions, users, store, alice):
        ctx, _ = _guest_context(application, sessions)
        run(users.login(_credentials(), ctx))
        user_token = ctx.session.session_id
        user_session_id = ctx.session.id

        logout_ctx = make_context(application, user_token)
        run(logout_ctx.get_session_id())
        assert logout_ctx.current_user is alice

        err, token = run(users.logout({"client": "web", "platform": {}}, logout_ctx))

        assert err is None
        assert token != user_token
        assert user_session_id not in store.records
        assert logout_ctx.current_user is None
        assert logout_ctx.session.is_guest
        assert logout_ctx.response.headers["x-session-id"] == token

    def test_error_stops_logout_chain(self, application, sessions, users, store):
        calls = []
        users.off("logout", sessions._logout_session)
        users.on("logout", lambda session_id, user, meta, ctx: InvalidLogin("Not now"))
        users.on("logout", sessions._logout_session)
        users.on("logout", lambda *args: calls.append(args))

        err, token = run(users.logout({"client": "web", "platform": {}}, make_context(application)))

        assert isinstance(err, InvalidLogin)
        assert token is None
        assert calls == []
        assert len(store) == 0


class TestCurrentUser:

    def test_user_session_resolves_current_user(self, application, sessions, alice):
        _, session = run(sessions.create({"client": "web", "platform": {}, "user_id": alice.id}))
        token = token_cipher.encrypt(session.id)
        ctx = make_context(application, token)

        run(ctx.get_session_id())

        assert ctx.current_user is alice
        assert ctx.is_user_logged_in()

    def test_guest_session_has_no_user(self, application, sessions):
        ctx, _ = _guest_context(application, sessions)

        assert ctx.session.is_guest
        assert ctx.current_user is None

    def test_unknown_user_id_is_ignored(self, application, sessions):
        _, session = run(sessions.create({"client": "web", "platform": {}, "user_id": 999}))
        ctx = make_context(application, token_cipher.encrypt(session.id))

        assert run(ctx.get_session_id()) is not None
        assert ctx.current_user is None
