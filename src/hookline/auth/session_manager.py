#
# SPDX-License-Identifier: AGPL-3.0-only
# Copyright (c) 2026 m2-eng
# Author: m2-eng
# Co-Author: GitHub Copilot
# License: GNU Affero General Public License v3.0 (AGPL-3.0-only)
# Purpose: Session lifecycle for guests and registered users.
#
"""
Session lifecycle for guests and registered users.

Sessions are looked up by raw id or by the envelope minted from it. Guest
sessions live 24 hours, user sessions 30 days. Expired sessions are
invisible to lookups and removed in batches by a daily sweep.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Tuple, Union

from hookline.domain.session import Session
from hookline.hooks import AppModule, Capability, is_error
from hookline.utils import DAY_IN_SECONDS

from .errors import InvalidArguments, InvalidId, LimitExceeded, SessionError
from .login_throttle import LoginThrottle
from .token_cipher import TokenCipher, random_salt


logger = logging.getLogger(__name__)

GUEST_SESSION_TTL = DAY_IN_SECONDS
USER_SESSION_TTL = 30 * DAY_IN_SECONDS
TOKEN_COOKIE_TTL = 30 * DAY_IN_SECONDS
CLEANUP_JOB_ID = "guest-session"
CLEANUP_INTERVAL = DAY_IN_SECONDS

SessionResult = Tuple[Optional[Exception], Optional[Session]]


def create_session_key() -> str:
    return random_salt(64, 32, hex_format=True)


class SessionManager(AppModule):
    """
    Handles sessions of both guests and registered users.

    Subscribes to ``getSessionId`` on the application bus and to
    ``preUserLogin``, ``login`` and ``logout`` on the ``User`` module.
    """

    name = "AppSession"
    capabilities = frozenset({Capability.LIFECYCLE, Capability.SCHEMA})

    def __init__(
        self,
        store,
        cipher: Optional[TokenCipher] = None,
        throttle: Optional[LoginThrottle] = None,
        clock=time.time,
    ):
        """
        Args:
            store: Store holding session records
            cipher: Token cipher (default: new TokenCipher)
            throttle: Login throttle (default: limit taken from the app settings)
            clock: Returns the current epoch time in seconds
        """
        super().__init__(type_defs="extend type Config { sessionId: String }")
        self.store = store
        self.cipher = cipher or TokenCipher()
        self.throttle = throttle or LoginThrottle()
        self.clock = clock

    def now(self) -> int:
        return int(self.clock())

    def on_load(self, app) -> None:
        super().on_load(app)

        if self.throttle.max_attempts is None and app.login_attempt:
            self.throttle.max_attempts = int(app.login_attempt)

        # Delete expired sessions every 24 hours
        app.cron_job(id=CLEANUP_JOB_ID, interval=CLEANUP_INTERVAL, callback=self.sweep)

        # Check sessionId existence then validate
        app.hooks.on("getSessionId", self.resolve)

        user_module = app.get_module("User")
        if user_module is None:
            logger.warning("No 'User' module registered, login hooks are not wired")
            return

        user_module.on("preUserLogin", self._can_user_log_in)
        user_module.on("login", self._create_login_session)
        user_module.on("logout", self._logout_session)

    def _raw_id(self, token_or_id: str) -> Tuple[Optional[SessionError], Optional[str]]:
        if not self.cipher.is_envelope(token_or_id):
            return None, token_or_id

        try:
            return None, self.cipher.decrypt(token_or_id)
        except SessionError as exc:
            return exc, None

    def is_expired(self, session: Union[Session, Mapping[str, Any]]) -> bool:
        expires = session.get("expires") if isinstance(session, Mapping) else session.expires
        if not expires:
            return False

        return self.now() >= expires

    async def get(self, token_or_id: str) -> SessionResult:
        """
        Session data from the store.

        Args:
            token_or_id: Raw session id or an envelope minted from it

        Returns:
            (error, session); session is None when absent or expired
        """
        err, session_id = self._raw_id(token_or_id)
        if err:
            return err, None

        err, record = await self.store.find_one({"id": session_id})
        if err or record is None:
            return err, None

        session = Session.from_record(record)

        # Expired but not yet swept
        if self.is_expired(session):
            return None, None

        return None, session

    def _validate(self, session: Union[Session, Mapping[str, Any]]) -> Session:
        if isinstance(session, Mapping):
            session = Session.from_record(session)

        if not isinstance(session, Session):
            raise InvalidArguments("Invalid session data!")

        if not session.client or session.platform is None:
            raise InvalidArguments()

        return session

    async def create(self, session: Union[Session, Mapping[str, Any]]) -> SessionResult:
        """
        Stores a new session. Guests expire after 24 hours, users after 30 days.

        Args:
            session: Session (or mapping) with client, platform and optional id/user_id

        Returns:
            (error, stored session)

        Raises:
            InvalidArguments: client or platform missing
        """
        session = self._validate(session)

        if not session.id:
            session.id = create_session_key()

        now = self.now()
        session.created_at = datetime.fromtimestamp(now, tz=timezone.utc)
        session.expires = now + (GUEST_SESSION_TTL if session.is_guest else USER_SESSION_TTL)

        err, _ = await self.store.insert(session.to_record())
        if err:
            return err, None

        return None, session

    async def update(self, session: Session) -> SessionResult:
        """
        Persists the session fields.

        Raises:
            InvalidId: session has no id
        """
        if session is None or not session.id:
            raise InvalidId()

        err, session_id = self._raw_id(session.id)
        if err:
            return err, None

        session.id = session_id

        err, _ = await self.store.update(session.to_record(), {"id": session_id})
        if err:
            return err, None

        return None, session

    async def delete(self, token_or_id: str) -> Tuple[Optional[Exception], Optional[int]]:
        """
        Removes a session.

        Args:
            token_or_id: Raw session id or an envelope minted from it

        Returns:
            (error, number of deleted records)
        """
        if not token_or_id:
            return InvalidId(), None

        err, session_id = self._raw_id(token_or_id)
        if err:
            return err, None

        return await self.store.delete({"id": session_id})

    async def mint_token(self, session_id: str, ctx=None) -> Tuple[Optional[Exception], Optional[str]]:
        """
        Wraps a raw id into an envelope and hands it to the client.

        The envelope is set as response header and as a 30 day cookie.
        """
        try:
            token = self.cipher.encrypt(session_id)
        except SessionError as exc:
            logger.error("Unable to mint session token: %s", exc)
            return exc, None

        if ctx is not None:
            ctx.set_header(ctx.session_header, token)
            ctx.set_cookie(ctx.session_cookie, token, max_age=TOKEN_COOKIE_TTL)

        return None, token

    async def throttle_login(self, session: Session) -> Union[Session, Exception]:
        """
        Counts a login attempt on ``session``.

        Returns:
            The updated session, LimitExceeded once the limit is passed,
            or the store error
        """
        attempts = (session.login_attempts or 0) + 1

        if not self.throttle.is_allowed(attempts):
            logger.info("Login attempt limit exceeded for session %s", session.id)
            return LimitExceeded()

        session.login_attempts = attempts
        # Keep the counter alive 24 hours from the last attempt
        session.expires = self.throttle.next_expiry(self.now())

        err, session = await self.update(session)
        if err:
            return err

        return session

    async def sweep(self) -> int:
        """
        Deletes every expired session in one batch.

        Returns:
            Number of deleted sessions
        """
        err, records = await self.store.find()
        if err:
            logger.warning("Session sweep skipped: %s", err)
            return 0

        ids = [record["id"] for record in records or [] if self.is_expired(record)]
        if not ids:
            return 0

        err, count = await self.store.delete({"id": {"$in": ids}})
        if err:
            logger.warning("Session sweep failed: %s", err)
            return 0

        logger.info("Removed %d expired sessions", count)
        return count

    async def resolve(self, session_id: Optional[str], ctx) -> Optional[str]:
        """``getSessionId`` filter: validates the token and attaches its session to ``ctx``."""
        if not session_id:
            return None

        # Already fetched during this request
        if ctx.session and ctx.session.session_id == session_id:
            return session_id

        err, session = await self.get(session_id)
        if err or session is None:
            if err:
                logger.debug("Session lookup failed: %s", err)
            return None

        session.session_id = session_id
        ctx.session = session

        return session_id

    async def issue(self, client: str, platform: Optional[dict], ctx) -> Tuple[Optional[Exception], Optional[str]]:
        """
        Token for the current request, creating a guest session when needed.
        """
        session_id = await ctx.get_session_id()

        if session_id and ctx.session and ctx.session.session_id == session_id:
            return None, session_id

        err, session = await self.create(Session(id=ctx.create_session_key(), client=client, platform=platform))
        if err:
            return err, None

        return await self._attach(session, ctx)

    async def _attach(self, session: Session, ctx) -> Tuple[Optional[Exception], Optional[str]]:
        err, token = await self.mint_token(session.id, ctx)
        if err:
            return err, None

        session.session_id = token
        ctx.session = session

        return None, token

    async def _can_user_log_in(self, can_login, credentials, ctx):
        session = ctx.session
        if session is None:
            logger.debug("Login attempt without session, nothing to throttle")
            return can_login

        result = await self.throttle_login(session)
        if is_error(result):
            return result

        return can_login

    async def _create_login_session(self, user, meta, ctx) -> None:
        session = self._validate(Session(
            id=ctx.create_session_key(),
            client=meta.get("client"),
            platform=meta.get("platform"),
            user_id=user.id,
        ))

        # Delete current session
        current_id = await ctx.get_session_id()
        if current_id:
            await self.delete(current_id)

        err, session = await self.create(session)
        if err:
            logger.error("Unable to create login session for user %s: %s", user.id, err)
            # The previous session is gone already
            ctx.session = None
            ctx.session_error = err
            return

        err, _ = await self._attach(session, ctx)
        if err:
            ctx.session = None
            ctx.session_error = err

    async def _logout_session(self, session_id, user, meta, ctx):
        session = self._validate(Session(
            id=ctx.create_session_key(),
            client=meta.get("client"),
            platform=meta.get("platform"),
        ))

        # Delete current session
        if session_id:
            await self.delete(session_id)

        err, session = await self.create(session)
        if err:
            return err

        err, token = await self._attach(session, ctx)
        if err:
            return err

        return token
