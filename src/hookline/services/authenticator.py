"""
Authentication module ("User").

Verifies credentials against a user directory and tells the rest of the
application about it through its own hooks:

- ``preUserLogin`` (filter): any handler may return an error to veto the
  attempt before credentials are checked
- ``login`` (trigger): ``(user, meta, ctx)`` after a successful login
- ``logout`` (filter, stops at the first error):
  ``(session_id, user, meta, ctx)`` -> new session token
"""

import logging
from typing import Any, Mapping

from hookline.auth.errors import InvalidLogin, InvalidPassword
from hookline.hooks import AppModule, Capability, filter_until_error, is_error
from hookline.utils import is_email

from .user_directory import UserDirectory


logger = logging.getLogger(__name__)


class Authenticator(AppModule):
    name = "User"
    capabilities = frozenset({Capability.LIFECYCLE, Capability.SCHEMA})

    def __init__(self, directory: UserDirectory):
        super().__init__(type_defs="type CurrentUser { id: Int login: String sessionId: String }")
        self.directory = directory

    def on_load(self, app) -> None:
        super().on_load(app)
        app.hooks.on("getSessionId", self.resolve_current_user)

    async def resolve_current_user(self, session_id, ctx):
        """``getSessionId`` filter: sets ``ctx.current_user`` for user sessions."""
        session = ctx.session
        if not session_id or session is None or session.user_id is None:
            return session_id

        if ctx.current_user is not None and ctx.current_user.id == session.user_id:
            return session_id

        err, user = await self.directory.get(session.user_id)
        if err:
            logger.warning("Session %s points to unknown user %s", session.id, session.user_id)
        elif user:
            ctx.current_user = user

        return session_id

    async def login(self, credentials: Mapping[str, Any], ctx):
        """
        Logs a user in.

        Args:
            credentials: username, password, client, platform
            ctx: Request context

        Returns:
            (error, user)
        """
        username = (credentials.get("username") or "").strip()
        password = credentials.get("password") or ""

        can_login = await self.filter("preUserLogin", True, {"username": username, "password": password}, ctx)

        if is_error(can_login):
            # Bail if user is unable to login
            return can_login, None

        if not can_login:
            return InvalidLogin(), None

        column = "email" if is_email(username) else "login"
        err, user = await self.directory.get_by(column, username)

        if err:
            if "not_exist" == getattr(err, "code", None):
                return InvalidLogin(), None
            return err, None

        if not user:
            return InvalidLogin("Invalid credentials! Are you sure you are currently registered?"), None

        if not self.directory.verify_password(user, password):
            return InvalidPassword(), None

        meta = {"client": credentials.get("client"), "platform": credentials.get("platform")}
        await self.trigger("login", user, meta, ctx)

        # A login handler could not replace the session
        if ctx.session_error is not None:
            return ctx.session_error, None

        ctx.current_user = user
        logger.info("User '%s' logged in", user.login)

        return None, user

    async def logout(self, meta: Mapping[str, Any], ctx):
        """
        Logs the current user out.

        Returns:
            (error, new session token)
        """
        user = ctx.current_user
        session_id = await ctx.get_session_id()

        new_session_id = await filter_until_error(
            self,
            "logout",
            session_id,
            user,
            {"client": meta.get("client"), "platform": meta.get("platform")},
            ctx,
        )

        if is_error(new_session_id):
            return new_session_id, None

        ctx.current_user = None
        return None, new_session_id
