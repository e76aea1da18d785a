"""
Per-request context handed to hooks.

Wraps the FastAPI request/response pair and carries the session and user
resolved for this request.
"""

from typing import Optional
from urllib.parse import quote, unquote

from fastapi import Request, Response

from hookline.auth.session_manager import create_session_key


SESSION_HEADER = "X-Session-Id"
SESSION_COOKIE = "__sid__"


class RequestContext:
    def __init__(self, app, request: Optional[Request] = None, response: Optional[Response] = None):
        """
        Args:
            app: Application orchestrator
            request: Inbound request (None outside HTTP)
            response: Outbound response (None outside HTTP)
        """
        self.app = app
        self.request = request
        self.response = response
        self.session = None
        self.current_user = None
        # Set when a hook handler could not replace the session
        self.session_error = None

        session_config = app.config.get("session") or {}
        self.session_header = session_config.get("header", SESSION_HEADER)
        self.session_cookie = session_config.get("cookie", SESSION_COOKIE)
        self.cookie_secure = bool(session_config.get("cookie_secure", False))

    def get_header(self, name: str) -> Optional[str]:
        if self.request is None:
            return None
        return self.request.headers.get(name)

    def set_header(self, name: str, value: str) -> None:
        if self.response is not None:
            self.response.headers[name] = value

    def get_cookie(self, name: str) -> Optional[str]:
        if self.request is None:
            return None
        value = self.request.cookies.get(name)
        return unquote(value) if value else None

    def set_cookie(self, name: str, value: str, max_age: int, path: str = "/") -> None:
        if self.response is None:
            return

        # Envelopes contain ';' which is not allowed in a raw cookie value
        self.response.set_cookie(
            key=name,
            value=quote(value, safe=""),
            max_age=max_age,
            path=path,
            httponly=True,
            secure=self.cookie_secure,
            samesite="lax",
        )

    def create_session_key(self) -> str:
        return create_session_key()

    async def get_session_id(self) -> Optional[str]:
        """
        Token sent by the client, validated through the ``getSessionId`` filter.

        Looks at the session header first. A header token that does not
        resolve falls back to the session cookie.
        """
        presented = []
        for token in (self.get_header(self.session_header), self.get_cookie(self.session_cookie)):
            if token and token not in presented:
                presented.append(token)

        for token in presented:
            session_id = await self.app.hooks.filter("getSessionId", token, self)
            if session_id:
                return session_id

        return None

    def is_user_logged_in(self) -> bool:
        return self.current_user is not None
