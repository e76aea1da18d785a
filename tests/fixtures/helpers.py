#
# SPDX-License-Identifier: AGPL-3.0-only
# Copyright (c) 2026 m2-eng
# Author: m2-eng
# Co-Author: GitHub Copilot
# License: GNU Affero General Public License v3.0 (AGPL-3.0-only)
# Purpose: Shared helpers for unit and integration tests
#
import asyncio
from typing import Optional
from urllib.parse import quote

from fastapi import Request, Response

from hookline.api.request_context import RequestContext


START_TIME = 1_700_000_000


class FakeClock:
    """Deterministic epoch clock."""

    def __init__(self, now: int = START_TIME):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


def run(coro):
    """Runs a coroutine to completion in a fresh event loop."""
    return asyncio.run(coro)


def make_request(token: Optional[str] = None, cookie: Optional[str] = None) -> Request:
    headers = []
    if token:
        headers.append((b"x-session-id", token.encode("latin-1")))
    if cookie:
        headers.append((b"cookie", f"__sid__={quote(cookie, safe='')}".encode("latin-1")))

    return Request({
        "type": "http",
        "method": "POST",
        "path": "/",
        "headers": headers,
        "query_string": b"",
    })


def make_context(application, token: Optional[str] = None, cookie: Optional[str] = None) -> RequestContext:
    return RequestContext(application, make_request(token, cookie), Response())


def cookies_of(ctx: RequestContext) -> list:
    return [value for key, value in ctx.response.raw_headers if key == b"set-cookie"]
