#
# SPDX-License-Identifier: AGPL-3.0-only
# Copyright (c) 2026 m2-eng
# Author: m2-eng
# Co-Author: GitHub Copilot
# License: GNU Affero General Public License v3.0 (AGPL-3.0-only)
# Purpose: Login attempt limit per session.
#
"""
Login attempt limit per session.
"""

from typing import Optional

from hookline.utils import DAY_IN_SECONDS


class LoginThrottle:
    """
    Brute-force protection for login.

    Counts attempts on the session record itself. Each allowed attempt
    pushes the session expiry one window ahead, so the counter lives for
    as long as the client keeps trying.
    """

    def __init__(self, max_attempts: Optional[int] = None, window_seconds: int = DAY_IN_SECONDS):
        """
        Initializes the throttle.

        Args:
            max_attempts: Maximum attempts per session (None or 0 disables the limit)
            window_seconds: Session lifetime after each attempt
        """
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds

    @property
    def enabled(self) -> bool:
        return bool(self.max_attempts)

    def is_allowed(self, attempts: int) -> bool:
        """
        Checks whether the given attempt number is allowed.

        Args:
            attempts: Attempt count including the current one

        Returns:
            True if login is allowed
        """
        if not self.enabled:
            return True

        return attempts <= int(self.max_attempts)

    def next_expiry(self, now: int) -> int:
        return int(now) + self.window_seconds
