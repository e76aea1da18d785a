#
# SPDX-License-Identifier: AGPL-3.0-only
# Copyright (c) 2026 m2-eng
# Author: m2-eng
# Co-Author: GitHub Copilot
# License: GNU Affero General Public License v3.0 (AGPL-3.0-only)
# Purpose: Error taxonomy for sessions, tokens and login.
#
"""
Error taxonomy for sessions, tokens and login.

Errors are usually *returned* as the first element of an ``(error, result)``
pair. Only contract violations (missing required arguments) are raised.
"""


class SessionError(Exception):
    """Base class for every session related error."""

    code = "session_error"
    message = "Session error."

    def __init__(self, message: str = None, code: str = None):
        super().__init__(message or self.message)
        if code:
            self.code = code


class InvalidArguments(SessionError):
    """Required session fields are missing."""

    code = "invalid_arguments"
    message = "Invalid session arguments!"


class InvalidId(SessionError):
    """Update/delete without an identifiable record."""

    code = "invalid_id"
    message = "Cannot update none existent session!"


class InvalidEnvelope(SessionError):
    """Token does not have the envelope shape."""

    code = "invalid_envelope"
    message = "Invalid arguments!"


class CipherFailure(SessionError):
    """Cipher could not produce output."""

    code = "system_error"
    message = "Something went wrong. Unable to decrypt the given hash!"


class LimitExceeded(SessionError):
    """Login attempt throttle tripped."""

    code = "limit_exceeded"
    message = (
        "You have exceeded the number of times to verify your account. "
        "Please try again after 24 hours."
    )


class NotFound(SessionError):
    code = "not_exist"
    message = "Record not found."


class InvalidLogin(SessionError):
    code = "invalid_login"
    message = "Invalid username and/or password!"


class InvalidPassword(SessionError):
    code = "invalid_password"
    message = "Incorrect password!"


class StoreError(SessionError):
    """Backing store failed to read or write."""

    code = "store_error"
    message = "We are unable to process your request at this time. Try again later."
