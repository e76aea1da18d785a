#
# SPDX-License-Identifier: AGPL-3.0-only
# Copyright (c) 2026 m2-eng
# Author: m2-eng
# Co-Author: GitHub Copilot
# License: GNU Affero General Public License v3.0 (AGPL-3.0-only)
# Purpose: Session, token and login throttle module.
#
"""
Session, token and login throttle module.
"""

from .errors import (
    SessionError,
    InvalidArguments,
    InvalidId,
    InvalidEnvelope,
    CipherFailure,
    LimitExceeded,
    NotFound,
    InvalidLogin,
    InvalidPassword,
    StoreError,
)
from .token_cipher import TokenCipher
from .login_throttle import LoginThrottle
from .session_manager import SessionManager, create_session_key

__all__ = [
    'SessionError',
    'InvalidArguments',
    'InvalidId',
    'InvalidEnvelope',
    'CipherFailure',
    'LimitExceeded',
    'NotFound',
    'InvalidLogin',
    'InvalidPassword',
    'StoreError',
    'TokenCipher',
    'LoginThrottle',
    'SessionManager',
    'create_session_key'
]
