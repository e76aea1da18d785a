#
# SPDX-License-Identifier: AGPL-3.0-only
# Copyright (c) 2026 m2-eng
# Author: m2-eng
# Co-Author: GitHub Copilot
# License: GNU Affero General Public License v3.0 (AGPL-3.0-only)
# Purpose: Self-contained encrypted session tokens.
#
"""
Self-contained encrypted session tokens ("envelopes").

An envelope is ``iv;)ciphertext;)key``:

- ``iv``: base64 of a fresh 16 byte initialization vector
- ``ciphertext``: base64 of the AES-256-CBC output (PKCS7 padded)
- ``key``: 32 hex characters whose ASCII bytes are the one-time AES key

The key travels inside the token, so the envelope is only as confidential
as the channel that carries it. No server side key store is needed.
"""

import base64
import binascii
import secrets

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import CipherFailure, InvalidEnvelope


SEPARATOR = ";)"
IV_BYTES = 16
KEY_HEX_LENGTH = 32


def random_salt(num_bytes: int = 16, length: int = 64, hex_format: bool = False) -> str:
    """
    Random string, sliced to ``length`` characters.

    Args:
        num_bytes: Number of random bytes to draw
        length: Maximum length of the returned string
        hex_format: Hex instead of base64 encoding

    Returns:
        Random string
    """
    raw = secrets.token_bytes(num_bytes)
    encoded = raw.hex() if hex_format else base64.b64encode(raw).decode("ascii")
    return encoded[:length]


class TokenCipher:
    """
    Encrypts and decrypts short opaque strings into envelopes.

    Holds no state between calls; every encryption draws its own IV and key.
    """

    def __init__(self, separator: str = SEPARATOR):
        self.separator = separator

    def is_envelope(self, value) -> bool:
        """Structural check only, no decryption attempted."""
        return isinstance(value, str) and len(value.split(self.separator)) == 3

    def encrypt(self, plaintext: str) -> str:
        """
        Wraps ``plaintext`` into a new envelope.

        Args:
            plaintext: String to encrypt

        Returns:
            Envelope string

        Raises:
            CipherFailure: Cipher could not produce output
        """
        iv = secrets.token_bytes(IV_BYTES)
        secret_key = random_salt(64, KEY_HEX_LENGTH, hex_format=True)

        try:
            padder = padding.PKCS7(algorithms.AES.block_size).padder()
            data = padder.update(plaintext.encode("utf-8")) + padder.finalize()

            encryptor = Cipher(algorithms.AES(secret_key.encode("ascii")), modes.CBC(iv)).encryptor()
            encrypted = encryptor.update(data) + encryptor.finalize()
        except (ValueError, TypeError, AttributeError) as exc:
            raise CipherFailure("Something went wrong. Unable to generate hash key.") from exc

        if not encrypted:
            raise CipherFailure("Something went wrong. Unable to generate hash key.")

        return self.separator.join([
            base64.b64encode(iv).decode("ascii"),
            base64.b64encode(encrypted).decode("ascii"),
            secret_key,
        ])

    def decrypt(self, envelope: str) -> str:
        """
        Recovers the plaintext of an envelope.

        Args:
            envelope: Envelope produced by ``encrypt``

        Returns:
            Plaintext string

        Raises:
            InvalidEnvelope: Input is not made of exactly three segments
            CipherFailure: Segments cannot be decoded or decrypted
        """
        if not self.is_envelope(envelope):
            raise InvalidEnvelope()

        iv_part, encrypted_part, key_part = envelope.split(self.separator)

        try:
            iv = base64.b64decode(iv_part, validate=True)
            encrypted = base64.b64decode(encrypted_part, validate=True)
            secret_key = key_part.encode("ascii")

            decryptor = Cipher(algorithms.AES(secret_key), modes.CBC(iv)).decryptor()
            data = decryptor.update(encrypted) + decryptor.finalize()

            unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
            data = unpadder.update(data) + unpadder.finalize()

            plaintext = data.decode("utf-8")
        except (ValueError, TypeError, binascii.Error) as exc:
            # UnicodeError is a ValueError
            raise CipherFailure() from exc

        return plaintext


_default_cipher = TokenCipher()


def encrypt(plaintext: str) -> str:
    return _default_cipher.encrypt(plaintext)


def decrypt(envelope: str) -> str:
    return _default_cipher.decrypt(envelope)


def is_envelope(value) -> bool:
    return _default_cipher.is_envelope(value)
