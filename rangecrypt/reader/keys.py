"""Key token decoding.

A key token is 32 raw bytes in unpadded URL-safe base64. The first and second
halves are XOR-folded into the 128-bit AES key; the second half also supplies
the 64-bit IV and the 64-bit meta-MAC verbatim.
"""

from __future__ import annotations

import base64
import binascii
import re

from rangecrypt.errors import KeyFormatError
from rangecrypt.errors import KeyLengthError
from rangecrypt.reader.types import CIPHER_KEY_SIZE
from rangecrypt.reader.types import IV_SIZE
from rangecrypt.reader.types import KeyMaterial


TOKEN_SIZE = 32

_URLSAFE_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


def decode_key_token(token: str) -> bytes:
    """Decode an unpadded URL-safe base64 string.

    Padding characters and the standard-alphabet ``+``/``/`` are rejected.
    """
    if not isinstance(token, str) or not _URLSAFE_ALPHABET.fullmatch(token):
        raise KeyFormatError("key token is not unpadded URL-safe base64")
    padded = token + "=" * (-len(token) % 4)
    try:
        return base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as e:
        raise KeyFormatError(f"key token is not unpadded URL-safe base64: {e}") from e


def encode_key_token(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def derive_key_material(token: str) -> KeyMaterial:
    """Derive key material from an encoded key token.

    Raises:
        KeyFormatError: If the token is not valid unpadded URL-safe base64
        KeyLengthError: If the token does not decode to exactly 32 bytes
    """
    decoded = decode_key_token(token)
    if len(decoded) != TOKEN_SIZE:
        raise KeyLengthError(TOKEN_SIZE, len(decoded))

    half = TOKEN_SIZE // 2
    cipher_key = bytes(decoded[i] ^ decoded[i + half] for i in range(CIPHER_KEY_SIZE))
    iv = decoded[half : half + IV_SIZE]
    integrity_tag = decoded[half + IV_SIZE : TOKEN_SIZE]
    return KeyMaterial(cipher_key=cipher_key, iv=iv, integrity_tag=integrity_tag)
