from __future__ import annotations

import logging

from cryptography.hazmat.primitives.ciphers import Cipher
from cryptography.hazmat.primitives.ciphers import algorithms
from cryptography.hazmat.primitives.ciphers import modes

from rangecrypt.errors import AlignmentError
from rangecrypt.errors import EmptyInputError
from rangecrypt.errors import InvalidOffsetError
from rangecrypt.reader.types import BLOCK_SIZE
from rangecrypt.reader.types import KeyMaterial


logger = logging.getLogger(__name__)


def increment_counter(counter: bytes, blocks: int) -> bytes:
    """Add ``blocks`` to a big-endian counter, one byte at a time.

    Carries propagate toward the most significant byte; anything carried past it
    is dropped.
    """
    if blocks < 0:
        raise ValueError(f"cannot advance counter by a negative amount: {blocks}")

    out = bytearray(counter)
    pending = blocks
    for i in range(len(out) - 1, -1, -1):
        if pending <= 0:
            break
        total = out[i] + (pending & 0xFF)
        out[i] = total & 0xFF
        pending >>= 8
        if total > 0xFF:
            pending += 1
    return bytes(out)


def counter_block(key: KeyMaterial, offset: int) -> bytes:
    """Initial counter block for the cipher block containing ``offset``."""
    base = key.iv + b"\x00" * (BLOCK_SIZE - len(key.iv))
    return increment_counter(base, offset // BLOCK_SIZE)


def aes_ctr_transform(data: bytes, key: KeyMaterial, offset: int) -> bytes:
    """XOR ``data`` with the AES-CTR keystream starting at stream position ``offset``.

    Encryption and decryption are the same operation. Empty input yields empty
    output. For an offset inside a block, the leading keystream bytes of that
    block are generated and discarded.
    """
    if offset < 0:
        raise InvalidOffsetError(offset)

    cipher = Cipher(algorithms.AES(key.cipher_key), modes.CTR(counter_block(key, offset)))
    ctx = cipher.decryptor()
    skip = offset % BLOCK_SIZE
    if skip:
        ctx.update(b"\x00" * skip)
    return ctx.update(bytes(data)) + ctx.finalize()


def _check_chunk(data: bytes, offset: int) -> None:
    if offset < 0:
        raise InvalidOffsetError(offset)
    if offset % BLOCK_SIZE:
        raise AlignmentError(offset, BLOCK_SIZE)
    if not data:
        raise EmptyInputError()


def decrypt_chunk(ciphertext: bytes, key: KeyMaterial, offset: int) -> bytes:
    """Decrypt one chunk whose first byte sits at ``offset`` in the file.

    Chunks must start on a 16-byte block boundary and must not be empty.

    Raises:
        InvalidOffsetError: If offset is negative
        AlignmentError: If offset is not a multiple of the block size
        EmptyInputError: If ciphertext is empty
    """
    _check_chunk(ciphertext, offset)
    plaintext = aes_ctr_transform(ciphertext, key, offset)
    logger.debug(f"decrypted chunk offset={offset} size={len(plaintext)}")
    return plaintext


def encrypt_chunk(plaintext: bytes, key: KeyMaterial, offset: int) -> bytes:
    """Encrypt one chunk under the same rules as :func:`decrypt_chunk`."""
    _check_chunk(plaintext, offset)
    return aes_ctr_transform(plaintext, key, offset)
