from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field

from rangecrypt.errors import InvalidRangeError
from rangecrypt.errors import KeyLengthError


BLOCK_SIZE = 16
CIPHER_KEY_SIZE = 16
IV_SIZE = 8
INTEGRITY_TAG_SIZE = 8


@dataclass(frozen=True)
class KeyMaterial:
    """AES-128-CTR key material for one file.

    ``integrity_tag`` is the file's meta-MAC. It is carried through untouched for
    whoever verifies the accumulated MAC of the decrypted file.
    """

    cipher_key: bytes = field(repr=False)
    iv: bytes
    integrity_tag: bytes = b""

    def __post_init__(self) -> None:
        if len(self.cipher_key) != CIPHER_KEY_SIZE:
            raise KeyLengthError(CIPHER_KEY_SIZE, len(self.cipher_key), what="cipher key")
        if len(self.iv) != IV_SIZE:
            raise KeyLengthError(IV_SIZE, len(self.iv), what="iv")


@dataclass(frozen=True)
class ByteRange:
    """Slice of a remote resource, sent verbatim as ``Range: bytes=<start>-<end>``.

    ``end - start`` is the number of bytes the caller expects back.
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise InvalidRangeError(self.start, self.end)

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_block_aligned(self) -> bool:
        return self.start % BLOCK_SIZE == 0

    def header_value(self) -> str:
        return f"bytes={self.start}-{self.end}"
