"""Retrieve and decrypt byte ranges of AES-CTR encrypted remote files."""

from rangecrypt.reader import ByteRange
from rangecrypt.reader import KeyMaterial
from rangecrypt.reader import RangeFetcher
from rangecrypt.reader import decrypt_chunk
from rangecrypt.reader import derive_key_material
from rangecrypt.reader import fetch_range
from rangecrypt.reader import read_chunk


__all__ = [
    "ByteRange",
    "KeyMaterial",
    "RangeFetcher",
    "decrypt_chunk",
    "derive_key_material",
    "fetch_range",
    "read_chunk",
]
