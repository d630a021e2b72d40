"""Fetch-and-decrypt pipeline for one encrypted byte range."""

from rangecrypt.reader.chunk_reader import read_chunk
from rangecrypt.reader.decrypter import aes_ctr_transform
from rangecrypt.reader.decrypter import decrypt_chunk
from rangecrypt.reader.decrypter import encrypt_chunk
from rangecrypt.reader.decrypter import increment_counter
from rangecrypt.reader.fetcher import RangeFetcher
from rangecrypt.reader.fetcher import fetch_range
from rangecrypt.reader.keys import derive_key_material
from rangecrypt.reader.keys import encode_key_token
from rangecrypt.reader.types import ByteRange
from rangecrypt.reader.types import KeyMaterial


__all__ = [
    "ByteRange",
    "KeyMaterial",
    "RangeFetcher",
    "aes_ctr_transform",
    "decrypt_chunk",
    "derive_key_material",
    "encode_key_token",
    "encrypt_chunk",
    "fetch_range",
    "increment_counter",
    "read_chunk",
]
