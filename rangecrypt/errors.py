"""Error taxonomy for key derivation, chunk decryption and range fetching.

Every error carries the values needed to decide on a retry (expected vs. actual
lengths, status codes, offsets) as attributes. ``retryable`` tells an external
orchestrator whether retrying the same range can succeed; nothing in this
package retries on its own.
"""

from __future__ import annotations

from typing import Optional


class RangeCryptError(Exception):
    """Base class for all rangecrypt errors."""

    retryable = False


# Key derivation


class KeyDerivationError(RangeCryptError):
    """Raised when a key token cannot be turned into key material."""

    pass


class KeyFormatError(KeyDerivationError):
    """Raised when a key token is not valid unpadded URL-safe base64."""

    pass


class KeyLengthError(KeyDerivationError):
    """Raised when decoded key bytes have the wrong size."""

    def __init__(self, expected: int, got: int, what: str = "key token") -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"invalid {what} length: expected {expected} bytes, got {got}")


# Decryption


class DecryptionError(RangeCryptError):
    """Raised when a decryption call is rejected before touching the cipher."""

    pass


class EmptyInputError(DecryptionError):
    def __init__(self) -> None:
        super().__init__("empty chunk")


class InvalidOffsetError(DecryptionError, ValueError):
    def __init__(self, offset: int) -> None:
        self.offset = offset
        super().__init__(f"offset must be non-negative, got {offset}")


class AlignmentError(DecryptionError, ValueError):
    """Raised when a chunk does not start on a cipher block boundary."""

    def __init__(self, offset: int, block_size: int = 16) -> None:
        self.offset = offset
        self.block_size = block_size
        super().__init__(f"offset {offset} is not aligned to the {block_size}-byte cipher block")


class InvalidRangeError(RangeCryptError, ValueError):
    def __init__(self, start: int, end: int) -> None:
        self.start = start
        self.end = end
        super().__init__(f"invalid byte range: start={start} end={end}")


# Fetching


class FetchError(RangeCryptError):
    """Base class for failures while retrieving a byte range."""

    retryable = True


class TransportError(FetchError):
    """Raised when the request could not be sent or the connection failed."""

    pass


class TransportReadError(TransportError):
    """Raised when reading the response body fails for a reason other than end of stream."""

    pass


class ResponseContractError(FetchError):
    """Raised when the server response does not satisfy the range contract."""

    pass


class UnexpectedStatusError(ResponseContractError):
    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"unexpected status code: {status_code}")


class MissingLengthError(ResponseContractError):
    def __init__(self) -> None:
        super().__init__("missing Content-Length in response")


class InvalidLengthError(ResponseContractError):
    def __init__(self, value: Optional[str]) -> None:
        self.value = value
        super().__init__(f"invalid Content-Length: {value!r}")


class RangeExceedsContentError(ResponseContractError):
    def __init__(self, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        super().__init__(
            f"requested range exceeds content length: requested {requested}, available {available}"
        )


class IncompleteReadError(ResponseContractError):
    def __init__(self, expected: int, got: int) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"incomplete read: expected {expected}, got {got}")


def classify_error(error: BaseException) -> str:
    """Classify an error as transient, permanent, or unknown."""
    if isinstance(error, UnexpectedStatusError):
        # Client errors won't change on retry, except timeouts and throttling
        if 400 <= error.status_code < 500 and error.status_code not in (408, 429):
            return "permanent"
        return "transient"

    if isinstance(error, RangeCryptError):
        return "transient" if error.retryable else "permanent"

    err_str = str(error).lower()
    err_type = type(error).__name__.lower()

    if any(keyword in err_str for keyword in ["malformed", "invalid", "validation error"]):
        return "permanent"

    if any(
        keyword in err_str for keyword in ["timeout", "timed out", "connection", "network", "unavailable"]
    ) or any(keyword in err_type for keyword in ["connectionerror", "timeouterror", "timeout", "httperror"]):
        return "transient"

    return "unknown"
