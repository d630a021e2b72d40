import httpx
import pytest

from rangecrypt.errors import AlignmentError
from rangecrypt.errors import EmptyInputError
from rangecrypt.errors import FetchError
from rangecrypt.errors import IncompleteReadError
from rangecrypt.errors import InvalidLengthError
from rangecrypt.errors import InvalidRangeError
from rangecrypt.errors import KeyFormatError
from rangecrypt.errors import KeyLengthError
from rangecrypt.errors import MissingLengthError
from rangecrypt.errors import RangeCryptError
from rangecrypt.errors import RangeExceedsContentError
from rangecrypt.errors import TransportError
from rangecrypt.errors import TransportReadError
from rangecrypt.errors import UnexpectedStatusError
from rangecrypt.errors import classify_error
from rangecrypt.reader.types import ByteRange


class TestTaxonomy:
    def test_everything_derives_from_base(self):
        for exc in [
            KeyFormatError("bad"),
            KeyLengthError(32, 16),
            EmptyInputError(),
            AlignmentError(8),
            TransportReadError("reset"),
            UnexpectedStatusError(404),
            MissingLengthError(),
            InvalidLengthError("x"),
            RangeExceedsContentError(40, 20),
            IncompleteReadError(20, 10),
        ]:
            assert isinstance(exc, RangeCryptError)

    def test_transport_read_error_is_transport_error(self):
        assert issubclass(TransportReadError, TransportError)
        assert issubclass(TransportError, FetchError)

    def test_structured_context(self):
        assert RangeExceedsContentError(40, 20).requested == 40
        assert RangeExceedsContentError(40, 20).available == 20
        assert str(IncompleteReadError(20, 10)) == "incomplete read: expected 20, got 10"
        assert str(UnexpectedStatusError(404)) == "unexpected status code: 404"

    def test_fetch_errors_are_retryable(self):
        assert TransportError("x").retryable
        assert IncompleteReadError(1, 0).retryable
        assert not KeyLengthError(32, 16).retryable
        assert not EmptyInputError().retryable


class TestClassifyError:
    @pytest.mark.parametrize(
        "error",
        [
            TransportError("connection refused"),
            TransportReadError("reset"),
            IncompleteReadError(20, 10),
            RangeExceedsContentError(40, 20),
            MissingLengthError(),
            UnexpectedStatusError(503),
            UnexpectedStatusError(429),
            UnexpectedStatusError(408),
        ],
    )
    def test_transient(self, error):
        assert classify_error(error) == "transient"

    @pytest.mark.parametrize(
        "error",
        [
            KeyFormatError("bad token"),
            KeyLengthError(32, 16),
            EmptyInputError(),
            AlignmentError(8),
            UnexpectedStatusError(404),
            UnexpectedStatusError(403),
        ],
    )
    def test_permanent(self, error):
        assert classify_error(error) == "permanent"

    def test_foreign_errors_fall_back_to_keywords(self):
        assert classify_error(httpx.ConnectTimeout("timed out")) == "transient"
        assert classify_error(ValueError("malformed header")) == "permanent"
        assert classify_error(RuntimeError("something odd")) == "unknown"


class TestByteRange:
    def test_length_and_header(self):
        byte_range = ByteRange(16, 48)

        assert byte_range.length == 32
        assert byte_range.header_value() == "bytes=16-48"
        assert byte_range.is_block_aligned

    def test_unaligned(self):
        assert not ByteRange(8, 40).is_block_aligned

    def test_zero_length_allowed(self):
        assert ByteRange(32, 32).length == 0

    @pytest.mark.parametrize("start,end", [(-1, 10), (10, 9)])
    def test_invalid_range(self, start, end):
        with pytest.raises(InvalidRangeError):
            ByteRange(start, end)

        with pytest.raises(ValueError):
            ByteRange(start, end)
