"""
HTTP byte-range fetcher.

Issues a single ``GET`` with a ``Range`` header and only hands back bytes once the
response has proven it satisfies the requested range: status, declared length and
actual transferred length are all checked before anything reaches the cipher.
"""

from __future__ import annotations

import logging
from typing import Any
from typing import Optional
from typing import Union

import httpx

from rangecrypt.config import get_config
from rangecrypt.errors import IncompleteReadError
from rangecrypt.errors import InvalidLengthError
from rangecrypt.errors import MissingLengthError
from rangecrypt.errors import RangeExceedsContentError
from rangecrypt.errors import TransportError
from rangecrypt.errors import TransportReadError
from rangecrypt.errors import UnexpectedStatusError
from rangecrypt.reader.types import ByteRange


logger = logging.getLogger(__name__)

ACCEPTED_STATUS_CODES = (httpx.codes.OK, httpx.codes.PARTIAL_CONTENT)

TimeoutTypes = Union[float, httpx.Timeout]


class RangeFetcher:
    """
    Fetches byte ranges of a single remote resource.

    The underlying ``httpx.AsyncClient`` may be injected (and shared between
    fetchers); an injected client is never closed here. Without one, a client is
    created from configuration and closed by :meth:`close`.
    """

    def __init__(
        self,
        url: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[TimeoutTypes] = None,
        read_chunk_size: Optional[int] = None,
    ) -> None:
        """
        Initialize the fetcher.

        Args:
            url: Resource URL every range is requested from
            client: Optional shared HTTP client. Falls back to a private client built from config.
            timeout: Optional per-request timeout. Falls back to the client's own timeout.
            read_chunk_size: Size of each body read. Falls back to config.
        """
        if read_chunk_size is not None and read_chunk_size <= 0:
            raise ValueError("read_chunk_size must be positive")

        self.config = get_config()
        self.url = url
        self._timeout = timeout
        self.read_chunk_size = read_chunk_size or self.config.read_chunk_size

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else self.config.http_timeout,
            follow_redirects=True,
            verify=self.config.verify_ssl,
        )

    async def __aenter__(self) -> "RangeFetcher":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            await self._client.aclose()

    def build_request(self, byte_range: ByteRange) -> httpx.Request:
        """Build the ranged GET request. ``Accept-Encoding: identity`` keeps Content-Length in raw bytes."""
        headers = {
            "Range": byte_range.header_value(),
            "Accept-Encoding": "identity",
        }
        if self._timeout is not None:
            return self._client.build_request("GET", self.url, headers=headers, timeout=self._timeout)
        return self._client.build_request("GET", self.url, headers=headers)

    async def send_request(self, request: httpx.Request) -> httpx.Response:
        try:
            return await self._client.send(request, stream=True)
        except httpx.TimeoutException as e:
            raise TransportError(f"request timed out: {e}") from e
        except httpx.RequestError as e:
            raise TransportError(f"request failed: {e}") from e

    @staticmethod
    def check_status(response: httpx.Response) -> None:
        if response.status_code not in ACCEPTED_STATUS_CODES:
            raise UnexpectedStatusError(response.status_code)

    @staticmethod
    def content_length(response: httpx.Response) -> int:
        """Declared body length, which must be a positive run of ASCII digits."""
        raw = response.headers.get("Content-Length")
        if raw is None or not raw.strip():
            raise MissingLengthError()
        value = raw.strip()
        # int() would also take "+5", "1_0" and non-ASCII digits
        if not (value.isascii() and value.isdigit()):
            raise InvalidLengthError(raw)
        length = int(value)
        if length <= 0:
            raise InvalidLengthError(raw)
        return length

    async def read_body(self, response: httpx.Response, length: int) -> bytes:
        """
        Read exactly ``length`` raw body bytes.

        Stops once the buffer is full, ignoring anything the server sends past the
        declared length. End of stream before that is only judged after the loop.

        Raises:
            TransportReadError: If the stream fails mid-read
            IncompleteReadError: If the stream ended short of ``length``
        """
        buffer = bytearray(length)
        total_read = 0

        try:
            async for piece in response.aiter_raw(self.read_chunk_size):
                n = min(len(piece), length - total_read)
                buffer[total_read : total_read + n] = piece[:n]
                total_read += n
                if total_read >= length:
                    break
        except (httpx.RequestError, httpx.StreamError) as e:
            raise TransportReadError(f"read error: {e}") from e

        if total_read != length:
            raise IncompleteReadError(length, total_read)

        return bytes(buffer)

    async def fetch_range(self, byte_range: ByteRange) -> bytes:
        """
        Fetch one byte range.

        Returns:
            bytes: Exactly Content-Length bytes. With a 200 response this may be more than
                ``byte_range.length`` if the server ignored the Range header.

        Raises:
            TransportError: If the request could not be completed
            TransportReadError: If reading the body failed
            UnexpectedStatusError: If the status is neither 200 nor 206
            MissingLengthError: If Content-Length is absent
            InvalidLengthError: If Content-Length is not a positive integer
            RangeExceedsContentError: If Content-Length is smaller than the requested range
            IncompleteReadError: If fewer than Content-Length bytes arrived
        """
        request = self.build_request(byte_range)
        logger.debug(f"GET {self.url} Range: {request.headers['Range']}")

        response = await self.send_request(request)
        try:
            self.check_status(response)
            length = self.content_length(response)

            if length < byte_range.length:
                raise RangeExceedsContentError(byte_range.length, length)

            if response.status_code == httpx.codes.OK and length > byte_range.length:
                logger.warning(
                    "range_ignored url=%s requested=%d content_length=%d",
                    self.url,
                    byte_range.length,
                    length,
                )

            return await self.read_body(response, length)
        finally:
            await response.aclose()


async def fetch_range(
    url: str,
    byte_range: ByteRange,
    *,
    client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[TimeoutTypes] = None,
) -> bytes:
    """Fetch a single byte range of ``url``. See :meth:`RangeFetcher.fetch_range`."""
    async with RangeFetcher(url, client=client, timeout=timeout) as fetcher:
        return await fetcher.fetch_range(byte_range)
