"""yt-dlp backed implementation of :class:`~tubegrab.core.protocols.ByteSource`.

Streams are opened through yt-dlp's networking layer so the format's
own request headers, proxy and cookie handling apply.  The resource is
read in HTTP ``Range`` windows: YouTube throttles single requests for
whole adaptive streams, and yt-dlp's own downloader works around that
the same way.  All networking exceptions are re-raised as
:class:`~tubegrab.exceptions.TransferError`.
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from typing import Any

from tubegrab.core.models import StreamLocator
from tubegrab.exceptions import EnvironmentError, TransferError

DEFAULT_CHUNK_SIZE: int = 256 * 1024
DEFAULT_RANGE_SIZE: int = 10 * 1024 * 1024

_HTTP_PARTIAL_CONTENT: int = 206
_HTTP_RANGE_NOT_SATISFIABLE: int = 416


class YtDlpByteSource:
    """Concrete :class:`ByteSource` backed by ``YoutubeDL.urlopen``.

    Parameters
    ----------
    chunk_size:
        Bytes read from the socket per yielded chunk.
    range_size:
        Bytes requested per HTTP ``Range`` window.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        range_size: int = DEFAULT_RANGE_SIZE,
    ) -> None:
        if chunk_size < 1 or range_size < chunk_size:
            raise ValueError("need 1 <= chunk_size <= range_size")
        self._chunk_size = chunk_size
        self._range_size = range_size

    @staticmethod
    def _build_opts() -> dict[str, Any]:
        """Return yt-dlp options for a networking-only ``YoutubeDL``."""
        return {
            "quiet": True,
            "no_warnings": True,
            "no_color": True,
        }

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    def iter_bytes(self, locator: StreamLocator) -> Iterator[bytes]:
        """Yield the bytes behind *locator*, in order.

        Raises
        ------
        TransferError
            For any HTTP or transport failure.
        """
        try:
            import yt_dlp
            from yt_dlp.networking import Request
            from yt_dlp.networking.exceptions import HTTPError, RequestError
        except ModuleNotFoundError as exc:
            raise EnvironmentError(
                "yt-dlp is not installed. Install with: pip install yt-dlp",
            ) from exc

        headers = locator.header_dict()
        offset = 0
        try:
            with yt_dlp.YoutubeDL(self._build_opts()) as ydl:
                while True:
                    end = offset + self._range_size - 1
                    request = Request(
                        locator.url,
                        headers={**headers, "Range": f"bytes={offset}-{end}"},
                    )
                    try:
                        response = ydl.urlopen(request)
                    except HTTPError as exc:
                        # The previous window ended exactly on the last byte.
                        if exc.status == _HTTP_RANGE_NOT_SATISFIABLE and offset > 0:
                            return
                        raise

                    received = 0
                    with contextlib.closing(response):
                        while True:
                            chunk = response.read(self._chunk_size)
                            if not chunk:
                                break
                            received += len(chunk)
                            yield chunk
                        partial = response.status == _HTTP_PARTIAL_CONTENT

                    # A full (200) response already carried the whole body.
                    if not partial or received < self._range_size:
                        return
                    offset += received
        except RequestError as exc:
            raise TransferError(
                f"Stream request failed at byte {offset}: {exc}",
                hint="The stream URL may have expired; analyze the video again.",
            ) from exc
        except OSError as exc:
            raise TransferError(f"Stream read failed at byte {offset}: {exc}") from exc
