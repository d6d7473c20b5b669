"""
Streaming request bodies for the create-blob API.

A body produced here resolves to the JSON document expected by
POST /repos/{owner}/{repo}/git/blobs:

    {"encoding":"base64","content":"SGFsZiBtZWFzdXJlcyBhcmUgYXMgYmFkIGFzIG5vdGhpbmcu"}

The file is read and encoded chunk by chunk, so memory stays bounded by the
chunk size no matter how large the file is.

See: https://docs.github.com/rest/git/blobs#create-a-blob
"""

import base64
import logging
from collections.abc import AsyncIterator

import anyio

from committer.services.github.constants import (
    BLOB_BODY_PREFIX,
    BLOB_BODY_SUFFIX,
    DEFAULT_BLOB_CHUNK_SIZE,
)
from committer.services.github.exceptions import FileUnreadable

logger = logging.getLogger(__name__)


async def encode_base64_chunks(
    chunks: AsyncIterator[bytes],
) -> AsyncIterator[bytes]:
    """
    Base64-encode a byte stream incrementally.

    A chunk boundary may split a 3-byte group, so up to 2 trailing bytes are
    carried into the next chunk and flushed (with padding) at end of stream.
    The concatenated output equals `base64.b64encode` of the concatenated input.
    """
    carry = b""
    async for chunk in chunks:
        data = carry + chunk
        cut = len(data) - len(data) % 3
        carry = data[cut:]
        if cut:
            yield base64.b64encode(data[:cut])
    if carry:
        yield base64.b64encode(carry)


class CreateBlobRequestBody:
    """
    Lazy create-blob request body for a single file.

    Async-iterable of bytes, usable directly as an httpx request body. The
    stream is single-pass: the file is opened when iteration starts and
    iterating a second time raises RuntimeError.
    """

    def __init__(self, path: str, chunk_size: int = DEFAULT_BLOB_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.path = path
        self.chunk_size = chunk_size
        self._consumed = False

    def __aiter__(self) -> AsyncIterator[bytes]:
        if self._consumed:
            raise RuntimeError(f"Request body for {self.path} has already been consumed")
        self._consumed = True
        return self._stream()

    async def _stream(self) -> AsyncIterator[bytes]:
        try:
            file = await anyio.open_file(self.path, "rb")
        except OSError as e:
            raise FileUnreadable(self.path, e.strerror or str(e)) from e

        async with file:
            yield BLOB_BODY_PREFIX
            async for encoded in encode_base64_chunks(self._read_chunks(file)):
                yield encoded
            yield BLOB_BODY_SUFFIX

        logger.debug(f"Streamed blob body for {self.path}")

    async def _read_chunks(self, file: anyio.AsyncFile[bytes]) -> AsyncIterator[bytes]:
        while True:
            try:
                chunk = await file.read(self.chunk_size)
            except OSError as e:
                raise FileUnreadable(self.path, e.strerror or str(e)) from e
            if not chunk:
                return
            yield chunk
