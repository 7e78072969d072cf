from __future__ import annotations

import base64
import io
import logging
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Protocol

from neurolens_web.domain.errors import NoFilesSelected, SizeLimitExceeded
from neurolens_web.domain.models import EncodedFile

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_CONTENT_TYPE = "application/octet-stream"


class Upload(Protocol):
    """The part of werkzeug's FileStorage the encoder relies on."""
    filename: str | None
    mimetype: str
    stream: BinaryIO


def _stream_size(stream: BinaryIO) -> int:
    # remaining bytes from the current position; the position is restored
    pos = stream.tell()
    stream.seek(0, io.SEEK_END)
    size = stream.tell() - pos
    stream.seek(pos)
    return size


@dataclass(frozen=True)
class FileEncoder:
    """
    Turns uploaded files into transport-safe EncodedFile values.
    The size ceiling is checked before any bytes are read.
    """
    max_bytes: int = DEFAULT_MAX_BYTES
    default_content_type: str = DEFAULT_CONTENT_TYPE

    def check_size(self, upload: Upload) -> int:
        size = _stream_size(upload.stream)
        if size > self.max_bytes:
            raise SizeLimitExceeded(upload.filename or "", size, self.max_bytes)
        return size

    def encode(self, upload: Upload) -> EncodedFile:
        size = self.check_size(upload)

        raw = upload.stream.read()
        payload = base64.b64encode(raw).decode("ascii")
        content_type = (upload.mimetype or "").strip() or self.default_content_type

        preview_url = None
        if content_type.lower().startswith("image/"):
            preview_url = f"data:{content_type};base64,{payload}"

        return EncodedFile(
            name=upload.filename or "upload",
            size_bytes=size,
            content_type=content_type,
            payload=payload,
            preview_url=preview_url,
        )

    def encode_all(self, uploads: Iterable[Upload]) -> list[EncodedFile]:
        """
        Encodes a batch in selection order. One oversized file fails the whole batch,
        and no file is read until every size has been checked.
        """
        batch = [u for u in uploads if u is not None and (u.filename or "").strip()]
        if not batch:
            raise NoFilesSelected()

        for upload in batch:
            try:
                self.check_size(upload)
            except SizeLimitExceeded as e:
                logger.info("Rejected batch: %s is %d bytes (limit %d)", e.filename, e.size_bytes, e.limit_bytes)
                raise

        return [self.encode(u) for u in batch]
