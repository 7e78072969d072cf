from __future__ import annotations

import base64
import io

import pytest
from werkzeug.datastructures import FileStorage

from neurolens_web.domain.errors import NoFilesSelected, SizeLimitExceeded
from neurolens_web.services.file_encoder import DEFAULT_MAX_BYTES, FileEncoder


def make_upload(data: bytes, filename: str = "notes.txt", content_type: str | None = "text/plain") -> FileStorage:
    return FileStorage(stream=io.BytesIO(data), filename=filename, content_type=content_type)


def test_text_file_is_base64_encoded_without_preview():
    data = b"print('hello')\n" * 140  # ~2 KB
    encoded = FileEncoder().encode(make_upload(data, "snippet.py", "text/x-python"))

    assert encoded.name == "snippet.py"
    assert encoded.size_bytes == len(data)
    assert encoded.content_type == "text/x-python"
    assert base64.b64decode(encoded.payload) == data
    assert encoded.preview_url is None
    assert not encoded.is_image


def test_image_gets_preview_from_same_bytes():
    data = b"\x89PNG\r\n\x1a\nfakepng"
    encoded = FileEncoder().encode(make_upload(data, "shot.png", "image/png"))

    assert encoded.is_image
    assert encoded.preview_url == f"data:image/png;base64,{encoded.payload}"


def test_missing_content_type_defaults_to_octet_stream():
    encoded = FileEncoder().encode(make_upload(b"\x00\x01", "blob.bin", None))
    assert encoded.content_type == "application/octet-stream"


def test_default_content_type_is_configurable():
    encoder = FileEncoder(default_content_type="application/x-unknown")
    encoded = encoder.encode(make_upload(b"abc", "blob", None))
    assert encoded.content_type == "application/x-unknown"


def test_default_limit_is_ten_mib():
    assert FileEncoder().max_bytes == DEFAULT_MAX_BYTES == 10 * 1024 * 1024


def test_file_at_limit_is_accepted():
    encoder = FileEncoder(max_bytes=16)
    encoded = encoder.encode(make_upload(b"x" * 16))
    assert encoded.size_bytes == 16


def test_oversized_file_is_rejected_before_reading():
    encoder = FileEncoder(max_bytes=16)
    upload = make_upload(b"x" * 17, "big.log")

    with pytest.raises(SizeLimitExceeded) as exc:
        encoder.encode(upload)

    assert exc.value.filename == "big.log"
    assert exc.value.size_bytes == 17
    assert upload.stream.tell() == 0


def test_size_limit_message_matches_ui_text():
    upload = make_upload(b"\x00" * (15 * 1024 * 1024), "huge.bin", "application/octet-stream")

    with pytest.raises(SizeLimitExceeded) as exc:
        FileEncoder().encode(upload)

    assert exc.value.user_message == "File size exceeds limit (10MB)."


@pytest.mark.parametrize(
    "max_bytes, expected",
    [
        (16, "File size exceeds limit (16 bytes)."),
        (2 * 1024 * 1024, "File size exceeds limit (2MB)."),
        (1536 * 1024, "File size exceeds limit (1572864 bytes)."),
    ],
)
def test_size_limit_message_uses_configured_limit(max_bytes, expected):
    upload = make_upload(b"x" * (max_bytes + 1), "over.txt")

    with pytest.raises(SizeLimitExceeded) as exc:
        FileEncoder(max_bytes=max_bytes).encode(upload)

    assert exc.value.user_message == expected


def test_encode_all_keeps_selection_order():
    uploads = [
        make_upload(b"first", "a.txt"),
        make_upload(b"second", "b.json", "application/json"),
        make_upload(b"third", "c.png", "image/png"),
    ]

    encoded = FileEncoder().encode_all(uploads)

    assert [e.name for e in encoded] == ["a.txt", "b.json", "c.png"]
    assert [base64.b64decode(e.payload) for e in encoded] == [b"first", b"second", b"third"]


def test_one_oversized_file_fails_whole_batch_without_reading_any():
    encoder = FileEncoder(max_bytes=8)
    small = make_upload(b"ok", "small.txt")
    big = make_upload(b"x" * 9, "big.txt")

    with pytest.raises(SizeLimitExceeded):
        encoder.encode_all([small, big])

    assert small.stream.tell() == 0
    assert big.stream.tell() == 0


@pytest.mark.parametrize(
    "uploads",
    [
        [],
        [FileStorage(stream=io.BytesIO(b""), filename="")],
    ],
)
def test_empty_selection_is_rejected(uploads):
    with pytest.raises(NoFilesSelected):
        FileEncoder().encode_all(uploads)
