"""Unit tests for content-based MIME type sniffing."""

from pathlib import Path

import pytest

from content_classifier import sniff_bytes, sniff_content_type

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        (PNG_BYTES, "image/png"),
        (b"\xff\xd8\xff\xe0\x00\x10JFIF", "image/jpeg"),
        (b"GIF89a\x01\x00\x01\x00", "image/gif"),
        (b"RIFF\x24\x00\x00\x00WEBPVP8 ", "image/webp"),
        (b"%PDF-1.7\n", "application/pdf"),
        (b"PK\x03\x04\x14\x00", "application/zip"),
        (b"\x1f\x8b\x08\x00", "application/gzip"),
        (b"\x7fELF\x02\x01\x01", "application/x-executable"),
        (b"ID3\x04\x00", "audio/mpeg"),
        (b"\xff\xfb\x90\x00", "audio/mpeg"),
        (b"\xff\xf3\x90\x00", "audio/mpeg"),
    ],
)
def test_known_signatures_are_detected(header: bytes, expected: str) -> None:
    assert sniff_bytes(header.ljust(64, b"\x00")) == expected


def test_tar_signature_at_offset_is_detected() -> None:
    header = b"file.txt".ljust(257, b"\x00") + b"ustar\x0000"

    assert sniff_bytes(header.ljust(512, b"\x00")) == "application/x-tar"


def test_plain_text_has_no_signature() -> None:
    assert sniff_bytes(b"hello") is None
    assert sniff_bytes(b"") is None


def test_sniff_content_type_reads_file_prefix(tmp_path: Path) -> None:
    image = tmp_path / "picture.txt"
    image.write_bytes(PNG_BYTES + b"\x00" * 64)

    assert sniff_content_type(image) == "image/png"


def test_extension_is_ignored(tmp_path: Path) -> None:
    fake_image = tmp_path / "fake.png"
    fake_image.write_bytes(b"hello")

    assert sniff_content_type(fake_image) == "application/octet-stream"


def test_unreadable_file_falls_back_to_octet_stream(tmp_path: Path) -> None:
    assert sniff_content_type(tmp_path / "missing.bin") == "application/octet-stream"
