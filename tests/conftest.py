"""
Test Configuration
==================

Fixtures for building container byte streams and tracking image handles.
"""

import io
import struct

import pytest
from PIL import Image


def file_header(nframes: int, cycle_ms: int, version: int = 1, tag: bytes = b'FILE') -> bytes:
    return tag + struct.pack('<BHH', version, nframes, cycle_ms)


def sized_tag(tag: bytes, size: int) -> bytes:
    return tag + struct.pack('<Q', size)


def frame_record(payload: bytes, echoed: int | None = None) -> bytes:
    size = len(payload)
    return (
        sized_tag(b'IMAG', size)
        + payload
        + sized_tag(b'TRAI', size if echoed is None else echoed)
    )


def build_container(payloads: list[bytes], cycle_ms: int = 100, version: int = 1) -> bytes:
    return file_header(len(payloads), cycle_ms, version) + b''.join(
        frame_record(payload) for payload in payloads
    )


def padded_tag(tag: bytes, size: int) -> bytes:
    return tag + b'\0' + bytes(3) + struct.pack('<Q', size)


def build_padded_container(payloads: list[bytes], cycle_ms: int = 100) -> bytes:
    header = b'FILE\0' + struct.pack('<BHH', 5, len(payloads), cycle_ms)
    return header + b''.join(
        padded_tag(b'IMAG', len(p)) + p + padded_tag(b'TRAI', len(p)) for p in payloads
    )


def bmp_bytes(color: tuple[int, int, int], size: tuple[int, int] = (4, 2)) -> bytes:
    with io.BytesIO() as stream:
        Image.new('RGB', size, color).save(stream, format='BMP')
        return stream.getvalue()


class FakeImage:
    def __init__(self, data: bytes) -> None:
        self.data = data


class FakeDecoder:
    """Decoder that accepts any non-empty payload and counts live handles."""

    def __init__(self, reject: set[bytes] | None = None) -> None:
        self.reject = reject or set()
        self.live: list[FakeImage] = []
        self.decoded = 0

    def decode(self, data: bytes) -> FakeImage | None:
        if not data or data in self.reject:
            return None
        image = FakeImage(data)
        self.live.append(image)
        self.decoded += 1
        return image

    def release(self, image: FakeImage) -> None:
        self.live.remove(image)


@pytest.fixture
def decoder():
    return FakeDecoder()


@pytest.fixture
def two_frames():
    """FILE v1, two frames, 100ms cycle."""
    return build_container([b'payload-zero', b'payload-one!!'], cycle_ms=100)
