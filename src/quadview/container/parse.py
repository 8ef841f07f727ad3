import os
from collections.abc import Callable
from contextlib import ExitStack
from typing import TypeVar

from quadview.container.errors import (
    BadMagicError,
    ContainerIOError,
    DecodeFailedError,
    SizeMismatchError,
    TraceError,
    TruncatedError,
)
from quadview.container.header import (
    CONTENT_TAG,
    FILE_TAG,
    TRAILER_TAG,
    ContainerInfo,
)
from quadview.container.preset import ContainerSettings, dat
from quadview.container.store import Container, FrameRecord
from quadview.graphics.image import ImageDecoder
from quadview.kernel.fileio import ResourceFile
from quadview.kernel.structured import ArrayBuffer, StructuredTuple

TraceSink = Callable[[int, bytes], None]

R = TypeVar('R', bound=StructuredTuple)


def read_record(
    record: type[R],
    buffer: memoryview,
    offset: int,
    location: str,
    index: int | None = None,
) -> tuple[int, R]:
    size = record.itemsize()
    available = len(buffer) - offset
    if available < size:
        raise TruncatedError(location, size, available, index)
    return offset + size, record.from_buffer(buffer[offset : offset + size])


def read_payload(
    buffer: memoryview,
    offset: int,
    size: int,
    index: int,
) -> tuple[int, bytes]:
    available = len(buffer) - offset
    if available < size:
        raise TruncatedError('payload', size, available, index)
    return offset + size, buffer[offset : offset + size].tobytes()


def check_tag(
    location: str,
    expected: bytes,
    found: bytes,
    index: int | None = None,
) -> None:
    if found != expected:
        raise BadMagicError(location, expected, found, index)


def read_header(
    cfg: ContainerSettings,
    buffer: memoryview,
    offset: int = 0,
) -> tuple[int, ContainerInfo]:
    offset, header = read_record(cfg.file_header, buffer, offset, 'header')
    cfg.logger.debug(
        'container header: tag=%r version=%d frames=%d cycle=%dms',
        header.tag,
        header.version,
        header.nframes,
        header.cycle_ms,
    )
    check_tag('header', FILE_TAG, header.tag)
    return offset, header.info()


def parse(
    buffer: ArrayBuffer,
    decoder: ImageDecoder,
    cfg: ContainerSettings = dat,
    trace: TraceSink | None = None,
) -> Container:
    """Decode a complete container or raise a ``ParseError``.

    Handles decoded before a failure are released before the error
    propagates, so a partially built container never escapes.
    """
    view = memoryview(buffer).cast('B')
    offset, info = read_header(cfg, view)

    frames: list[FrameRecord] = []
    with ExitStack() as owned:
        for idx in range(info.nframes):
            offset, content = read_record(
                cfg.content_header, view, offset, 'content-header', idx
            )
            cfg.logger.debug(
                'frame %d header: tag=%r size=%d', idx, content.tag, content.size
            )
            check_tag('content-header', CONTENT_TAG, content.tag, idx)

            offset, payload = read_payload(view, offset, content.size, idx)
            if trace:
                try:
                    trace(idx, payload)
                except OSError as exc:
                    raise TraceError(idx, exc) from exc

            image = decoder.decode(payload)
            if image is None:
                raise DecodeFailedError(idx, content.size)
            owned.callback(decoder.release, image)
            frames.append(FrameRecord(image, info.cycle_ms))

            offset, trailer = read_record(cfg.trailer, view, offset, 'trailer', idx)
            cfg.logger.debug(
                'frame %d trailer: tag=%r size=%d', idx, trailer.tag, trailer.size
            )
            check_tag('trailer', TRAILER_TAG, trailer.tag, idx)
            if trailer.size != content.size:
                raise SizeMismatchError(idx, content.size, trailer.size)

        if offset < len(view):
            cfg.logger.debug('ignoring %d trailing bytes', len(view) - offset)

        # success: ownership moves to the container
        owned.pop_all()

    return Container(info, frames, decoder.release)


def from_path(
    path: str | os.PathLike[str],
    decoder: ImageDecoder,
    cfg: ContainerSettings = dat,
    trace: TraceSink | None = None,
) -> Container:
    with ExitStack() as stack:
        try:
            res = stack.enter_context(ResourceFile.load(path))
        except OSError as exc:
            raise ContainerIOError(os.fspath(path), exc) from exc
        return parse(res, decoder, cfg=cfg, trace=trace)
