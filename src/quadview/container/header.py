from dataclasses import dataclass

from quadview.kernel.structured import StructuredTuple, make_dtype

FILE_TAG = b'FILE'
CONTENT_TAG = b'IMAG'
TRAILER_TAG = b'TRAI'

TAG_SIZE = 4


@dataclass(frozen=True, slots=True)
class ContainerInfo:
    version: int
    nframes: int
    cycle_ms: int


class FileHeader(StructuredTuple):
    @property
    def tag(self) -> bytes:
        return bytes(self.field('tag'))[:TAG_SIZE]

    @property
    def version(self) -> int:
        return int(self.field('version'))

    @property
    def nframes(self) -> int:
        return int(self.field('nframes'))

    @property
    def cycle_ms(self) -> int:
        return int(self.field('cycle_ms'))

    def info(self) -> ContainerInfo:
        return ContainerInfo(self.version, self.nframes, self.cycle_ms)


class SizedTag(StructuredTuple):
    """Tag followed by a 64-bit size, shared by content headers and trailers."""

    @property
    def tag(self) -> bytes:
        return bytes(self.field('tag'))[:TAG_SIZE]

    @property
    def size(self) -> int:
        return int(self.field('size'))


class PackedFileHeader(FileHeader):
    dtype = make_dtype(
        [
            ('tag', 'S4'),
            ('version', 'u1'),
            ('nframes', '<u2'),
            ('cycle_ms', '<u2'),
        ],
    )


class PackedSizedTag(SizedTag):
    dtype = make_dtype(
        [
            ('tag', 'S4'),
            ('size', '<u8'),
        ],
    )


# layout written by the MSVC tool: NUL terminated tags, sizes aligned to 8
class PaddedFileHeader(FileHeader):
    dtype = make_dtype(
        [
            ('tag', 'S5'),
            ('version', 'u1'),
            ('nframes', '<u2'),
            ('cycle_ms', '<u2'),
        ],
    )


class PaddedSizedTag(SizedTag):
    dtype = make_dtype(
        [
            ('tag', 'S5'),
            ('reserved', 'V3'),
            ('size', '<u8'),
        ],
    )
