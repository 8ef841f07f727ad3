from collections.abc import Callable, Iterator, Sequence
from contextlib import AbstractContextManager
from dataclasses import dataclass
from types import TracebackType
from typing import Any

from quadview.container.header import ContainerInfo

ImageHandle = Any


@dataclass(frozen=True, slots=True)
class FrameRecord:
    image: ImageHandle
    delay_ms: int


class Container(AbstractContextManager['Container']):
    """Decoded frames of one animation file, in playback order.

    Owns every image handle it holds and releases all of them on close.
    """

    __slots__ = ('info', '_frames', '_release', 'closed')

    def __init__(
        self,
        info: ContainerInfo,
        frames: Sequence[FrameRecord],
        release: Callable[[ImageHandle], None],
    ) -> None:
        self.info = info
        self._frames = tuple(frames)
        self._release = release
        self.closed = False

    def frame_count(self) -> int:
        return len(self._frames)

    def frame(self, index: int) -> FrameRecord:
        if self.closed:
            raise ValueError('frame lookup on closed container')  # noqa: TRY003
        return self._frames[index]

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[FrameRecord]:
        return iter(self._frames)

    def __exit__(
        self,
        __exc_type: type[BaseException] | None,
        __exc_value: BaseException | None,
        __traceback: TracebackType | None,
    ) -> bool | None:
        self.close()
        return None

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        for record in self._frames:
            self._release(record.image)

    def __repr__(self) -> str:
        state = ' closed' if self.closed else ''
        return (
            f'Container<v{self.info.version}>'
            f'[{len(self)} frames @ {self.info.cycle_ms}ms{state}]'
        )
