import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from quadview.container.errors import ParseError
from quadview.container.store import Container, FrameRecord
from quadview.playback.layout import Rect

Clock = Callable[[], int]


def monotonic_ms() -> int:
    return time.monotonic_ns() // 1_000_000


@dataclass(eq=False)
class Viewport:
    surface: Any = None
    rect: Rect | None = None
    container: Container | None = None
    index: int = 0
    last_advance: int = 0
    error: ParseError | None = None

    @property
    def bound(self) -> bool:
        return self.container is not None

    def current_frame(self) -> FrameRecord | None:
        if not self.container:
            return None
        return self.container.frame(self.index)


class PlaybackScheduler:
    """Advances one viewport through its frames against a monotonic clock.

    Unbound viewports (no container) ignore ``tick`` and ``reset``. A
    single ``tick`` moves at most one frame, however late it is called.
    """

    __slots__ = ('viewport', 'clock')

    def __init__(self, viewport: Viewport | None = None, clock: Clock = monotonic_ms) -> None:
        self.viewport = viewport or Viewport()
        self.clock = clock

    @property
    def playing(self) -> bool:
        return self.viewport.bound

    def bind(self, container: Container, now: int | None = None) -> None:
        vp = self.viewport
        if vp.container is not None and vp.container is not container:
            vp.container.close()
        vp.container = container
        vp.error = None
        vp.index = 0
        vp.last_advance = self.clock() if now is None else now

    def unbind(self) -> None:
        vp = self.viewport
        if vp.container is not None:
            vp.container.close()
        vp.container = None
        vp.index = 0

    def tick(self, now: int | None = None) -> bool:
        vp = self.viewport
        # empty containers stay static, nothing to wrap around
        if not vp.container:
            return False
        now = self.clock() if now is None else now
        delay = vp.container.frame(vp.index).delay_ms
        if now - vp.last_advance < delay:
            return False
        vp.index = (vp.index + 1) % len(vp.container)
        vp.last_advance = now
        return True

    def reset(self, now: int | None = None) -> bool:
        vp = self.viewport
        if vp.container is None:
            return False
        vp.index = 0
        vp.last_advance = self.clock() if now is None else now
        return True
