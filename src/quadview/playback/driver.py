import logging
from collections.abc import Sequence
from typing import Any, Protocol

from quadview.container.store import ImageHandle
from quadview.playback.layout import Rect, grid_layout
from quadview.playback.scheduler import Clock, PlaybackScheduler, monotonic_ms


class Compositor(Protocol):
    def on_redraw_requested(
        self,
        surface: Any,
        image: ImageHandle | None,
        rect: Rect | None,
    ) -> None: ...


class CompositorDriver:
    """Fans timer and reset signals out to every viewport scheduler.

    The scheduler list is owned by the caller; the driver only walks it.
    """

    def __init__(
        self,
        schedulers: Sequence[PlaybackScheduler],
        compositor: Compositor,
        clock: Clock = monotonic_ms,
        logger: logging.Logger | None = None,
    ) -> None:
        self.schedulers = schedulers
        self.compositor = compositor
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

    def request_redraw(self, idx: int) -> None:
        vp = self.schedulers[idx].viewport
        frame = vp.current_frame()
        self.logger.debug('redraw viewport %d at frame %d', idx, vp.index)
        self.compositor.on_redraw_requested(
            vp.surface,
            frame.image if frame else None,
            vp.rect,
        )

    def on_timer(self, now: int | None = None) -> list[int]:
        now = self.clock() if now is None else now
        changed = [
            idx
            for idx, scheduler in enumerate(self.schedulers)
            if scheduler.tick(now)
        ]
        for idx in changed:
            self.request_redraw(idx)
        return changed

    def on_reset(self, now: int | None = None) -> list[int]:
        now = self.clock() if now is None else now
        changed = [
            idx
            for idx, scheduler in enumerate(self.schedulers)
            if scheduler.reset(now)
        ]
        for idx in changed:
            self.request_redraw(idx)
        return changed

    def redraw_all(self) -> list[int]:
        playing = [
            idx for idx, scheduler in enumerate(self.schedulers) if scheduler.playing
        ]
        for idx in playing:
            self.request_redraw(idx)
        return playing

    def relayout(self, width: int, height: int, columns: int | None = None) -> list[int]:
        rects = grid_layout(width, height, len(self.schedulers), columns=columns)
        for scheduler, rect in zip(self.schedulers, rects, strict=True):
            scheduler.viewport.rect = rect
        return self.redraw_all()
