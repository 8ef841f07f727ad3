import logging
import os
from collections.abc import Callable, Sequence
from typing import Any

from quadview.config import PlayerConfig, player
from quadview.container.errors import ParseError
from quadview.container.parse import TraceSink, from_path
from quadview.graphics.image import ImageDecoder
from quadview.playback.layout import grid_layout
from quadview.playback.scheduler import (
    Clock,
    PlaybackScheduler,
    Viewport,
    monotonic_ms,
)

logger = logging.getLogger(__name__)


def load_viewports(
    directory: str | os.PathLike[str],
    decoder: ImageDecoder,
    config: PlayerConfig = player,
    clock: Clock = monotonic_ms,
    surfaces: Sequence[Any] | None = None,
    trace: Callable[[int], TraceSink | None] | None = None,
) -> list[PlaybackScheduler]:
    """Create one scheduler per configured viewport and load its file.

    A viewport whose file fails to load is reported and left unbound; the
    others load and play regardless.
    """
    if surfaces is not None and len(surfaces) < config.viewports:
        raise ValueError(  # noqa: TRY003
            f'got {len(surfaces)} surfaces for {config.viewports} viewports'
        )
    rects = grid_layout(config.width, config.height, config.viewports, config.columns)
    schedulers = []
    for idx, rect in enumerate(rects):
        surface = surfaces[idx] if surfaces is not None else idx
        scheduler = PlaybackScheduler(Viewport(surface=surface, rect=rect), clock=clock)
        path = os.path.join(directory, config.filename(idx))
        try:
            container = from_path(
                path,
                decoder,
                cfg=config.container,
                trace=trace(idx) if trace else None,
            )
        except ParseError as exc:
            logger.error('viewport %d failed to load %s: %s', idx, path, exc)
            scheduler.viewport.error = exc
        else:
            logger.info('viewport %d loaded %s: %r', idx, path, container)
            scheduler.bind(container)
        schedulers.append(scheduler)
    return schedulers


def close_viewports(schedulers: Sequence[PlaybackScheduler]) -> None:
    for scheduler in schedulers:
        scheduler.unbind()
