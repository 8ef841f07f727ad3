import logging
from dataclasses import dataclass

from quadview.container.preset import PRESETS, ContainerSettings
from quadview.kernel.override import DefaultOverride

MAX_VIEWPORTS = 4
TIMER_INTERVAL_MS = 16


@dataclass(frozen=True)
class PlayerConfig(DefaultOverride):
    viewports: int = MAX_VIEWPORTS
    pattern: str = 'v{index}.dat'
    tick_ms: int = TIMER_INTERVAL_MS
    width: int = 800
    height: int = 600
    columns: int | None = None
    layout: str = 'dat'

    def __post_init__(self) -> None:
        if self.viewports < 0:
            raise ValueError(f'viewport count must not be negative: {self.viewports}')  # noqa: TRY003
        if self.tick_ms <= 0:
            raise ValueError(f'timer interval must be positive: {self.tick_ms}')  # noqa: TRY003
        if self.columns is not None and self.columns <= 0:
            raise ValueError(f'column count must be positive: {self.columns}')  # noqa: TRY003
        if self.layout not in PRESETS:
            raise ValueError(f'unknown container layout: {self.layout}')  # noqa: TRY003

    @property
    def container(self) -> ContainerSettings:
        return PRESETS[self.layout]

    def filename(self, index: int) -> str:
        return self.pattern.format(index=index)


player = PlayerConfig()


def setup_logging(verbose: int = 0) -> None:
    level = logging.WARNING - 10 * min(verbose, 2)
    logging.basicConfig(
        level=level,
        format='%(levelname)s %(name)s: %(message)s',
    )
