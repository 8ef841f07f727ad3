from typing import Any

from PIL import Image

from quadview.graphics.image import TImage
from quadview.playback.layout import Rect

BACKGROUND = (255, 255, 255)


class CanvasCompositor:
    """Pastes each redrawn viewport frame, stretched to its rect, on one canvas."""

    def __init__(
        self,
        width: int,
        height: int,
        background: tuple[int, int, int] = BACKGROUND,
    ) -> None:
        self.background = background
        self.canvas = Image.new('RGB', (width, height), background)
        self.redraws = 0

    def on_redraw_requested(
        self,
        surface: Any,
        image: TImage | None,
        rect: Rect | None,
    ) -> None:
        box = rect or Rect(0, 0, *self.canvas.size)
        if box.width <= 0 or box.height <= 0:
            return
        self.redraws += 1
        if image is None:
            self.canvas.paste(self.background, box.box)
            return
        frame = image.convert('RGB').resize((box.width, box.height))
        self.canvas.paste(frame, (box.x, box.y))

    def snapshot(self) -> TImage:
        return self.canvas.copy()
