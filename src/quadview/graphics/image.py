import io
import logging
from typing import Protocol

from PIL import Image, UnidentifiedImageError

from quadview.container.store import ImageHandle

TImage = Image.Image


class ImageDecoder(Protocol):
    def decode(self, data: bytes) -> ImageHandle | None: ...

    def release(self, image: ImageHandle) -> None: ...


def decode_image(data: bytes) -> TImage | None:
    if not data:
        return None
    try:
        im = Image.open(io.BytesIO(data))
        # force pixel decode now, Image.open is lazy
        im.load()
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
    ) as exc:
        logging.getLogger(__name__).debug('image decode failed: %s', exc)
        return None
    return im


def release_image(image: TImage) -> None:
    image.close()


class PillowDecoder:
    """In-memory decoder for any format Pillow can open (BMP included)."""

    def decode(self, data: bytes) -> TImage | None:
        return decode_image(data)

    def release(self, image: TImage) -> None:
        release_image(image)
