import math
from typing import NamedTuple


class Rect(NamedTuple):
    x: int
    y: int
    width: int
    height: int

    @property
    def box(self) -> tuple[int, int, int, int]:
        return (self.x, self.y, self.x + self.width, self.y + self.height)


def grid_layout(
    width: int,
    height: int,
    count: int,
    columns: int | None = None,
) -> list[Rect]:
    """Split an area into ``count`` equal cells, filled row by row.

    Cells take the integer part of each division, so with odd sizes the
    right and bottom edges may be left uncovered by a pixel.
    """
    if count <= 0:
        return []
    columns = columns or math.ceil(math.sqrt(count))
    rows = math.ceil(count / columns)
    cell_w, cell_h = width // columns, height // rows
    return [
        Rect((idx % columns) * cell_w, (idx // columns) * cell_h, cell_w, cell_h)
        for idx in range(count)
    ]
