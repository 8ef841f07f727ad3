import os
from collections.abc import Callable
from pathlib import Path

from quadview.kernel.fileio import write_file


def dump_frames(
    directory: str | os.PathLike[str],
    name: str = 'frame_{index}.bin',
) -> Callable[[int, bytes], None]:
    """Trace sink writing every raw frame payload to its own file."""
    basedir = Path(directory)
    basedir.mkdir(parents=True, exist_ok=True)

    def sink(index: int, payload: bytes) -> None:
        write_file(basedir / name.format(index=index), payload)

    return sink
