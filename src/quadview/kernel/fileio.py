import os
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path
from types import TracebackType
from typing import cast

import numpy as np
from numpy.typing import ArrayLike


class ResourceFile(AbstractContextManager[memoryview]):
    __slots__ = ('buffer', 'closed')

    def __init__(self, buffer: ArrayLike) -> None:
        self.buffer = memoryview(buffer)  # type: ignore[arg-type]
        self.closed = False

    def __buffer__(self, _flags: int) -> memoryview:
        if self.closed:
            raise OSError('I/O operation on closed file')  # noqa: TRY003
        return self.buffer

    def __exit__(
        self,
        __exc_type: type[BaseException] | None,
        __exc_value: BaseException | None,
        __traceback: TracebackType | None,
    ) -> bool | None:
        self.close()
        return None

    @classmethod
    @contextmanager
    def load(cls, file_path: str | os.PathLike[str]) -> Iterator[memoryview]:
        # mmap refuses zero-length files
        if os.path.getsize(file_path) == 0:
            with cls(b'') as empty:
                yield cast(memoryview, empty)
            return

        data = np.memmap(file_path, dtype='u1', mode='r')
        with cls(data) as res:
            yield cast(memoryview, res)

    def close(self) -> None:
        self.closed = True


def write_file(path: str | os.PathLike[str], data: bytes) -> int:
    with Path(path).open('wb') as res:
        return res.write(data)
