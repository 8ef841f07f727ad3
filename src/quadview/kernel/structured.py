from abc import ABC
from typing import Any, ClassVar, Protocol, Self, cast

import numpy as np
from numpy.typing import NDArray

ArrayBuffer = NDArray[np.uint8] | memoryview | bytes


class RecordDType(Protocol):
    itemsize: ClassVar[int]


class StructuredTuple(ABC):
    """Fixed-size binary record backed by a numpy structured dtype."""

    __slots__ = ('_record',)
    dtype: ClassVar[type[RecordDType]]

    def __init__(self, record: RecordDType) -> None:
        self._record = record

    @classmethod
    def itemsize(cls) -> int:
        return cls.dtype.itemsize

    @classmethod
    def from_buffer(cls, buffer: ArrayBuffer) -> Self:
        record = np.frombuffer(buffer, dtype=cls.dtype, count=1)[0]
        return cls(record)

    def field(self, name: str) -> Any:
        return cast(dict[str, Any], self._record)[name]


def make_dtype(fields: list[tuple[str, str]]) -> type[RecordDType]:
    # packed, numpy only pads when align=True
    return cast(type[RecordDType], np.dtype(fields))
