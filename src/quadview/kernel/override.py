from dataclasses import dataclass, replace
from typing import Any, Self


@dataclass(frozen=True)
class DefaultOverride:
    def __call__(self, **kwargs: Any) -> Self:
        return replace(self, **kwargs)
