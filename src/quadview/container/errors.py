class ParseError(Exception):
    """Base for every failure to turn a byte source into a container."""


class ContainerIOError(ParseError):
    def __init__(self, path: str, reason: OSError) -> None:
        super().__init__(f'failed to read {path}: {reason}')
        self.path = path
        self.reason = reason


def _where(location: str, index: int | None) -> str:
    return location if index is None else f'{location} of frame {index}'


class BadMagicError(ParseError):
    def __init__(
        self,
        location: str,
        expected: bytes,
        found: bytes,
        index: int | None = None,
    ) -> None:
        super().__init__(
            f'bad tag in {_where(location, index)}: '
            f'expected {expected!r} but got {found!r}'
        )
        self.location = location
        self.expected = expected
        self.found = found
        self.index = index


class TruncatedError(ParseError):
    def __init__(
        self,
        location: str,
        expected: int,
        available: int,
        index: int | None = None,
    ) -> None:
        super().__init__(
            f'truncated {_where(location, index)}: '
            f'needs {expected} bytes but only {available} left'
        )
        self.location = location
        self.expected = expected
        self.available = available
        self.index = index


class SizeMismatchError(ParseError):
    def __init__(self, index: int, declared: int, echoed: int) -> None:
        super().__init__(
            f'trailer of frame {index} echoes size {echoed} '
            f'but content header declared {declared}'
        )
        self.index = index
        self.declared = declared
        self.echoed = echoed


class DecodeFailedError(ParseError):
    def __init__(self, index: int, size: int) -> None:
        super().__init__(f'could not decode image of frame {index} ({size} bytes)')
        self.index = index
        self.size = size


class TraceError(ParseError):
    def __init__(self, index: int, reason: OSError) -> None:
        super().__init__(f'trace sink failed on frame {index}: {reason}')
        self.index = index
        self.reason = reason
