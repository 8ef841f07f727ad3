import logging
from dataclasses import dataclass

from quadview.container.header import (
    FileHeader,
    PackedFileHeader,
    PackedSizedTag,
    PaddedFileHeader,
    PaddedSizedTag,
    SizedTag,
)
from quadview.kernel.override import DefaultOverride


@dataclass(frozen=True)
class ContainerSettings(DefaultOverride):
    file_header: type[FileHeader]
    content_header: type[SizedTag]
    trailer: type[SizedTag]
    logger: logging.Logger = logging.getLogger('quadview.container')


dat = ContainerSettings(
    file_header=PackedFileHeader,
    content_header=PackedSizedTag,
    trailer=PackedSizedTag,
)

dat_msvc = dat(
    file_header=PaddedFileHeader,
    content_header=PaddedSizedTag,
    trailer=PaddedSizedTag,
)

PRESETS = {'dat': dat, 'dat_msvc': dat_msvc}
