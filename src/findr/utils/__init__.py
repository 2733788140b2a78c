"""Findr utilities."""

from findr.utils.ids import LocalIdGenerator, epoch_millis, local_id
from findr.utils.images import content_type_for, file_extension, read_image

__all__ = [
    "LocalIdGenerator",
    "content_type_for",
    "epoch_millis",
    "file_extension",
    "local_id",
    "read_image",
]
