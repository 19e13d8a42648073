"""SEF trailer parsing: header reader and entry offset resolver.

All positions in the trailer are distances from the end of the file.
`seek_from_end` is the only place such a distance becomes an absolute offset.
"""
from __future__ import annotations

import struct
from typing import BinaryIO
from warnings import warn

from sampan_core.errors import (
    EntryOutOfBounds,
    NotPanorama,
    TrailerWarning,
    TypeMismatch,
    UnsupportedVersion,
)
from sampan_core.protocol import (
    MAGIC_FOOTER,
    MAGIC_HEADER,
    SUPPORTED_VERSIONS,
    FOOTER_FMT,
    FOOTER_LEN,
    HEADER_FMT,
    HEADER_LEN,
    ENTRY_LEN,
    ENTRY_READ_FMT,
    ENTRY_READ_LEN,
    DATA_FMT,
    DATA_LEN,
    footer_region_length,
)


def seek_from_end(f: BinaryIO, distance: int, file_length: int) -> int | None:
    """Seek to `distance` bytes before EOF.

    Returns the absolute offset, or None if the distance falls outside the file.
    """
    if distance < 0 or distance > file_length:
        return None
    pos = file_length - distance
    f.seek(pos)
    return pos


def _read_from_end(f: BinaryIO, distance: int, size: int, file_length: int) -> bytes | None:
    if seek_from_end(f, distance, file_length) is None:
        return None
    data = f.read(size)
    if len(data) < size:
        return None
    return data


def read_entries_count(f: BinaryIO, file_length: int, force: bool = False) -> int:
    """Validate the trailer footer and header and return the entry count."""
    footer = _read_from_end(f, FOOTER_LEN, FOOTER_LEN, file_length)
    if footer is None:
        raise NotPanorama()

    trailer_length, magic = struct.unpack(FOOTER_FMT, footer)
    if magic != MAGIC_FOOTER:
        raise NotPanorama()

    header = _read_from_end(f, FOOTER_LEN + trailer_length, HEADER_LEN, file_length)
    if header is None:
        raise NotPanorama()

    magic, version, count = struct.unpack(HEADER_FMT, header)
    if magic != MAGIC_HEADER:
        raise NotPanorama()

    if version not in SUPPORTED_VERSIONS:
        if not force:
            raise UnsupportedVersion(version)
        warn(f"Forcing unsupported panorama version {version}", TrailerWarning)

    return int(count)


def read_entry_offset(f: BinaryIO, n: int, count: int, file_length: int, force: bool = False) -> int:
    """Resolve entry `n` to the absolute offset where its data begins."""
    footer_len = footer_region_length(count)

    # Descriptors follow the header, entry 0 first.
    desc_distance = footer_len - HEADER_LEN - n * ENTRY_LEN
    desc = _read_from_end(f, desc_distance, ENTRY_READ_LEN, file_length)
    if desc is None:
        raise EntryOutOfBounds(n, desc_distance)

    type_, offset = struct.unpack(ENTRY_READ_FMT, desc)

    offset_from_end = footer_len + offset
    data = _read_from_end(f, offset_from_end, DATA_LEN, file_length)
    if data is None:
        raise EntryOutOfBounds(n, offset_from_end)

    (data_type,) = struct.unpack(DATA_FMT, data)
    if data_type != type_:
        if not force:
            raise TypeMismatch(data_type, type_)
        warn(f"Forcing entry {n} despite type mismatch: {data_type} != {type_}", TrailerWarning)

    return file_length - offset_from_end


def resolve_payload_length(f: BinaryIO, file_length: int, force: bool = False) -> tuple[int, int]:
    """Return (entry count, smallest entry offset).

    The smallest offset is the length of the JPEG data preceding the vendor
    trailer. With no entries nothing is stripped.
    """
    count = read_entries_count(f, file_length, force)

    smallest_offset = file_length
    for i in range(count):
        offset = read_entry_offset(f, i, count, file_length, force)
        if offset < smallest_offset:
            smallest_offset = offset

    return count, smallest_offset
