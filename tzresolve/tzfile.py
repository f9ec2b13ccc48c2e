"""
tzfile.py - Compact binary files holding one compiled time zone each

Layout (big-endian):
    header       magic "TZRC", version, kind (0 fixed / 1 variable),
                 transition count, type count, abbreviation bytes, source bytes
    transitions  (utc unix seconds, type index) per transition
    types        (utc_offset, dst_offset, abbreviation offset) per type
    abbrevs      NUL-terminated abbreviations
    sources      NUL-separated IANA source file names

A fixed zone has no transitions and exactly one type.

MIT License - Copyright (c) 2025 Matthew S. Smith
"""

import logging
import struct
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from .classes import Class, classify
from .errors import CorruptTimeZoneFile
from .zones import FixedTimeZone, Transition, VariableTimeZone

logger = logging.getLogger(__name__)

MAGIC = b'TZRC'
VERSION = 1

KIND_FIXED = 0
KIND_VARIABLE = 1

# Written at the root of every compiled database by tzresolve-build
DATABASE_MARKER = '.tzresolve'

_HEADER = struct.Struct('>4sBBIHHH')
_TRANSITION = struct.Struct('>qH')
_TYPE = struct.Struct('>iiH')

_EPOCH = datetime(1970, 1, 1)
_SECOND = timedelta(seconds=1)


def _to_unix(dt: datetime) -> int:
    return (dt - _EPOCH) // _SECOND


def _from_unix(seconds: int) -> datetime:
    return _EPOCH + timedelta(seconds=seconds)


def dumps(zone, sources: Iterable[str] = ()) -> bytes:
    """Serialize a zone and the source files it was compiled from."""
    if isinstance(zone, FixedTimeZone):
        kind = KIND_FIXED
        types = [zone]
        transitions = []
    elif isinstance(zone, VariableTimeZone):
        kind = KIND_VARIABLE
        types = []
        transitions = []
        index = {}
        for t in zone.transitions:
            if t.zone not in index:
                index[t.zone] = len(types)
                types.append(t.zone)
            transitions.append((_to_unix(t.utc_datetime), index[t.zone]))
    else:
        raise TypeError(f"Cannot serialize {type(zone).__name__}")

    abbrevs = bytearray()
    abbrev_offsets = {}
    for fixed in types:
        if fixed.name not in abbrev_offsets:
            abbrev_offsets[fixed.name] = len(abbrevs)
            abbrevs += fixed.name.encode('ascii') + b'\x00'

    source_block = '\x00'.join(sources).encode('ascii')

    parts = [
        _HEADER.pack(
            MAGIC, VERSION, kind, len(transitions), len(types),
            len(abbrevs), len(source_block),
        )
    ]
    parts.extend(_TRANSITION.pack(*t) for t in transitions)
    parts.extend(
        _TYPE.pack(f.utc_offset, f.dst_offset, abbrev_offsets[f.name]) for f in types
    )
    parts.append(bytes(abbrevs))
    parts.append(source_block)
    return b''.join(parts)


def loads(data: bytes, name: str) -> Tuple[object, List[str]]:
    """
    Deserialize a zone, naming it `name`.

    Returns (zone, sources). Raises ValueError or struct.error on malformed
    data; read() converts these into CorruptTimeZoneFile.
    """
    magic, version, kind, n_transitions, n_types, n_abbrevs, n_sources = (
        _HEADER.unpack_from(data, 0)
    )
    if magic != MAGIC:
        raise ValueError(f"bad magic {magic!r}")
    if version != VERSION:
        raise ValueError(f"unsupported version {version}")

    offset = _HEADER.size
    raw_transitions = [
        _TRANSITION.unpack_from(data, offset + i * _TRANSITION.size)
        for i in range(n_transitions)
    ]
    offset += n_transitions * _TRANSITION.size

    raw_types = [
        _TYPE.unpack_from(data, offset + i * _TYPE.size) for i in range(n_types)
    ]
    offset += n_types * _TYPE.size

    abbrevs = data[offset:offset + n_abbrevs]
    offset += n_abbrevs
    source_block = data[offset:offset + n_sources]
    offset += n_sources
    if len(abbrevs) != n_abbrevs or len(source_block) != n_sources:
        raise ValueError("truncated data")
    if offset != len(data):
        raise ValueError(f"{len(data) - offset} trailing bytes")

    sources = source_block.decode('ascii').split('\x00') if source_block else []

    types = []
    for utc_offset, dst_offset, abbrev_index in raw_types:
        end = abbrevs.find(b'\x00', abbrev_index)
        if abbrev_index >= len(abbrevs) or end < 0:
            raise ValueError(f"abbreviation index {abbrev_index} out of range")
        abbrev = abbrevs[abbrev_index:end].decode('ascii')
        types.append(FixedTimeZone(abbrev, utc_offset, dst_offset))

    if kind == KIND_FIXED:
        if n_transitions != 0 or n_types != 1:
            raise ValueError("fixed zone must have one type and no transitions")
        fixed = types[0]
        return FixedTimeZone(name, fixed.utc_offset, fixed.dst_offset), sources

    if kind != KIND_VARIABLE:
        raise ValueError(f"unknown zone kind {kind}")

    transitions = []
    for seconds, type_index in raw_transitions:
        if type_index >= len(types):
            raise ValueError(f"type index {type_index} out of range")
        transitions.append(Transition(_from_unix(seconds), types[type_index]))
    return VariableTimeZone(name, transitions), sources


def read(path: Union[str, Path], name: str) -> Tuple[object, Class]:
    """
    Decode the compiled zone at path.

    Returns (zone, class) where class reflects the zone's structure and the
    source files it was compiled from.
    """
    path = Path(path)
    data = path.read_bytes()
    try:
        zone, sources = loads(data, name)
    except (ValueError, struct.error) as e:
        raise CorruptTimeZoneFile(path, str(e)) from e

    logger.debug("Decoded %s from %s (sources: %s)", name, path, ', '.join(sources))
    return zone, classify(zone, sources)


def write(path: Union[str, Path], zone, sources: Iterable[str] = ()) -> Path:
    """Write a compiled zone file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dumps(zone, sources))
    return path
