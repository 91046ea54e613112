#!/usr/bin/env python3
"""
TCP Options Codec
Encodes/decodes the options region that follows the fixed 20-byte TCP header
"""

import struct
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from rawpackets.errors import OptionDataInvalid, OptionDataTooLong, OptionsOverflow

logger = logging.getLogger(__name__)

MAX_OPTIONS_SIZE = (15 - 5) * 4
MAX_OPTION_DATA = 253


class OptionKind:
    """TCP Option kinds"""
    END_OF_OPTIONS = 0
    NOP = 1
    MSS = 2
    WINDOW_SCALE = 3
    SACK_PERMITTED = 4
    SACK = 5
    TIMESTAMP = 8


@dataclass
class TCPOption:
    """
    A single TCP option.

    length is the full encoded size including the kind and length bytes,
    so it must equal len(data) + 2.

    Kinds 0 (end of options) and 1 (NOP) are encoded like any other kind
    but parse back as padding, so they do not survive a round trip.
    """
    kind: int
    length: int
    data: bytes = b''

    @classmethod
    def mss(cls, mss: int) -> 'TCPOption':
        return cls(OptionKind.MSS, 4, struct.pack('!H', mss))

    @classmethod
    def window_scale(cls, shift: int) -> 'TCPOption':
        return cls(OptionKind.WINDOW_SCALE, 3, struct.pack('!B', shift))

    @classmethod
    def sack_permitted(cls) -> 'TCPOption':
        return cls(OptionKind.SACK_PERMITTED, 2)

    @classmethod
    def timestamp(cls, ts_val: int, ts_ecr: int = 0) -> 'TCPOption':
        return cls(OptionKind.TIMESTAMP, 10, struct.pack('!II', ts_val, ts_ecr))


def build_options(options: Sequence[Optional[TCPOption]]) -> bytes:
    """
    Encode options in order.

    Options whose encoded size is odd are followed by a single NOP byte.
    None entries are skipped; error indexes still count them.

    Raises OptionDataInvalid, OptionDataTooLong or OptionsOverflow.
    """
    options_bytes = b''

    for index, option in enumerate(options):
        if option is None:
            continue

        data = bytes(option.data)

        if len(data) != option.length - 2:
            raise OptionDataInvalid(index)

        if len(data) > MAX_OPTION_DATA:
            raise OptionDataTooLong(index)

        options_bytes += struct.pack('!BB', option.kind, option.length) + data

        if (2 + len(data)) % 2 == 1:
            options_bytes += struct.pack('!B', OptionKind.NOP)

    if len(options_bytes) > MAX_OPTIONS_SIZE:
        raise OptionsOverflow(MAX_OPTIONS_SIZE)

    return options_bytes


def parse_options(data: bytes) -> List[TCPOption]:
    """
    Decode an options region.

    End-of-options stops parsing and NOP bytes are dropped, since both only
    ever appear as padding. Malformed input never raises: a declared length
    below 2 stops parsing and a truncated option keeps whatever data is left.
    """
    options = []
    offset = 0

    while offset < len(data):
        kind = data[offset]

        if kind == OptionKind.END_OF_OPTIONS:
            break

        if kind == OptionKind.NOP:
            offset += 1
            continue

        if offset + 1 >= len(data):
            logger.warning(f"Option kind {kind} at offset {offset} is missing its length byte")
            break

        length = data[offset + 1]
        if length < 2:
            logger.warning(f"Option kind {kind} at offset {offset} has invalid length {length}")
            break

        option_data = data[offset + 2:offset + length]
        if len(option_data) != length - 2:
            logger.warning(f"Option kind {kind} at offset {offset} is truncated")

        options.append(TCPOption(kind, length, bytes(option_data)))
        offset += length

    return options
