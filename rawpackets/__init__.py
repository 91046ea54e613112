"""
Raw TCP/UDP header construction and parsing for IPv4 raw sockets.
"""

from rawpackets.checksum import checksum, checksum_ipv4, ipv4_addr_to_bytes, pseudo_checksum
from rawpackets.config import CodecConfig, ConfigLoader, get_config, setup_logging
from rawpackets.errors import (
    ChecksumInvalidKind,
    DataOffsetInvalid,
    DataOffsetTooSmall,
    OptionDataInvalid,
    OptionDataTooLong,
    OptionsOverflow,
    PacketError,
    UDPPayloadTooLarge,
)
from rawpackets.protocols.tcp import OptionKind, TCPHeader, TCPOption
from rawpackets.protocols.udp import UDPHeader

__version__ = '1.0.0'
