#!/usr/bin/env python3
"""
UDP Header Builder
Constructs and parses raw UDP headers with payload and checksum
"""

import struct
import socket
import logging
import dataclasses
from dataclasses import dataclass

from rawpackets.checksum import pseudo_checksum
from rawpackets.config import get_config
from rawpackets.errors import UDPPayloadTooLarge

logger = logging.getLogger(__name__)

UDP_HEADER_FORMAT = '!HHHH'
UDP_HEADER_LEN = 8
MAX_PAYLOAD = 65535 - UDP_HEADER_LEN


@dataclass
class UDPHeader:
    """
    UDP header followed by its payload.

    length is written exactly as given; it is not derived from the payload.
    """
    source_port: int = 0
    destination_port: int = 0
    length: int = 0
    checksum: int = 0
    payload: bytes = b''

    def build(self) -> bytes:
        """Build the UDP header and payload"""
        if len(self.payload) > MAX_PAYLOAD:
            raise UDPPayloadTooLarge(MAX_PAYLOAD, len(self.payload))

        data = struct.pack(UDP_HEADER_FORMAT,
            self.source_port,       # Source port
            self.destination_port,  # Destination port
            self.length,            # Length
            self.checksum           # Checksum
        ) + bytes(self.payload)

        logger.debug(f"Built UDP datagram {self.source_port} -> {self.destination_port}: "
                     f"{len(data)} bytes")
        if get_config().hexdump:
            logger.debug(f"UDP datagram: {data.hex()}")

        return data

    def build_with_checksum(self, laddr: str, raddr: str) -> bytes:
        """
        Build the datagram with its checksum computed over the IPv4 pseudo-header.

        The checksum field is zeroed for the computation and the computed
        value is stored in self.checksum.
        """
        self.checksum = 0
        data = self.build()
        self.checksum = pseudo_checksum(data, socket.IPPROTO_UDP, laddr, raddr)
        return self.build()

    def with_checksum(self, laddr: str, raddr: str) -> 'UDPHeader':
        """Return a copy of this header carrying the computed checksum"""
        header = dataclasses.replace(self)
        header.build_with_checksum(laddr, raddr)
        return header

    @classmethod
    def parse(cls, data: bytes) -> 'UDPHeader':
        """Parse a UDP header from bytes; everything past 8 bytes is payload"""
        if len(data) < UDP_HEADER_LEN:
            logger.warning(f"UDP header truncated: {len(data)} bytes, zero-filling")

        fixed = bytes(data[:UDP_HEADER_LEN]).ljust(UDP_HEADER_LEN, b'\x00')
        source_port, destination_port, length, checksum = struct.unpack(UDP_HEADER_FORMAT, fixed)

        return cls(
            source_port=source_port,
            destination_port=destination_port,
            length=length,
            checksum=checksum,
            payload=bytes(data[UDP_HEADER_LEN:]),
        )
