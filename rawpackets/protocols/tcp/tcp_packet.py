#!/usr/bin/env python3
"""
TCP Header Builder
Constructs and parses raw TCP headers with options, padding and checksums
"""

import struct
import socket
import logging
import dataclasses
from dataclasses import dataclass, field
from typing import List, Optional

from rawpackets.checksum import pseudo_checksum
from rawpackets.config import get_config
from rawpackets.errors import DataOffsetInvalid, DataOffsetTooSmall
from rawpackets.protocols.tcp.tcp_options import TCPOption, build_options, parse_options

logger = logging.getLogger(__name__)

TCP_HEADER_FORMAT = '!HHIIHHHH'
TCP_HEADER_LEN = 20

MIN_DATA_OFFSET = 5
MAX_DATA_OFFSET = 15
DEFAULT_WINDOW = 65535

# Control bits of the 16-bit word holding data offset, reserved and flags
NS_BIT = 0x100
CWR_BIT = 0x80
ECE_BIT = 0x40
URG_BIT = 0x20
ACK_BIT = 0x10
PSH_BIT = 0x08
RST_BIT = 0x04
SYN_BIT = 0x02
FIN_BIT = 0x01

FLAG_BITS = (
    ('ns', NS_BIT),
    ('cwr', CWR_BIT),
    ('ece', ECE_BIT),
    ('urg', URG_BIT),
    ('ack', ACK_BIT),
    ('psh', PSH_BIT),
    ('rst', RST_BIT),
    ('syn', SYN_BIT),
    ('fin', FIN_BIT),
)


@dataclass
class TCPHeader:
    """
    TCP header with each control bit as a boolean.

    A data_offset of 0 becomes 5 and a window_size of 0 becomes 65535 when
    the header is built; the header is updated in place so repeated builds
    agree. Leave checksum at 0 to let the kernel fill it in, or use
    build_with_checksum().
    """
    source_port: int = 0
    destination_port: int = 0
    seq_num: int = 0
    ack_num: int = 0
    data_offset: int = 0
    reserved: int = 0
    ns: bool = False
    cwr: bool = False
    ece: bool = False
    urg: bool = False
    ack: bool = False
    psh: bool = False
    rst: bool = False
    syn: bool = False
    fin: bool = False
    window_size: int = 0
    checksum: int = 0
    urgent_pointer: int = 0
    options: List[Optional[TCPOption]] = field(default_factory=list)

    @property
    def header_length(self) -> int:
        """Header length in bytes"""
        return self.data_offset * 4

    def flag_names(self) -> str:
        names = [name.upper() for name, _ in FLAG_BITS if getattr(self, name)]
        return '|'.join(names) if names else 'NONE'

    def _control_word(self) -> int:
        ctrl = (self.data_offset << 12) | ((self.reserved & 0x7) << 9)
        for name, bit in FLAG_BITS:
            if getattr(self, name):
                ctrl |= bit
        return ctrl

    def build(self) -> bytes:
        """Build the TCP header, including options and padding"""
        if self.data_offset == 0:
            self.data_offset = MIN_DATA_OFFSET

        if self.data_offset < MIN_DATA_OFFSET or self.data_offset > MAX_DATA_OFFSET:
            raise DataOffsetInvalid()

        if self.window_size == 0:
            self.window_size = DEFAULT_WINDOW

        header = struct.pack(TCP_HEADER_FORMAT,
            self.source_port,       # Source port
            self.destination_port,  # Destination port
            self.seq_num,           # Sequence number
            self.ack_num,           # Acknowledgment number
            self._control_word(),   # Data offset, reserved, flags
            self.window_size,       # Window size
            self.checksum,          # Checksum
            self.urgent_pointer     # Urgent pointer
        )

        options_bytes = build_options(self.options)

        header_len = TCP_HEADER_LEN + len(options_bytes)
        if self.header_length < header_len:
            raise DataOffsetTooSmall((header_len + 3) // 4)

        # Zero padding up to the declared data offset
        padding_len = self.header_length - header_len
        header += options_bytes + b'\x00' * padding_len

        logger.debug(f"Built TCP header {self.source_port} -> {self.destination_port} "
                     f"[{self.flag_names()}]: {len(header)} bytes, "
                     f"{len(options_bytes)} option bytes, {padding_len} padding")
        if get_config().hexdump:
            logger.debug(f"TCP header: {header.hex()}")

        return header

    def build_with_checksum(self, laddr: str, raddr: str) -> bytes:
        """
        Build the header with its checksum computed over the IPv4 pseudo-header.

        The computed value is stored in self.checksum. Use with_checksum()
        to leave this header untouched.
        """
        data = self.build()
        self.checksum = pseudo_checksum(data, socket.IPPROTO_TCP, laddr, raddr)
        return self.build()

    def with_checksum(self, laddr: str, raddr: str) -> 'TCPHeader':
        """Return a copy of this header carrying the computed checksum"""
        header = dataclasses.replace(self, options=list(self.options))
        header.build_with_checksum(laddr, raddr)
        return header

    @classmethod
    def parse(cls, data: bytes) -> 'TCPHeader':
        """Parse a TCP header (and its options) from bytes"""
        if len(data) < TCP_HEADER_LEN:
            logger.warning(f"TCP header truncated: {len(data)} bytes, zero-filling")

        fixed = bytes(data[:TCP_HEADER_LEN]).ljust(TCP_HEADER_LEN, b'\x00')
        (source_port, destination_port, seq_num, ack_num,
         ctrl, window_size, checksum, urgent_pointer) = struct.unpack(TCP_HEADER_FORMAT, fixed)

        header = cls(
            source_port=source_port,
            destination_port=destination_port,
            seq_num=seq_num,
            ack_num=ack_num,
            data_offset=ctrl >> 12,
            reserved=(ctrl >> 9) & 0x7,
            window_size=window_size,
            checksum=checksum,
            urgent_pointer=urgent_pointer,
        )

        for name, bit in FLAG_BITS:
            setattr(header, name, bool(ctrl & bit))

        header.options = parse_options(data[TCP_HEADER_LEN:header.header_length])
        return header


def syn_header(src_port: int, dst_port: int, seq_num: int, mss: int = 1460) -> TCPHeader:
    """Helper: SYN with MSS, window scale and SACK-permitted options"""
    options = [
        TCPOption.mss(mss),
        TCPOption.window_scale(7),
        TCPOption.sack_permitted(),
    ]
    header = TCPHeader(source_port=src_port, destination_port=dst_port,
                       seq_num=seq_num, syn=True, options=options)
    # 4 + (3 + NOP) + 2 option bytes
    header.data_offset = (TCP_HEADER_LEN + len(build_options(options)) + 3) // 4
    return header


def syn_ack_header(src_port: int, dst_port: int, seq_num: int, ack_num: int) -> TCPHeader:
    """Helper: SYN-ACK"""
    return TCPHeader(source_port=src_port, destination_port=dst_port,
                     seq_num=seq_num, ack_num=ack_num, syn=True, ack=True)


def ack_header(src_port: int, dst_port: int, seq_num: int, ack_num: int) -> TCPHeader:
    """Helper: ACK"""
    return TCPHeader(source_port=src_port, destination_port=dst_port,
                     seq_num=seq_num, ack_num=ack_num, ack=True)


def rst_header(src_port: int, dst_port: int, seq_num: int) -> TCPHeader:
    """Helper: RST"""
    return TCPHeader(source_port=src_port, destination_port=dst_port,
                     seq_num=seq_num, rst=True)


if __name__ == '__main__':
    logging.basicConfig(level=logging.DEBUG)

    syn = syn_header(44273, 80, 1000)
    data = syn.build_with_checksum('192.168.1.1', '192.168.1.2')
    print(f"SYN header: {len(data)} bytes, checksum 0x{syn.checksum:04x}")
    print(f"Parsed back: {TCPHeader.parse(data)}")
