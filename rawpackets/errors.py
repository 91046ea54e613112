#!/usr/bin/env python3
"""
Packet Codec Errors
Typed failures raised while building TCP/UDP headers
"""


class PacketError(Exception):
    """Base class for all codec errors"""


class DataOffsetInvalid(PacketError):
    """DataOffset outside of [5, 15]"""

    def __init__(self):
        super().__init__("DataOffset field must be at least 5 and no more than 15")


class DataOffsetTooSmall(PacketError):
    """DataOffset cannot hold the fixed header plus options"""

    def __init__(self, expected_size: int):
        self.expected_size = expected_size
        super().__init__(
            f"The DataOffset field is too small for the data provided. "
            f"It should be at least {expected_size}")


class OptionsOverflow(PacketError):
    """Encoded options exceed the TCP options region"""

    def __init__(self, max_size: int):
        self.max_size = max_size
        super().__init__(f"TCP Options are too large, must be less than {max_size} total bytes")


class OptionDataInvalid(PacketError):
    """Option length field disagrees with its data"""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Option {index} Length doesn't match length of data")


class OptionDataTooLong(PacketError):
    """Option data does not fit a single-byte length"""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Option {index} Data cannot be larger than 253 bytes")


class UDPPayloadTooLarge(PacketError):
    """UDP payload larger than a datagram can carry"""

    def __init__(self, max_size: int, length: int):
        self.max_size = max_size
        self.length = length
        super().__init__(
            f"UDP Payload must not be larger than {max_size} byte, was {length} bytes")


class ChecksumInvalidKind(PacketError):
    """Unknown protocol name given to checksum_ipv4()"""

    def __init__(self):
        super().__init__("Checksum kind should either be 'tcp' OR 'udp'.")
