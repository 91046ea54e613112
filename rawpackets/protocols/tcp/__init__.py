from rawpackets.protocols.tcp.tcp_options import (
    MAX_OPTIONS_SIZE,
    OptionKind,
    TCPOption,
    build_options,
    parse_options,
)
from rawpackets.protocols.tcp.tcp_packet import (
    TCPHeader,
    ack_header,
    rst_header,
    syn_ack_header,
    syn_header,
)
