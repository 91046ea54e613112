from rawpackets.protocols.udp.udp_packet import MAX_PAYLOAD, UDPHeader
