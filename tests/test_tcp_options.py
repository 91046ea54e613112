import struct
from unittest import TestCase

from rawpackets.errors import OptionDataInvalid, OptionDataTooLong, OptionsOverflow
from rawpackets.protocols.tcp.tcp_options import (
    MAX_OPTIONS_SIZE,
    OptionKind,
    TCPOption,
    build_options,
    parse_options,
)


class BuildOptionsTests(TestCase):
    def test_empty(self):
        self.assertEqual(build_options([]), b'')

    def test_even_option_has_no_padding(self):
        self.assertEqual(build_options([TCPOption.mss(1460)]), b'\x02\x04\x05\xb4')

    def test_odd_option_is_followed_by_nop(self):
        self.assertEqual(build_options([TCPOption.window_scale(7)]), b'\x03\x03\x07\x01')

    def test_order_is_preserved(self):
        data = build_options([TCPOption.sack_permitted(), TCPOption.mss(536)])
        self.assertEqual(data, b'\x04\x02\x02\x04\x02\x18')

    def test_none_entries_are_skipped(self):
        self.assertEqual(build_options([None, TCPOption.mss(1460), None]), b'\x02\x04\x05\xb4')

    def test_length_mismatch(self):
        with self.assertRaises(OptionDataInvalid) as ctx:
            build_options([TCPOption.mss(1460), TCPOption(OptionKind.WINDOW_SCALE, 4, b'\x07')])
        self.assertEqual(ctx.exception.index, 1)
        self.assertEqual(str(ctx.exception), "Option 1 Length doesn't match length of data")

    def test_length_mismatch_index_counts_skipped_entries(self):
        with self.assertRaises(OptionDataInvalid) as ctx:
            build_options([None, TCPOption(OptionKind.MSS, 3, b'')])
        self.assertEqual(ctx.exception.index, 1)

    def test_length_below_two_is_invalid(self):
        with self.assertRaises(OptionDataInvalid) as ctx:
            build_options([TCPOption(OptionKind.NOP, 1, b'')])
        self.assertEqual(ctx.exception.index, 0)

    def test_data_too_long(self):
        with self.assertRaises(OptionDataTooLong) as ctx:
            build_options([TCPOption(254, 256, b'a' * 254)])
        self.assertEqual(ctx.exception.index, 0)
        self.assertEqual(str(ctx.exception), "Option 0 Data cannot be larger than 253 bytes")

    def test_overflow(self):
        options = [TCPOption.timestamp(i) for i in range(5)]
        with self.assertRaises(OptionsOverflow) as ctx:
            build_options(options)
        self.assertEqual(ctx.exception.max_size, 40)

    def test_overflow_counts_nop_padding(self):
        # 13 x (3 + NOP) = 52 bytes
        with self.assertRaises(OptionsOverflow):
            build_options([TCPOption.window_scale(1)] * 13)

    def test_exactly_full(self):
        options = [TCPOption.timestamp(i) for i in range(4)]
        self.assertEqual(len(build_options(options)), MAX_OPTIONS_SIZE)


class ParseOptionsTests(TestCase):
    def test_linux_syn_options(self):
        data = (b'\x02\x04\x05\xb4'
                b'\x04\x02'
                b'\x08\x0a' + struct.pack('!II', 1, 0) +
                b'\x01'
                b'\x03\x03\x07')
        self.assertEqual(parse_options(data), [
            TCPOption.mss(1460),
            TCPOption.sack_permitted(),
            TCPOption.timestamp(1, 0),
            TCPOption.window_scale(7),
        ])

    def test_encoder_padding_is_dropped(self):
        options = [TCPOption.window_scale(7), TCPOption.mss(1460), TCPOption(30, 5, b'abc')]
        self.assertEqual(parse_options(build_options(options)), options)

    def test_caller_nop_and_eol_kinds_parse_as_padding(self):
        nop_first = [TCPOption(OptionKind.NOP, 2, b''), TCPOption.mss(1460)]
        self.assertEqual(build_options(nop_first), b'\x01\x02\x02\x04\x05\xb4')
        # 01 skipped, 02 02 read as an empty MSS, then a truncated kind 4
        self.assertEqual(parse_options(build_options(nop_first)),
                         [TCPOption(OptionKind.MSS, 2, b''),
                          TCPOption(OptionKind.SACK_PERMITTED, 5, b'\xb4')])

        eol_first = [TCPOption(OptionKind.END_OF_OPTIONS, 2, b''), TCPOption.mss(1460)]
        self.assertEqual(parse_options(build_options(eol_first)), [])

    def test_end_of_options_stops_parsing(self):
        self.assertEqual(parse_options(b'\x02\x04\x05\xb4\x00\x00\x02\x04'), [TCPOption.mss(1460)])

    def test_empty(self):
        self.assertEqual(parse_options(b''), [])

    def test_truncated_option_keeps_remaining_data(self):
        self.assertEqual(parse_options(b'\x08\x0a\x00\x01'), [TCPOption(8, 10, b'\x00\x01')])

    def test_missing_length_byte(self):
        self.assertEqual(parse_options(b'\x02'), [])

    def test_invalid_length_stops_parsing(self):
        self.assertEqual(parse_options(b'\x02\x04\x05\xb4\x05\x01\x02\x04'), [TCPOption.mss(1460)])
