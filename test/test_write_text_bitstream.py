#!/usr/bin/env python3
#
# Copyright (C) 2022 Brigham Young University
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

'''
    test_write_text_bitstream.py
    BYU Configurable Computing Lab (CCL): FABIT project, 2022

    Unit tests for writing fabric bitstreams to plain text.
'''

import io
import pytest

from lib.config_protocol import ConfigProtocol, ProtocolKind
from lib.errors import EmptyDestinationName, InvalidSink, UnsupportedProtocol
from lib.fabric_bitstream import ConfigBit, FabricBitstream
from lib.write_text_bitstream import (format_config_bit, write_fabric_bitstream,
                                      write_fabric_bitstream_to_text_file,
                                      write_flatten_fabric_bitstream)

class BogusProtocol():
    '''
        Protocol selector whose type is not a known configuration protocol
    '''

    def type(self):
        return 'ql_memory_bank'

class ReadOnlySink():
    '''
        Open stream that refuses writes
    '''

    closed = False

    def writable(self):
        return False

    def write(self, text):
        raise AssertionError('Nothing should be written to a read-only stream')

def write_to_str(fabric_bitstream, protocol) -> str:
    '''
        Writes the fabric bitstream to a string buffer and returns the buffer contents
    '''

    sink = io.StringIO()
    write_fabric_bitstream(sink, fabric_bitstream, ConfigProtocol(protocol))
    return sink.getvalue()

##################################################
#                 Test Functions                 #
##################################################

def test_format_config_bit():
    '''
        Tests the rendering of a single bit under each protocol
    '''

    bit = ConfigBit(True, address='0x1', bl_address='10', wl_address='01')

    assert format_config_bit(bit, ProtocolKind.STANDALONE) == '1'
    assert format_config_bit(ConfigBit(False), ProtocolKind.SCAN_CHAIN) == '0'
    assert format_config_bit(bit, ProtocolKind.MEMORY_BANK) == '10 01 1\n'
    assert format_config_bit(bit, ProtocolKind.FRAME_BASED) == '0x1 1\n'

    with pytest.raises(UnsupportedProtocol):
        format_config_bit(bit, 'ql_memory_bank')

def test_flatten_per_bit_lines():
    '''
        Tests that the flat writer emits one line per bit without grouping for address protocols
    '''

    sink = io.StringIO()
    bits = [ConfigBit(1, address='00'), ConfigBit(0, address='00')]
    write_flatten_fabric_bitstream(sink, bits, ProtocolKind.FRAME_BASED)

    assert sink.getvalue() == '00 1\n00 0\n'

def test_frame_based(frame_bitstream):
    '''
        Tests that frame-based bits sharing an address are written on one line
    '''

    assert write_to_str(frame_bitstream, 'frame_based') == '00 11\n01 0\n\n'

def test_memory_bank(memory_bank_bitstream):
    '''
        Tests the memory-bank line layout
    '''

    assert write_to_str(memory_bank_bitstream, 'memory_bank') == '1 0 0\n\n'

def test_memory_bank_shared_address():
    '''
        Tests that memory-bank bits sharing a BL/WL pair are merged in load order
    '''

    fabric_bitstream = FabricBitstream([ConfigBit(1, bl_address='x1', wl_address='10'),
                                        ConfigBit(1, bl_address='01', wl_address='10'),
                                        ConfigBit(0, bl_address='x1', wl_address='10')])

    assert write_to_str(fabric_bitstream, 'memory_bank') == 'x1 10 10\n01 10 1\n\n'

def test_scan_chain(scan_chain_bitstream):
    '''
        Tests that scan-chain bitstreams are written as clock rows across regions
    '''

    assert write_to_str(scan_chain_bitstream, 'scan_chain') == '10\n01\n1\n\n'

def test_scan_chain_row_count():
    '''
        Tests that the number of rows equals the longest region
    '''

    fabric_bitstream = FabricBitstream([ConfigBit(1, region=2)] * 4 + [ConfigBit(0, region=0)],
                                       num_regions=3)
    rows = write_to_str(fabric_bitstream, 'scan_chain').split('\n')

    # 4 data rows, then the empty line and the end of the file
    assert rows == ['01', '1', '1', '1', '', '']

def test_standalone(standalone_bitstream):
    '''
        Tests that standalone bitstreams are a single run of bits
    '''

    output = write_to_str(standalone_bitstream, 'standalone')

    assert output == '1001\n'
    assert output.rstrip('\n') == '1001'
    assert len(output.rstrip('\n')) == standalone_bitstream.num_bits()

def test_empty_bitstream():
    '''
        Tests that an empty bitstream only writes the ending line
    '''

    for protocol in ProtocolKind:
        assert write_to_str(FabricBitstream([]), protocol) == '\n'

def test_rewrite_is_identical(frame_bitstream, scan_chain_bitstream):
    '''
        Tests that writing the same bitstream twice gives the same output
    '''

    for fabric_bitstream in (frame_bitstream, scan_chain_bitstream):
        for protocol in ('standalone', 'scan_chain'):
            assert write_to_str(fabric_bitstream, protocol) == write_to_str(fabric_bitstream, protocol)
    assert write_to_str(frame_bitstream, 'frame_based') == write_to_str(frame_bitstream, 'frame_based')

def test_returns_bit_count(frame_bitstream):
    '''
        Tests that the number of bits processed is reported back
    '''

    sink = io.StringIO()

    assert write_fabric_bitstream(sink, frame_bitstream, ConfigProtocol('frame_based')) == 3

def test_unsupported_protocol_writes_nothing(frame_bitstream):
    '''
        Tests that an unknown protocol fails before anything is written
    '''

    sink = io.StringIO()
    with pytest.raises(UnsupportedProtocol):
        write_fabric_bitstream(sink, frame_bitstream, BogusProtocol())

    assert sink.getvalue() == ''

def test_unsupported_protocol_keeps_earlier_output(frame_bitstream):
    '''
        Tests that output of an earlier successful write is left in place
    '''

    sink = io.StringIO()
    write_fabric_bitstream(sink, frame_bitstream, ConfigProtocol('standalone'))
    with pytest.raises(UnsupportedProtocol):
        write_fabric_bitstream(sink, frame_bitstream, BogusProtocol())

    assert sink.getvalue() == '101\n'

def test_missing_address_fails_before_writing():
    '''
        Tests that a bit without an address for an address protocol fails the whole write
    '''

    sink = io.StringIO()
    fabric_bitstream = FabricBitstream([ConfigBit(1, address='00'), ConfigBit(0)])

    with pytest.raises(ValueError):
        write_fabric_bitstream(sink, fabric_bitstream, ConfigProtocol('frame_based'))
    assert sink.getvalue() == ''

def test_invalid_sink(frame_bitstream):
    '''
        Tests that closed and read-only streams are rejected
    '''

    closed_sink = io.StringIO()
    closed_sink.close()
    with pytest.raises(InvalidSink):
        write_fabric_bitstream(closed_sink, frame_bitstream, ConfigProtocol('frame_based'))

    read_only_sink = ReadOnlySink()
    with pytest.raises(InvalidSink):
        write_fabric_bitstream(read_only_sink, frame_bitstream, ConfigProtocol('frame_based'))

    with pytest.raises(InvalidSink):
        write_fabric_bitstream(None, frame_bitstream, ConfigProtocol('frame_based'))

def test_binary_sink(standalone_bitstream, frame_bitstream, out_dir):
    '''
        Tests that streams opened in binary mode receive the bitstream as ASCII bytes
    '''

    sink = io.BytesIO()
    assert write_fabric_bitstream(sink, standalone_bitstream, ConfigProtocol('standalone')) == 4
    assert sink.getvalue() == b'1001\n'

    outfile = out_dir / 'frame_bitstream.bin'
    with open(outfile, 'wb') as out_f:
        write_fabric_bitstream(out_f, frame_bitstream, ConfigProtocol('frame_based'))
    assert outfile.read_bytes() == b'00 11\n01 0\n\n'

def test_write_to_text_file(frame_bitstream, out_dir, capsys):
    '''
        Tests writing the bitstream to a file, replacing earlier contents
    '''

    outfile = out_dir / 'frame_bitstream.txt'
    outfile.write_text('old contents\n')

    num_bits = write_fabric_bitstream_to_text_file(frame_bitstream, ConfigProtocol('frame_based'),
                                                   str(outfile), verbose=True)

    assert num_bits == 3
    assert outfile.read_text() == '00 11\n01 0\n\n'

    printed = capsys.readouterr().out
    assert f"Write 3 fabric bitstream into plain text file '{outfile}'" in printed
    assert f'Outputted 3 configuration bits to plain text file: {outfile}' in printed

def test_empty_destination_name(frame_bitstream):
    '''
        Tests that an empty output file name is rejected
    '''

    with pytest.raises(EmptyDestinationName):
        write_fabric_bitstream_to_text_file(frame_bitstream, ConfigProtocol('frame_based'), '')
