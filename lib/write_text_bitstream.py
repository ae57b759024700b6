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
    write_text_bitstream.py
    BYU Configurable Computing Lab (CCL): FABIT project, 2022

    Writes a fabric bitstream to a plain text file. The layout depends on the
    configuration protocol of the fabric:
        - Standalone: pure 0|1 bitstream on a single line
        - Scan chain: one line per clock cycle, one bit per region on each line
        - Memory bank: <BL address> <WL address> <din bits>
        - Frame-based: <address> <din bits>

    The text file is the final bitstream loaded into the fabric, so nothing
    but the bitstream content may be written to it (no comments or headers).
'''

import io
import time
from tqdm import tqdm

from lib.config_protocol import ProtocolKind
from lib.errors import UnsupportedProtocol, InvalidSink, EmptyDestinationName
from lib.fabric_bitstream import address_to_str
from lib.bitstream_utils import (build_memory_bank_fabric_bitstream_by_address,
                                 build_frame_based_fabric_bitstream_by_address,
                                 build_config_chain_fabric_bitstream_by_region,
                                 transpose_regional_bitstreams)

def din_to_str(din_values) -> str:
    '''
        Converts a sequence of din values to a 0|1 string
    '''

    return ''.join('1' if din else '0' for din in din_values)

def check_sink(sink):
    '''
        Makes sure the output stream can be written to before any bit is written
            Arguments: The output stream
    '''

    if sink is None or getattr(sink, 'closed', False):
        raise InvalidSink('Output stream is not open')

    writable = getattr(sink, 'writable', None)
    if callable(writable) and not writable():
        raise InvalidSink(f'Output stream {getattr(sink, "name", sink)!r} is not writable')

    if not callable(getattr(sink, 'write', None)):
        raise InvalidSink(f'{sink!r} is not a writable stream')

class ByteSink:
    '''
        Wraps a binary output stream so the bitstream text is written to it as ASCII bytes
    '''

    def __init__(self, sink):
        self.sink = sink

    def write(self, text:str):
        return self.sink.write(text.encode('ascii'))

def is_binary_sink(sink) -> bool:
    '''
        Checks whether the output stream takes bytes instead of text
    '''

    if isinstance(sink, (io.RawIOBase, io.BufferedIOBase)):
        return True
    return 'b' in str(getattr(sink, 'mode', ''))

####################################################
#        Formatting a Single Configuration Bit     #
####################################################

def format_config_bit(bit, protocol_kind) -> str:
    '''
        Renders one configuration bit in the format of the configuration protocol
            Arguments: The ConfigBit and the ProtocolKind of the fabric
            Returns: String of the rendered bit
    '''

    value = '1' if bit.value else '0'

    if protocol_kind in (ProtocolKind.STANDALONE, ProtocolKind.SCAN_CHAIN):
        return value
    if protocol_kind == ProtocolKind.MEMORY_BANK:
        bl_addr, wl_addr = bit.bank_key()
        return f'{address_to_str(bl_addr)} {address_to_str(wl_addr)} {value}\n'
    if protocol_kind == ProtocolKind.FRAME_BASED:
        return f'{address_to_str(bit.frame_key())} {value}\n'

    raise UnsupportedProtocol(protocol_kind)

####################################################
#          Protocol-Specific Write Strategies      #
####################################################

def write_flatten_fabric_bitstream(sink, bits, protocol_kind):
    '''
        Writes every bit in load order with no grouping
            Arguments: The output stream, iterable of ConfigBits, and the ProtocolKind
    '''

    for bit in bits:
        sink.write(format_config_bit(bit, protocol_kind))

def write_config_chain_fabric_bitstream(sink, bits, num_regions:int):
    '''
        Writes the bitstream of a fabric with one configuration chain per region. Each
        line is one clock cycle and holds the next bit of every region still shifting.
            Arguments: The output stream, iterable of ConfigBits, and int of the number of regions
    '''

    regional_bitstreams = build_config_chain_fabric_bitstream_by_region(
        bits, num_regions, lambda bit: format_config_bit(bit, ProtocolKind.SCAN_CHAIN))

    for row in transpose_regional_bitstreams(regional_bitstreams):
        sink.write(f'{row}\n')

def write_memory_bank_fabric_bitstream(sink, bits):
    '''
        Writes one line per BL/WL address: <BL address> <WL address> <din bits>
            Arguments: The output stream and iterable of ConfigBits
    '''

    fabric_bits_by_addr = build_memory_bank_fabric_bitstream_by_address(bits)

    for (bl_addr, wl_addr), din_values in fabric_bits_by_addr.items():
        sink.write(f'{address_to_str(bl_addr)} {address_to_str(wl_addr)} {din_to_str(din_values)}\n')

def write_frame_based_fabric_bitstream(sink, bits):
    '''
        Writes one line per frame address: <address> <din bits>
            Arguments: The output stream and iterable of ConfigBits
    '''

    fabric_bits_by_addr = build_frame_based_fabric_bitstream_by_address(bits)

    for addr, din_values in fabric_bits_by_addr.items():
        sink.write(f'{address_to_str(addr)} {din_to_str(din_values)}\n')

####################################################
#                 Main Write Functions             #
####################################################

def write_fabric_bitstream(sink, fabric_bitstream, config_protocol, verbose:bool = False) -> int:
    '''
        Writes the fabric bitstream to an already opened text or binary output stream.
        The stream is neither opened nor closed here.
            Arguments: The output stream, the FabricBitstream, the ConfigProtocol of the
                       fabric, and a bool to show a progress bar over the bits
            Returns: Int of the number of configuration bits written
    '''

    check_sink(sink)
    if is_binary_sink(sink):
        sink = ByteSink(sink)

    protocol_kind = config_protocol.type()
    if not isinstance(protocol_kind, ProtocolKind):
        raise UnsupportedProtocol(protocol_kind)

    bits = tqdm(fabric_bitstream.bits(), desc='Writing Configuration Bits',
                disable=not verbose, leave=False)

    if protocol_kind == ProtocolKind.STANDALONE:
        write_flatten_fabric_bitstream(sink, bits, protocol_kind)
    elif protocol_kind == ProtocolKind.SCAN_CHAIN:
        write_config_chain_fabric_bitstream(sink, bits, fabric_bitstream.num_regions())
    elif protocol_kind == ProtocolKind.MEMORY_BANK:
        write_memory_bank_fabric_bitstream(sink, bits)
    elif protocol_kind == ProtocolKind.FRAME_BASED:
        write_frame_based_fabric_bitstream(sink, bits)
    else:
        raise UnsupportedProtocol(protocol_kind)

    # End the bitstream with an empty line
    sink.write('\n')

    return fabric_bitstream.num_bits()

def write_fabric_bitstream_to_text_file(fabric_bitstream, config_protocol, fname:str, verbose:bool = False) -> int:
    '''
        Writes the fabric bitstream to a plain text file, replacing any existing file
            Arguments: The FabricBitstream, the ConfigProtocol of the fabric, string of the
                       output file path, and a bool to print additional information
            Returns: Int of the number of configuration bits written
    '''

    # Ensure that we have a valid file name
    if not fname:
        raise EmptyDestinationName()

    t_start = time.perf_counter()
    print(f"Write {fabric_bitstream.num_bits()} fabric bitstream into plain text file '{fname}'...")

    with open(fname, 'w') as out_f:
        num_bits = write_fabric_bitstream(out_f, fabric_bitstream, config_protocol, verbose)

    if verbose:
        print(f'Outputted {num_bits} configuration bits to plain text file: {fname}')
    print(f'Finished writing bitstream in {round(time.perf_counter() - t_start, 2)} seconds')

    return num_bits
