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
    gen_sample_bitstream.py
    BYU Configurable Computing Lab (CCL): FABIT project, 2022

    Generates a random fabric bitstream database which can be ran through FABIT.

    Arguments:
        - configuration protocol of the sample fabric
        - number of configuration bits to generate

    Optional flags:
        - num_regions [-r]: Number of configuration regions. Default is 1
        - addr_width [-aw]: Number of symbols in each address code. Default is 4
        - data_width [-dw]: Number of bits sharing each address. Default is 1
        - out_file [-of]: Path of output file. Default is sample_<protocol>_bitstream.json

    Returns:
        - output file (.json) of the generated fabric bitstream
'''

import sys
import json
import random

# Add the parent directory of this file (fabit root) to the interpreter's path
sys.path.append(f'{"/".join(__file__.split("/")[:-1])}/..')

from lib.config_protocol import ProtocolKind, parse_protocol_kind
from lib.fabric_bitstream import ConfigBit, FabricBitstream
from lib.file_processing import fabric_bitstream_to_json

def rand_address(addr_width:int) -> str:
    '''
        Generates a random address code
            Arguments: Int of the number of symbols in the address
            Returns: String of the address code
    '''

    return ''.join(random.choice('01') for _ in range(addr_width))

def gen_sample_bits(protocol_kind:ProtocolKind, num_bits:int, num_regions:int = 1,
                    addr_width:int = 4, data_width:int = 1) -> list:
    '''
        Generates a list of random configuration bits for the given protocol. Every
        data_width consecutive bits share one address, like the bits of a wide data
        port written through one address word.
            Arguments: ProtocolKind of the fabric, int of the number of bits, and ints of the
                       number of regions, address width and data width
            Returns: List of ConfigBits
    '''

    bits = []
    address = bl_address = wl_address = None

    for index in range(num_bits):
        # Pick a new address at the start of each data word
        if index % data_width == 0:
            if protocol_kind == ProtocolKind.FRAME_BASED:
                address = rand_address(addr_width)
            elif protocol_kind == ProtocolKind.MEMORY_BANK:
                bl_address = rand_address(addr_width)
                wl_address = rand_address(addr_width)

        region = random.randrange(num_regions) if protocol_kind == ProtocolKind.SCAN_CHAIN else 0

        bits.append(ConfigBit(random.choice((True, False)),
                              address=address,
                              bl_address=bl_address,
                              wl_address=wl_address,
                              region=region,
                              name=f'mem_{index}'))

    return bits

def write_sample_bitstream(protocol_kind:ProtocolKind, bits:list, num_regions:int, out_file:str):
    '''
        Writes the sample bits to a fabric bitstream database file
            Arguments: ProtocolKind of the fabric, list of ConfigBits, int of the number of
                       regions, and string of the output file path
    '''

    # Only scan chains use more than one region
    if protocol_kind != ProtocolKind.SCAN_CHAIN:
        num_regions = 1

    bitstream_json = fabric_bitstream_to_json(FabricBitstream(bits, num_regions), protocol_kind)

    with open(out_file, 'w') as bits_f:
        bits_f.write(json.dumps(bitstream_json, indent=4))

##################################################
#                 Main Function                  #
##################################################

def main(args):
    '''
        Main function: Creates a random fabric bitstream database for the given protocol
    '''

    protocol_kind = parse_protocol_kind(args.protocol)

    if args.data_width < 1:
        print(f'Data width must be at least 1, using 1 instead of {args.data_width}')
        args.data_width = 1

    if args.num_regions < 1:
        print(f'Number of regions must be at least 1, using 1 instead of {args.num_regions}')
        args.num_regions = 1

    bits = gen_sample_bits(protocol_kind, args.num_bits, args.num_regions, args.addr_width, args.data_width)

    out_file = args.out_file or f'sample_{protocol_kind}_bitstream.json'
    write_sample_bitstream(protocol_kind, bits, args.num_regions, out_file)

    print(f'Generated {len(bits)} configuration bits in {out_file}')


if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description='Generates a random fabric bitstream database '
                                    + 'for the given configuration protocol')
    parser.add_argument('protocol', help='Configuration protocol of the sample fabric (standalone, '
                        + 'scan_chain, memory_bank or frame_based)')
    parser.add_argument('num_bits', type=int, help='The number of configuration bits to generate')
    parser.add_argument('-r', '--num_regions', type=int, default=1,
                        help='The number of configuration regions (scan_chain only)')
    parser.add_argument('-aw', '--addr_width', type=int, default=4,
                        help='The number of symbols in each address code')
    parser.add_argument('-dw', '--data_width', type=int, default=1,
                        help='The number of bits sharing each address')
    parser.add_argument('-of', '--out_file', help='File path where the output is to be written')
    args = parser.parse_args()

    main(args)
