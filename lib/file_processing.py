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
    file_processing.py
    BYU Configurable Computing Lab (CCL): FABIT project, 2022

    Supplementary python file for processing the fabric bitstream database
    files given to FABIT.

    Fabric bitstream files are JSON files of the form:
        {
            "protocol": "memory_bank",
            "num_regions": 1,
            "bits": [
                {"name": "mem_0", "value": 1, "bl": "01", "wl": "10", "region": 0},
                ...
            ]
        }
    "protocol", "num_regions", "name" and "region" are optional. Frame-based
    bits give their address with an "address" field instead of "bl"/"wl".
'''

import json

from lib.fabric_bitstream import ConfigBit, FabricBitstream, address_to_str

####################################
#   Parsing Fabric Bitstream Files  #
####################################

def parse_config_bit(bit_json:dict, index:int) -> ConfigBit:
    '''
        Converts one bit entry of a fabric bitstream file to a configuration bit
            Arguments: Dict of the bit entry and int of its position in the file
            Returns: ConfigBit of the entry
    '''

    if 'value' not in bit_json:
        raise ValueError(f'Bit {index} of the fabric bitstream has no value')

    value = bit_json['value']
    # Values may be given as 0|1, true|false or "0"|"1"
    if isinstance(value, str):
        if value not in ('0', '1'):
            raise ValueError(f'Bit {index} of the fabric bitstream has an invalid value "{value}"')
        value = value == '1'
    elif not isinstance(value, int) or value not in (0, 1):
        raise ValueError(f'Bit {index} of the fabric bitstream has an invalid value {value!r}')

    return ConfigBit(value,
                     address=bit_json.get('address'),
                     bl_address=bit_json.get('bl'),
                     wl_address=bit_json.get('wl'),
                     region=bit_json.get('region', 0),
                     name=bit_json.get('name', ''))

def parse_fabric_bitstream(json_file:str):
    '''
        Parses a fabric bitstream database file
            Arguments: String of file path to the .json file
            Returns: FabricBitstream of the bits in the file and string of the protocol
                     named in the file (None if the file names none)
    '''

    # Load json file
    with open(json_file) as f:
        bitstream_json = json.load(f)

    # A bare list is accepted as the bit list alone
    if isinstance(bitstream_json, list):
        bitstream_json = {'bits' : bitstream_json}

    bits = [parse_config_bit(bit, index) for index, bit in enumerate(bitstream_json.get('bits', []))]
    fabric_bitstream = FabricBitstream(bits, bitstream_json.get('num_regions'))

    return fabric_bitstream, bitstream_json.get('protocol')

def fabric_bitstream_to_json(fabric_bitstream, protocol:str = None) -> dict:
    '''
        Converts a fabric bitstream to the JSON layout read by parse_fabric_bitstream
            Arguments: The FabricBitstream and optional string of the protocol name
            Returns: Dict ready to be dumped as JSON
    '''

    bits_json = []
    for bit in fabric_bitstream.bits():
        bit_json = {}
        if bit.name:
            bit_json['name'] = bit.name
        bit_json['value'] = int(bit.value)
        if bit.address is not None:
            bit_json['address'] = address_to_str(bit.address)
        if bit.bl_address is not None:
            bit_json['bl'] = address_to_str(bit.bl_address)
            bit_json['wl'] = address_to_str(bit.wl_address)
        bit_json['region'] = bit.region
        bits_json.append(bit_json)

    bitstream_json = {}
    if protocol is not None:
        bitstream_json['protocol'] = str(protocol)
    bitstream_json['num_regions'] = fabric_bitstream.num_regions()
    bitstream_json['bits'] = bits_json

    return bitstream_json
