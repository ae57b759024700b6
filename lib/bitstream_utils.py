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
    bitstream_utils.py
    BYU Configurable Computing Lab (CCL): FABIT project, 2022

    Supplementary python file for reorganizing the configuration bits of a
    fabric bitstream into the shape required by each configuration protocol.
        - Memory-bank and frame-based bits are grouped by address
        - Scan-chain bits are split by region and transposed into clock rows
'''

##################################################
#        Grouping Bits for Address Protocols     #
##################################################

def group_bits_by_address(bits, get_key) -> dict:
    '''
        Groups configuration bits that share the same address. Groups are kept in the
        order their address is first seen, and each group keeps its bits in load order.
            Arguments: Iterable of ConfigBits and a function returning the address key of a bit
            Returns: Dict of {address key : [din values]}
    '''

    # Python dicts iterate in insertion order, so the first-seen address order is kept
    bits_by_addr = {}
    for bit in bits:
        key = get_key(bit)
        if key not in bits_by_addr:
            bits_by_addr[key] = []
        bits_by_addr[key].append(bit.value)

    return bits_by_addr

def build_memory_bank_fabric_bitstream_by_address(bits) -> dict:
    '''
        Groups memory-bank configuration bits by their BL/WL address pair
            Arguments: Iterable of ConfigBits
            Returns: Dict of {(BL address, WL address) : [din values]}
    '''

    return group_bits_by_address(bits, lambda bit: bit.bank_key())

def build_frame_based_fabric_bitstream_by_address(bits) -> dict:
    '''
        Groups frame-based configuration bits by their frame address
            Arguments: Iterable of ConfigBits
            Returns: Dict of {frame address : [din values]}
    '''

    return group_bits_by_address(bits, lambda bit: bit.frame_key())

##################################################
#      Regional Bitstreams for Scan Chains       #
##################################################

def build_config_chain_fabric_bitstream_by_region(bits, num_regions:int, format_bit=None) -> list:
    '''
        Splits the configuration bits into one bitstream per configuration region
            Arguments: Iterable of ConfigBits, int of the number of regions, and an optional
                       function rendering a bit to a single character
            Returns: List indexed by region id of each region's bitstream string
    '''

    if format_bit is None:
        format_bit = lambda bit: '1' if bit.value else '0'

    # One character buffer per region, addressed by the region id
    region_chars = [[] for _ in range(num_regions)]
    for bit in bits:
        region_chars[bit.region].append(format_bit(bit))

    return [''.join(chars) for chars in region_chars]

def find_fabric_regional_bitstream_max_size(regional_bitstreams:list) -> int:
    '''
        Finds the length of the longest regional bitstream
            Arguments: List of regional bitstreams
            Returns: Int of the longest length, 0 if there are no regions
    '''

    return max((len(region_bitstream) for region_bitstream in regional_bitstreams), default=0)

def transpose_regional_bitstreams(regional_bitstreams:list):
    '''
        Interleaves the regional bitstreams into clock rows. Row i holds the i-th bit
        of every region in region order. Regions shorter than i+1 bits add nothing to
        the row, so rows narrow instead of being padded.
            Arguments: List of regional bitstreams
            Returns: Generator of row strings
    '''

    max_size = find_fabric_regional_bitstream_max_size(regional_bitstreams)

    for ibit in range(max_size):
        yield ''.join(region_bitstream[ibit] for region_bitstream in regional_bitstreams
                      if ibit < len(region_bitstream))
