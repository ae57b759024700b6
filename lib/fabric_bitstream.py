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
    fabric_bitstream.py
    BYU Configurable Computing Lab (CCL): FABIT project, 2022

    Classes used for storing the protocol-agnostic fabric bitstream: every
    configuration bit with its value, its address codes and the configuration
    region it is loaded through.
'''

from enum import Enum

class AddressSymbol(Enum):
    '''
        One position of an address code. Addresses are kept as ordered symbol
        sequences, never as integers, so don't-care positions survive untouched.
    '''

    ZERO = '0'
    ONE = '1'
    DONT_CARE = 'x'

    def __str__(self):
        return self.value

####################################################
#       Functions for Address Code Conversion      #
####################################################

def parse_address(addr_str:str):
    '''
        Converts an address code string into its sequence of address symbols
            Arguments: String of the address code (ex: "01x1")
            Returns: Tuple of AddressSymbols in the same order as the string
    '''

    address = []
    for char in addr_str:
        try:
            address.append(AddressSymbol(char.lower()))
        except ValueError:
            raise ValueError(f'Invalid address symbol "{char}" in address code "{addr_str}"') from None

    return tuple(address)

def address_to_str(address) -> str:
    '''
        Converts a sequence of address symbols back to its address code string
            Arguments: Iterable of AddressSymbols
            Returns: String of the address code
    '''

    return ''.join(str(symbol) for symbol in address)


class ConfigBit:
    '''
        Stores the information on a single configuration bit of the fabric
            Attributes:
                value - bool of the bit's configured value

                address - tuple of AddressSymbols of the bit's frame address, or None

                bl_address - tuple of AddressSymbols of the bit's bit-line address, or None

                wl_address - tuple of AddressSymbols of the bit's word-line address, or None

                region - int of the configuration region the bit belongs to

                name - string naming the bit in the bitstream database (ex: "grid_clb_1__1_.mem_0")
    '''

    __slots__ = ('value', 'address', 'bl_address', 'wl_address', 'region', 'name')

    def __init__(self, value:bool, address=None, bl_address=None, wl_address=None,
                 region:int = 0, name:str = ''):
        self.value = bool(value)
        self.address = _to_address(address)
        self.bl_address = _to_address(bl_address)
        self.wl_address = _to_address(wl_address)
        self.region = int(region)
        self.name = name

        # Bank addresses only make sense as a pair
        if (self.bl_address is None) != (self.wl_address is None):
            raise ValueError(f'Configuration bit {self} must have both a BL and a WL address')

    def frame_key(self):
        '''
            Key of the bit under a frame-based protocol
                Returns: Tuple of AddressSymbols of the frame address
        '''

        if self.address is None:
            raise ValueError(f'Configuration bit {self} has no frame address')
        return self.address

    def bank_key(self):
        '''
            Key of the bit under a memory-bank protocol
                Returns: Tuple of the BL and WL address symbol tuples
        '''

        if self.bl_address is None:
            raise ValueError(f'Configuration bit {self} has no BL/WL address')
        return (self.bl_address, self.wl_address)

    def __eq__(self, other):
        if not isinstance(other, ConfigBit):
            return NotImplemented
        return all(getattr(self, attr) == getattr(other, attr) for attr in self.__slots__)

    def __repr__(self):
        fields = [f'value={int(self.value)}']
        if self.address is not None:
            fields.append(f'address={address_to_str(self.address)}')
        if self.bl_address is not None:
            fields.append(f'bl={address_to_str(self.bl_address)}')
        if self.wl_address is not None:
            fields.append(f'wl={address_to_str(self.wl_address)}')
        fields.append(f'region={self.region}')
        if self.name:
            fields.append(f'name={self.name}')
        return f'ConfigBit({", ".join(fields)})'

def _to_address(address):
    # None stays None, strings are parsed, symbol sequences are frozen
    if address is None:
        return None
    if isinstance(address, str):
        return parse_address(address)
    return tuple(AddressSymbol(symbol.lower() if isinstance(symbol, str) else symbol) for symbol in address)


class FabricBitstream:
    '''
        Read-only, ordered collection of the configuration bits of a fabric
            Attributes:
                _bits - tuple of ConfigBits in the order they are loaded

                _num_regions - int of the number of configuration regions of the fabric
    '''

    def __init__(self, bits, num_regions:int = None):
        self._bits = tuple(bits)

        # Default to just enough regions to hold every bit
        if num_regions is None:
            num_regions = max((bit.region for bit in self._bits), default=0) + 1
        self._num_regions = num_regions

        if self._num_regions < 0:
            raise ValueError(f'Number of regions cannot be negative ({self._num_regions})')

        # Every bit must belong to one of the fabric's regions
        for bit in self._bits:
            if not 0 <= bit.region < self._num_regions:
                raise ValueError(f'{bit} lies outside of the {self._num_regions} configuration regions')

    def bits(self):
        return self._bits

    def num_bits(self) -> int:
        return len(self._bits)

    def num_regions(self) -> int:
        return self._num_regions

    def region_bits(self, region:int):
        '''
            Gets the bits of a single configuration region
                Arguments: Int of the region id
                Returns: List of the region's ConfigBits in load order
        '''

        return [bit for bit in self._bits if bit.region == region]

    def __len__(self):
        return len(self._bits)

    def __iter__(self):
        return iter(self._bits)
