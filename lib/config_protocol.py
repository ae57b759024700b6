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
    config_protocol.py
    BYU Configurable Computing Lab (CCL): FABIT project, 2022

    Configuration protocols through which a fabric bitstream can be loaded.
'''

from enum import Enum

from lib.errors import UnsupportedProtocol

class ProtocolKind(Enum):
    '''
        Configuration protocol types
            STANDALONE - every bit is driven directly, bitstream is a flat 0|1 run
            SCAN_CHAIN - bits are shifted through one chain per configuration region
            MEMORY_BANK - bits are written through BL/WL addressed memory banks
            FRAME_BASED - bits are written through frame addresses
    '''

    STANDALONE = 'standalone'
    SCAN_CHAIN = 'scan_chain'
    MEMORY_BANK = 'memory_bank'
    FRAME_BASED = 'frame_based'

    def __str__(self):
        return self.value

def parse_protocol_kind(name:str) -> ProtocolKind:
    '''
        Finds the protocol type matching the given name
            Arguments: String of the protocol name (ex: "scan_chain" or "Scan-Chain")
            Returns: ProtocolKind of the protocol
    '''

    if isinstance(name, ProtocolKind):
        return name

    normalized = str(name).strip().lower().replace('-', '_')
    try:
        return ProtocolKind(normalized)
    except ValueError:
        raise UnsupportedProtocol(name) from None


class ConfigProtocol:
    '''
        The configuration protocol selected for a fabric
            Attributes:
                _type - ProtocolKind of the protocol
    '''

    def __init__(self, protocol_type):
        self._type = parse_protocol_kind(protocol_type)

    def type(self) -> ProtocolKind:
        return self._type

    def __repr__(self):
        return f'ConfigProtocol({self._type})'
