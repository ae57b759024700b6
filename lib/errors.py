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
    errors.py
    BYU Configurable Computing Lab (CCL): FABIT project, 2022

    Failures raised while writing a fabric bitstream to a text file.
'''

class BitstreamWriteError(Exception):
    '''
        Base class of every failure that aborts writing a fabric bitstream
    '''

class UnsupportedProtocol(BitstreamWriteError):
    '''
        The configuration protocol is not standalone, scan-chain, memory-bank or frame-based
    '''

    def __init__(self, protocol):
        self.protocol = protocol
        super().__init__(f'Invalid configuration protocol type: {protocol!r}')

class InvalidSink(BitstreamWriteError):
    '''
        The output stream is closed or cannot be written to
    '''

class EmptyDestinationName(BitstreamWriteError):
    '''
        No file name was given for the output bitstream
    '''

    def __init__(self):
        super().__init__('Received empty file name to output bitstream! Please specify a valid file name.')
