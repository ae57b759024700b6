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
    conftest.py
    BYU Configurable Computing Lab (CCL): FABIT project, 2022

    Simple pytest configuration script for running unit tests on FABIT
'''

import pathlib
import pytest

from lib.fabric_bitstream import ConfigBit, FabricBitstream

def pytest_addoption(parser):
    parser.addoption('--keep_files', action='store_true', default=False,
                     help='Flag to not delete testing files when tests finish')

@pytest.fixture
def keep_files(request):
    return request.config.getoption('--keep_files')

@pytest.fixture
def out_dir(tmp_path, keep_files):
    '''
        Directory for files written by a test. Written to ./test_output instead of a
        temporary directory when --keep_files is given
    '''

    if keep_files:
        kept_dir = pathlib.Path.cwd() / 'test_output'
        kept_dir.mkdir(exist_ok=True)
        return kept_dir
    return tmp_path

@pytest.fixture
def frame_bitstream():
    # Two bits share address 00
    return FabricBitstream([ConfigBit(1, address='00'),
                            ConfigBit(0, address='01'),
                            ConfigBit(1, address='00')])

@pytest.fixture
def memory_bank_bitstream():
    return FabricBitstream([ConfigBit(0, bl_address='1', wl_address='0')])

@pytest.fixture
def scan_chain_bitstream():
    # Region 0 holds 1,0,1 and region 1 holds 0,1
    return FabricBitstream([ConfigBit(1, region=0),
                            ConfigBit(0, region=1),
                            ConfigBit(0, region=0),
                            ConfigBit(1, region=1),
                            ConfigBit(1, region=0)], num_regions=2)

@pytest.fixture
def standalone_bitstream():
    return FabricBitstream([ConfigBit(value) for value in (1, 0, 0, 1)])
