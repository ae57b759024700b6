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
    fabit.py
    BYU Configurable Computing Lab (CCL): FABIT project, 2022

    Writes the fabric bitstream of a design to the plain text file that is
    loaded into the fabric through its configuration protocol.

    Arguments:
        - json file of the fabric bitstream database

    Optional flags:
        - protocol [-p]: Configuration protocol of the fabric (standalone, scan_chain,
                         memory_bank or frame_based). Default is the protocol named in the json file
        - out_file [-of]: Path of output file. Default is <bitstream_json_name>_fabric_bitstream.txt
        - verbose [-v]: Print additional information while writing

    Returns:
        - output file (.txt) of the fabric bitstream
'''

import sys
import time

from lib.config_protocol import ConfigProtocol
from lib.errors import BitstreamWriteError, UnsupportedProtocol
from lib.file_processing import parse_fabric_bitstream
from lib.write_text_bitstream import write_fabric_bitstream_to_text_file

def get_outfile_name(outname_arg:str, bitstream_path:str):
    '''
        Generates a name for the output bitstream file based on the arguments passed
        in by the user and the fabric bitstream file used
            Arguments: Strings of the file paths to the output file and the fabric bitstream file
            Returns: String of the appropriate output file name
    '''

    # Return the user provided name if one was provided
    if outname_arg:
        return outname_arg

    bitstream_name = bitstream_path.strip().split('/')[-1]
    outfile_name = bitstream_name.rsplit('.', 1)[0]

    return f'{outfile_name}_fabric_bitstream.txt'

def select_protocol(protocol_arg:str, file_protocol:str) -> ConfigProtocol:
    '''
        Chooses the configuration protocol, the command line taking priority over the file
            Arguments: Strings of the protocol given on the command line and in the bitstream file
            Returns: ConfigProtocol to write the bitstream with
    '''

    protocol_name = protocol_arg or file_protocol
    if not protocol_name:
        raise UnsupportedProtocol(None)

    return ConfigProtocol(protocol_name)

##################################################
#                 Main Function                  #
##################################################

def main(args):
    '''
        Main function: Writes the fabric bitstream from the given database file to a
        plain text bitstream file
            Returns: Int of the number of configuration bits written
    '''

    t_start = time.perf_counter()

    print('Reading in Fabric Bitstream...')
    fabric_bitstream, file_protocol = parse_fabric_bitstream(args.bitstream)

    config_protocol = select_protocol(args.protocol, file_protocol)
    print(f'Using configuration protocol: {config_protocol.type()}')

    outfile = get_outfile_name(args.out_file, args.bitstream)
    num_bits = write_fabric_bitstream_to_text_file(fabric_bitstream, config_protocol, outfile, args.verbose)

    print(f'Wrote {num_bits} configuration bits in {round(time.perf_counter()-t_start, 2)} seconds')

    return num_bits

def run(args) -> int:
    '''
        Runs the main function, reporting failures as an error message
            Arguments: Parsed command line arguments
            Returns: Int of the exit status (0 on success, 1 on failure)
    '''

    try:
        main(args)
    except (BitstreamWriteError, ValueError, OSError) as e:
        print(f'ERROR: {e}')
        return 1

    return 0

if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description='Writes the fabric bitstream of a design to a plain '
                                     + 'text file loadable through the configuration protocol of the fabric')
    parser.add_argument('bitstream', help='Json file of the fabric bitstream database')
    parser.add_argument('-p', '--protocol', help='Configuration protocol of the fabric (standalone, '
                        + 'scan_chain, memory_bank or frame_based)')
    parser.add_argument('-of', '--out_file', help='File path where the output is to be written')
    parser.add_argument('-v', '--verbose', action='store_true', default=False,
                        help='Flag to print additional information while writing')
    args = parser.parse_args()

    sys.exit(run(args))
