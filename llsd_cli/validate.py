# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import sys
from argparse import ArgumentParser, Namespace


def create_parser() -> ArgumentParser:
    from llsd_cli.util import create_parser, format_choices
    parser = create_parser()
    parser.add_argument('input', help='Path to the document, use - to read from stdin')
    parser.add_argument('--from', dest='from_format', choices=format_choices(),
                        help='Input format, detected from the document when omitted')
    return parser


def execute(args: Namespace) -> int:
    from llsd.api import try_parse
    from llsd_cli.util import read_input

    result = try_parse(read_input(args.input), args.from_format)
    if result.is_err():
        print(f'invalid: {result.unwrap_err()}', file=sys.stderr)
        return 1
    print('valid')
    return 0


def main() -> int:
    parser = create_parser()
    args = parser.parse_args()
    return execute(args)
