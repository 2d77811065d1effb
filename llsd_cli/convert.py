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

from structlog import get_logger

logger = get_logger()


def create_parser() -> ArgumentParser:
    from llsd_cli.util import create_parser, format_choices
    parser = create_parser()
    parser.add_argument('input', help='Path to the document, use - to read from stdin')
    parser.add_argument('--to', dest='to_format', required=True, choices=format_choices(), help='Output format')
    parser.add_argument('--from', dest='from_format', choices=format_choices(),
                        help='Input format, detected from the document when omitted')
    parser.add_argument('--header', action='store_true', help='Write the <?llsd/binary?> header (binary only)')
    parser.add_argument('--indent', type=int, help='Pretty-print with this many spaces (xml and json only)')
    parser.add_argument('--output', help='Write to this file instead of stdout')
    return parser


def execute(args: Namespace) -> int:
    from llsd.api import parse, serialize
    from llsd.exception import CodecError
    from llsd.format import LLSDFormat
    from llsd_cli.util import check_or_exit, read_input, write_output

    to_format = LLSDFormat.from_name(args.to_format)
    check_or_exit(not args.header or to_format is LLSDFormat.BINARY, '--header only applies to binary output')
    check_or_exit(args.indent is None or to_format in (LLSDFormat.XML, LLSDFormat.JSON),
                  '--indent only applies to xml and json output')

    log = logger.new(input=args.input, to_format=to_format.value)
    data = read_input(args.input)
    try:
        value = parse(data, args.from_format)
        result = serialize(value, to_format, emit_header=True if args.header else None, indent=args.indent)
    except CodecError as e:
        print(f'error: {e}', file=sys.stderr)
        return 1

    output = result.encode('utf-8') if isinstance(result, str) else result
    write_output(output, args.output)
    log.debug('document converted', size=len(output))
    return 0


def main() -> int:
    parser = create_parser()
    args = parser.parse_args()
    return execute(args)
