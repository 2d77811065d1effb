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

"""
LLSD: one structured value model and four interchangeable encodings of it (XML, notation, binary and JSON).
"""

from llsd.api import parse, serialize, try_parse
from llsd.codecs.binary_codec import decode_binary, encode_binary
from llsd.codecs.json_codec import decode_json, encode_json
from llsd.codecs.notation_codec import decode_notation, encode_notation
from llsd.codecs.xml_codec import decode_xml, encode_xml
from llsd.detector import detect_format
from llsd.exception import (
    CodecError,
    DecodeError,
    EncodeError,
    IntegerOutOfRangeError,
    InvalidBase64Error,
    InvalidEscapeError,
    InvalidIdentifierFormatError,
    InvalidTimestampFormatError,
    LLSDError,
    MalformedInputError,
    NestingTooDeepError,
    UnexpectedEndOfInputError,
    UnknownSigilError,
    UnknownTagError,
    UnsupportedTypeError,
)
from llsd.format import LLSDFormat
from llsd.types import Uri, Value, ValueKind, kind_of, llsd_equal
from llsd.version import __version__

__all__ = [
    '__version__',
    'CodecError',
    'DecodeError',
    'EncodeError',
    'IntegerOutOfRangeError',
    'InvalidBase64Error',
    'InvalidEscapeError',
    'InvalidIdentifierFormatError',
    'InvalidTimestampFormatError',
    'LLSDError',
    'LLSDFormat',
    'MalformedInputError',
    'NestingTooDeepError',
    'UnexpectedEndOfInputError',
    'UnknownSigilError',
    'UnknownTagError',
    'UnsupportedTypeError',
    'Uri',
    'Value',
    'ValueKind',
    'decode_binary',
    'decode_json',
    'decode_notation',
    'decode_xml',
    'detect_format',
    'encode_binary',
    'encode_json',
    'encode_notation',
    'encode_xml',
    'kind_of',
    'llsd_equal',
    'parse',
    'serialize',
    'try_parse',
]
