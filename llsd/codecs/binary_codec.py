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

r"""
Binary LLSD: every value is a one byte tag followed by a fixed or length-prefixed payload, containers are delimited by
an opening and a closing tag.

>>> encode_binary(42).hex()
'690000002a'
>>> encode_binary({'a': [True, None]})
b'{k\x00\x00\x00\x01a[1!]}'
>>> decode_binary(b'<?llsd/binary?>\n{k\x00\x00\x00\x01a[1!]}')
{'a': [True, None]}
>>> decode_binary(b'i\x00\x00')
Traceback (most recent call last):
...
llsd.exception.UnexpectedEndOfInputError: not enough bytes to read (at offset 1)
"""

from enum import IntEnum
from functools import partial
from typing import Any, Optional
from uuid import UUID

from structlog import get_logger
from typing_extensions import assert_never

from llsd.codecs.common import check_depth
from llsd.conf.get_settings import get_global_settings
from llsd.conf.settings import LLSDSettings
from llsd.exception import (
    EncodeError,
    InvalidTimestampFormatError,
    MalformedInputError,
    UnexpectedEndOfInputError,
    UnknownTagError,
)
from llsd.serialization import (
    BadDataError,
    Deserializer,
    InvalidTagError,
    OutOfDataError,
    Serializer,
    TooLongError,
)
from llsd.serialization.compound_encoding.mapping import decode_mapping, encode_mapping
from llsd.serialization.compound_encoding.sequence import decode_sequence, encode_sequence
from llsd.serialization.encoding.bytes import decode_bytes, encode_bytes
from llsd.serialization.encoding.int import decode_int, encode_int
from llsd.serialization.encoding.real import decode_real, encode_real
from llsd.serialization.encoding.timestamp import decode_timestamp, encode_timestamp
from llsd.serialization.encoding.utf8 import decode_utf8, encode_utf8
from llsd.serialization.encoding.uuid import decode_uuid, encode_uuid
from llsd.serialization.types import Buffer
from llsd.types import Uri, Value, ValueKind, check_integer, check_key, kind_of, to_utc

logger = get_logger()

BINARY_HEADER = b'<?llsd/binary?>'
_NEWLINE = ord('\n')
_WHITESPACE = frozenset(b' \t\r\n')

INTEGER_SIZE = 4


class BinaryTag(IntEnum):
    UNDEFINED = ord('!')
    TRUE = ord('1')
    FALSE = ord('0')
    INTEGER = ord('i')
    REAL = ord('r')
    UUID = ord('u')
    DATE = ord('d')
    STRING = ord('s')
    URI = ord('l')
    BINARY = ord('b')
    ARRAY_BEGIN = ord('[')
    ARRAY_END = ord(']')
    MAP_BEGIN = ord('{')
    MAP_KEY = ord('k')
    MAP_END = ord('}')


class _BinaryDecoder:
    def __init__(self, settings: LLSDSettings) -> None:
        self.max_depth = settings.MAX_NESTING_DEPTH
        self.max_length = settings.MAX_BINARY_LENGTH

    def decode(self, data: Buffer) -> Value:
        deserializer = Deserializer.build_bytes_deserializer(data)
        try:
            self._skip_header(deserializer)
            value = self._decode_value(deserializer, depth=0)
        except OutOfDataError as e:
            raise UnexpectedEndOfInputError(str(e), offset=deserializer.cur_pos()) from e
        except InvalidTagError as e:
            # the offending tag was already consumed
            raise UnknownTagError(str(e), offset=deserializer.cur_pos() - 1) from e
        except TooLongError as e:
            raise MalformedInputError(str(e), offset=deserializer.cur_pos()) from e
        except BadDataError as e:
            raise MalformedInputError(str(e), offset=deserializer.cur_pos()) from e
        if not deserializer.is_empty():
            raise MalformedInputError('trailing data after the root value', offset=deserializer.cur_pos())
        deserializer.finalize()
        return value

    def _skip_header(self, deserializer: Deserializer) -> None:
        while not deserializer.is_empty() and deserializer.peek_byte() in _WHITESPACE:
            deserializer.read_byte()
        if deserializer.peek_bytes(len(BINARY_HEADER), exact=False) == BINARY_HEADER:
            deserializer.read_bytes(len(BINARY_HEADER))
            if not deserializer.is_empty() and deserializer.peek_byte() == _NEWLINE:
                deserializer.read_byte()

    def _decode_value(self, deserializer: Deserializer, depth: int) -> Value:
        tag = deserializer.read_byte()
        match tag:
            case BinaryTag.UNDEFINED:
                return None
            case BinaryTag.TRUE:
                return True
            case BinaryTag.FALSE:
                return False
            case BinaryTag.INTEGER:
                return decode_int(deserializer, length=INTEGER_SIZE, signed=True)
            case BinaryTag.REAL:
                return decode_real(deserializer)
            case BinaryTag.UUID:
                return decode_uuid(deserializer)
            case BinaryTag.DATE:
                offset = deserializer.cur_pos()
                try:
                    return decode_timestamp(deserializer)
                except BadDataError as e:
                    raise InvalidTimestampFormatError(str(e), offset=offset) from e
            case BinaryTag.STRING:
                return decode_utf8(deserializer, max_length=self.max_length)
            case BinaryTag.URI:
                return Uri(decode_utf8(deserializer, max_length=self.max_length))
            case BinaryTag.BINARY:
                return decode_bytes(deserializer, max_length=self.max_length)
            case BinaryTag.ARRAY_BEGIN:
                check_depth(depth + 1, self.max_depth, offset=deserializer.cur_pos() - 1)
                return decode_sequence(
                    deserializer,
                    partial(self._decode_value, depth=depth + 1),
                    list,
                    end=BinaryTag.ARRAY_END,
                )
            case BinaryTag.MAP_BEGIN:
                check_depth(depth + 1, self.max_depth, offset=deserializer.cur_pos() - 1)
                return decode_mapping(
                    deserializer,
                    partial(decode_utf8, max_length=self.max_length),
                    partial(self._decode_value, depth=depth + 1),
                    dict,
                    key_marker=BinaryTag.MAP_KEY,
                    end=BinaryTag.MAP_END,
                )
            case _:
                raise InvalidTagError(tag)


class _BinaryEncoder:
    def __init__(self, settings: LLSDSettings) -> None:
        self.max_depth = settings.MAX_NESTING_DEPTH

    def encode(self, value: Any, *, emit_header: bool) -> bytes:
        serializer = Serializer.build_bytes_serializer()
        if emit_header:
            serializer.write_bytes(BINARY_HEADER + b'\n')
        try:
            self._encode_value(serializer, value, depth=0)
        except BadDataError as e:
            raise EncodeError(str(e)) from e
        return bytes(serializer.finalize())

    def _encode_key(self, serializer: Serializer, key: Any) -> None:
        encode_utf8(serializer, check_key(key))

    def _encode_value(self, serializer: Serializer, value: Any, depth: int) -> None:
        kind = kind_of(value)
        match kind:
            case ValueKind.UNDEFINED:
                serializer.write_byte(BinaryTag.UNDEFINED)
            case ValueKind.BOOLEAN:
                serializer.write_byte(BinaryTag.TRUE if value else BinaryTag.FALSE)
            case ValueKind.INTEGER:
                serializer.write_byte(BinaryTag.INTEGER)
                encode_int(serializer, check_integer(value), length=INTEGER_SIZE, signed=True)
            case ValueKind.REAL:
                serializer.write_byte(BinaryTag.REAL)
                encode_real(serializer, value)
            case ValueKind.TEXT:
                serializer.write_byte(BinaryTag.STRING)
                encode_utf8(serializer, value)
            case ValueKind.IDENTIFIER:
                assert isinstance(value, UUID)
                serializer.write_byte(BinaryTag.UUID)
                encode_uuid(serializer, value)
            case ValueKind.TIMESTAMP:
                serializer.write_byte(BinaryTag.DATE)
                encode_timestamp(serializer, to_utc(value))
            case ValueKind.RESOURCE:
                serializer.write_byte(BinaryTag.URI)
                encode_utf8(serializer, str(value))
            case ValueKind.OPAQUE:
                serializer.write_byte(BinaryTag.BINARY)
                encode_bytes(serializer, bytes(value))
            case ValueKind.SEQUENCE:
                check_depth(depth + 1, self.max_depth)
                encode_sequence(
                    serializer,
                    value,
                    partial(self._encode_value, depth=depth + 1),
                    begin=BinaryTag.ARRAY_BEGIN,
                    end=BinaryTag.ARRAY_END,
                )
            case ValueKind.DICTIONARY:
                check_depth(depth + 1, self.max_depth)
                encode_mapping(
                    serializer,
                    value,
                    self._encode_key,
                    partial(self._encode_value, depth=depth + 1),
                    begin=BinaryTag.MAP_BEGIN,
                    key_marker=BinaryTag.MAP_KEY,
                    end=BinaryTag.MAP_END,
                )
            case _:
                assert_never(kind)


def decode_binary(data: Buffer, *, settings: Optional[LLSDSettings] = None) -> Value:
    """Decode a binary LLSD document, the `<?llsd/binary?>` header is optional."""
    settings = settings or get_global_settings()
    log = logger.new(format='binary', size=len(data))
    value = _BinaryDecoder(settings).decode(data)
    log.debug('document decoded')
    return value


def encode_binary(value: Any, *, emit_header: Optional[bool] = None, settings: Optional[LLSDSettings] = None) -> bytes:
    """Encode a value as binary LLSD, with the `<?llsd/binary?>` header line first when `emit_header` is true."""
    settings = settings or get_global_settings()
    if emit_header is None:
        emit_header = settings.BINARY_EMIT_HEADER
    data = _BinaryEncoder(settings).encode(value, emit_header=emit_header)
    logger.debug('document encoded', format='binary', size=len(data))
    return data
