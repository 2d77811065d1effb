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
JSON LLSD: native JSON types map directly, the other kinds travel inside single-key wrapper objects.

    {"d": "2024-01-01T00:00:00Z"}   Timestamp
    {"i": "<uuid>"}                 Identifier
    {"b": "<base64>"}               Opaque
    {"u": "<uri>"}                  Resource

>>> decode_json('{"d":"2024-01-01T00:00:00Z"}')
datetime.datetime(2024, 1, 1, 0, 0, tzinfo=datetime.timezone.utc)
>>> decode_json('[1, 1.0, 4294967296.0, NaN]')
[1, 1.0, 4294967296.0, nan]

Integers must fit in 32 bits, write a real literal to carry anything wider:

>>> try:
...     decode_json('[1, 4294967296]')
... except MalformedInputError as e:
...     print(e)
integer out of range: '4294967296' (at offset 4)
>>> from llsd.types import EPOCH
>>> encode_json({'when': EPOCH, 'blob': b'hi', 'list': [None, True]})
'{"when":{"d":"1970-01-01T00:00:00Z"},"blob":{"b":"aGk="},"list":[null,true]}'

A single-key object whose key is one of the wrapper keys and whose value is a string is always read as a wrapper:

>>> decode_json('{"u":"http://example.com"}')
Uri('http://example.com')
>>> decode_json('{"u":1}')
{'u': 1}
"""

import json as _json
import re
from typing import Any, Callable, Optional, Union
from uuid import UUID

from structlog import get_logger
from typing_extensions import assert_never

from llsd.codecs.common import (
    check_depth,
    decode_base64,
    encode_base64,
    format_date,
    format_uuid,
    parse_date,
    parse_uuid,
)
from llsd.conf.get_settings import get_global_settings
from llsd.conf.settings import LLSDSettings
from llsd.exception import (
    InvalidBase64Error,
    InvalidIdentifierFormatError,
    InvalidTimestampFormatError,
    MalformedInputError,
    UnexpectedEndOfInputError,
)
from llsd.types import INT32_MAX, INT32_MIN, Uri, Value, ValueKind, check_integer, check_key, kind_of
from llsd.utils.json import json_dumps

logger = get_logger()

DATE_KEY = 'd'
UUID_KEY = 'i'
BINARY_KEY = 'b'
URI_KEY = 'u'

# strings are matched whole so brackets inside them are not counted
_STRUCTURE_TOKEN = re.compile(r'"(?:[^"\\]|\\.)*"|[\[\]{}]', re.DOTALL)
_NUMBER_TOKEN = re.compile(r'"(?:[^"\\]|\\.)*"|-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?', re.DOTALL)

_CONSTANTS = {
    'NaN': float('nan'),
    'Infinity': float('inf'),
    '-Infinity': float('-inf'),
}


class _IntegerOutOfRange(ValueError):
    pass


def _fits_int32(literal: str) -> bool:
    # more digits than int() accepts is out of range anyway
    return len(literal.lstrip('-')) <= 10 and INT32_MIN <= int(literal) <= INT32_MAX


def _parse_int(text: str) -> int:
    if not _fits_int32(text):
        raise _IntegerOutOfRange(text)
    return int(text)


def _integer_offset(text: str) -> Optional[int]:
    """Offset of the first integer literal that does not fit in 32 bits, the one json hits first."""
    for token in _NUMBER_TOKEN.finditer(text):
        literal = token.group()
        if literal[0] == '"' or '.' in literal or 'e' in literal or 'E' in literal:
            continue
        if not _fits_int32(literal):
            return token.start()
    return None


def _parse_constant(text: str) -> float:
    return _CONSTANTS[text]


def _unwrap_date(payload: str) -> Value:
    try:
        return parse_date(payload)
    except ValueError as e:
        raise InvalidTimestampFormatError(str(e)) from e


def _unwrap_uuid(payload: str) -> Value:
    try:
        return parse_uuid(payload)
    except ValueError as e:
        raise InvalidIdentifierFormatError(str(e)) from e


def _unwrap_binary(payload: str) -> Value:
    try:
        return decode_base64(payload)
    except ValueError as e:
        raise InvalidBase64Error(str(e)) from e


_UNWRAPPERS: dict[str, Callable[[str], Value]] = {
    DATE_KEY: _unwrap_date,
    UUID_KEY: _unwrap_uuid,
    BINARY_KEY: _unwrap_binary,
    URI_KEY: Uri,
}


def _object_hook(pairs: list[tuple[str, Any]]) -> Value:
    # a repeated key keeps its last value
    obj = dict(pairs)
    if len(obj) == 1:
        (key, payload), = obj.items()
        unwrap = _UNWRAPPERS.get(key)
        if unwrap is not None and isinstance(payload, str):
            return unwrap(payload)
    return obj


def _check_nesting(text: str, max_depth: int) -> None:
    """Reject documents nested deeper than max_depth before handing them to the recursive json parser."""
    depth = 0
    for token in _STRUCTURE_TOKEN.finditer(text):
        char = token.group()[0]
        if char in '[{':
            depth += 1
            check_depth(depth, max_depth, offset=token.start())
        elif char in ']}':
            depth -= 1


def _loads(text: str) -> Value:
    try:
        return _json.loads(
            text,
            object_pairs_hook=_object_hook,
            parse_int=_parse_int,
            parse_constant=_parse_constant,
        )
    except _IntegerOutOfRange as e:
        raise MalformedInputError(f'integer out of range: {e.args[0]!r}', offset=_integer_offset(text)) from e
    except _json.JSONDecodeError as e:
        if e.pos >= len(text.rstrip()) or e.msg.startswith('Unterminated string'):
            raise UnexpectedEndOfInputError(e.msg, offset=e.pos) from e
        raise MalformedInputError(e.msg, offset=e.pos) from e


class _JSONWrapper:
    def __init__(self, max_depth: int) -> None:
        self.max_depth = max_depth

    def wrap(self, value: Any, depth: int) -> Any:
        """Convert a value into plain JSON-serializable objects."""
        kind = kind_of(value)
        match kind:
            case ValueKind.UNDEFINED | ValueKind.BOOLEAN | ValueKind.REAL | ValueKind.TEXT:
                return value
            case ValueKind.INTEGER:
                return check_integer(value)
            case ValueKind.IDENTIFIER:
                assert isinstance(value, UUID)
                return {UUID_KEY: format_uuid(value)}
            case ValueKind.TIMESTAMP:
                return {DATE_KEY: format_date(value)}
            case ValueKind.RESOURCE:
                return {URI_KEY: str(value)}
            case ValueKind.OPAQUE:
                return {BINARY_KEY: encode_base64(bytes(value))}
            case ValueKind.SEQUENCE:
                check_depth(depth + 1, self.max_depth)
                return [self.wrap(item, depth + 1) for item in value]
            case ValueKind.DICTIONARY:
                check_depth(depth + 1, self.max_depth)
                return {check_key(key): self.wrap(item, depth + 1) for key, item in value.items()}
            case _:
                assert_never(kind)


def decode_json(data: Union[str, bytes], *, settings: Optional[LLSDSettings] = None) -> Value:
    """Decode a JSON document, bytes are taken as UTF-8."""
    settings = settings or get_global_settings()
    log = logger.new(format='json', size=len(data))
    if isinstance(data, (bytes, bytearray, memoryview)):
        try:
            text = bytes(data).decode('utf-8-sig')
        except UnicodeDecodeError as e:
            raise MalformedInputError('invalid utf-8 data', offset=e.start) from e
    else:
        text = data
    _check_nesting(text, settings.MAX_NESTING_DEPTH)
    value = _loads(text)
    log.debug('document decoded')
    return value


def encode_json(value: Any, *, indent: Optional[int] = None, settings: Optional[LLSDSettings] = None) -> str:
    """Encode a value as JSON, compact unless `indent` is given."""
    settings = settings or get_global_settings()
    if indent is None:
        indent = settings.JSON_INDENT
    text = json_dumps(_JSONWrapper(settings.MAX_NESTING_DEPTH).wrap(value, depth=0), indent=indent)
    logger.debug('document encoded', format='json', size=len(text))
    return text
