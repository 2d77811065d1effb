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
The LLSD value model.

Every LLSD value is one of eleven kinds, and each kind maps to exactly one Python type:

    Undefined   None
    Boolean     bool
    Integer     int (32-bit signed on the wire)
    Real        float
    Text        str
    Identifier  uuid.UUID
    Timestamp   datetime.datetime (UTC)
    Resource    Uri (a str subclass)
    Opaque      bytes
    Sequence    list
    Dictionary  dict[str, Value]

`kind_of()` is the single place where a Python object is classified, codecs match on its result.

>>> kind_of(None)
<ValueKind.UNDEFINED: 'undefined'>
>>> kind_of(True)
<ValueKind.BOOLEAN: 'boolean'>
>>> kind_of(1)
<ValueKind.INTEGER: 'integer'>
>>> kind_of(Uri('http://example.com'))
<ValueKind.RESOURCE: 'resource'>
>>> kind_of('http://example.com')
<ValueKind.TEXT: 'text'>
>>> llsd_equal(Uri('x'), 'x')
False
>>> llsd_equal([float('nan')], [float('nan')])
True
"""

import math
from collections.abc import Mapping
from datetime import datetime, timezone
from enum import Enum
from typing import Any, TypeAlias, Union
from uuid import UUID

from typing_extensions import assert_never

from llsd.exception import IntegerOutOfRangeError, UnsupportedTypeError

INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
NIL_UUID = UUID(int=0)


class Uri(str):
    """A string that holds a URI, semantically distinct from plain text."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f'Uri({str.__repr__(self)})'


Value: TypeAlias = Union[
    None,
    bool,
    int,
    float,
    str,
    Uri,
    UUID,
    datetime,
    bytes,
    list['Value'],
    dict[str, 'Value'],
]


class ValueKind(Enum):
    UNDEFINED = 'undefined'
    BOOLEAN = 'boolean'
    INTEGER = 'integer'
    REAL = 'real'
    TEXT = 'text'
    IDENTIFIER = 'identifier'
    TIMESTAMP = 'timestamp'
    RESOURCE = 'resource'
    OPAQUE = 'opaque'
    SEQUENCE = 'sequence'
    DICTIONARY = 'dictionary'


def kind_of(value: Any) -> ValueKind:
    """Classify a Python object into its LLSD kind, or raise UnsupportedTypeError."""
    # XXX: order matters, bool is an int and Uri is a str
    if value is None:
        return ValueKind.UNDEFINED
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.REAL
    if isinstance(value, Uri):
        return ValueKind.RESOURCE
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, UUID):
        return ValueKind.IDENTIFIER
    if isinstance(value, datetime):
        return ValueKind.TIMESTAMP
    if isinstance(value, (bytes, bytearray, memoryview)):
        return ValueKind.OPAQUE
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, Mapping):
        return ValueKind.DICTIONARY
    raise UnsupportedTypeError(f'type not supported: {type(value).__qualname__}')


def check_integer(value: int) -> int:
    """Return value if it fits the 32-bit signed range, raise IntegerOutOfRangeError otherwise."""
    if not INT32_MIN <= value <= INT32_MAX:
        raise IntegerOutOfRangeError(f'{value} does not fit in a 32-bit signed integer')
    return value


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to an aware UTC datetime, naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def check_key(key: Any) -> str:
    if not isinstance(key, str):
        raise UnsupportedTypeError(f'dictionary keys must be str, got {type(key).__qualname__}')
    return key


def zero_value(kind: ValueKind) -> Value:
    """The value an empty XML leaf element of the given kind decodes to."""
    match kind:
        case ValueKind.UNDEFINED:
            return None
        case ValueKind.BOOLEAN:
            return False
        case ValueKind.INTEGER:
            return 0
        case ValueKind.REAL:
            return 0.0
        case ValueKind.TEXT:
            return ''
        case ValueKind.IDENTIFIER:
            return NIL_UUID
        case ValueKind.TIMESTAMP:
            return EPOCH
        case ValueKind.RESOURCE:
            return Uri('')
        case ValueKind.OPAQUE:
            return b''
        case ValueKind.SEQUENCE:
            return []
        case ValueKind.DICTIONARY:
            return {}
        case _:
            assert_never(kind)


def llsd_equal(a: Any, b: Any) -> bool:
    """Deep equality over LLSD values.

    Differs from `==` in that kinds must match (`True` is not `1`, `Uri('x')` is not `'x'`), NaN is equal to NaN,
    and timestamps compare as instants.
    """
    kind = kind_of(a)
    if kind is not kind_of(b):
        return False
    match kind:
        case ValueKind.REAL:
            if math.isnan(a) and math.isnan(b):
                return True
            return bool(a == b)
        case ValueKind.TIMESTAMP:
            return to_utc(a) == to_utc(b)
        case ValueKind.OPAQUE:
            return bytes(a) == bytes(b)
        case ValueKind.SEQUENCE:
            return len(a) == len(b) and all(llsd_equal(x, y) for x, y in zip(a, b))
        case ValueKind.DICTIONARY:
            if a.keys() != b.keys():
                return False
            return all(llsd_equal(a[k], b[k]) for k in a)
        case (ValueKind.UNDEFINED | ValueKind.BOOLEAN | ValueKind.INTEGER | ValueKind.TEXT | ValueKind.IDENTIFIER
              | ValueKind.RESOURCE):
            return bool(a == b)
        case _:
            assert_never(kind)
