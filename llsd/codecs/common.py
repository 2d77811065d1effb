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
Text conversions shared by the text codecs: dates, UUIDs, base64/base16 payloads and number literals.

Parsers here raise plain `ValueError`, each codec turns it into its own error type with the offset it knows about.

>>> from datetime import datetime, timezone
>>> format_date(datetime(2024, 1, 1, tzinfo=timezone.utc))
'2024-01-01T00:00:00Z'
>>> parse_date('2006-02-01T14:29:53.43Z')
datetime.datetime(2006, 2, 1, 14, 29, 53, 430000, tzinfo=datetime.timezone.utc)
>>> format_date(parse_date('2006-02-01T14:29:53.43Z'))
'2006-02-01T14:29:53.430000Z'
>>> parse_date('2006-02-01')
Traceback (most recent call last):
...
ValueError: invalid date: '2006-02-01'
>>> format_real(float('-inf')), format_real(0.1), format_real(2.0)
('-inf', '0.1', '2.0')
>>> parse_real('-Infinity'), parse_real('1e3')
(-inf, 1000.0)
>>> parse_integer('-2147483648')
-2147483648
>>> parse_integer('2147483648')
Traceback (most recent call last):
...
ValueError: integer out of range: '2147483648'
"""

import base64
import binascii
import math
import re
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from llsd.exception import NestingTooDeepError
from llsd.types import INT32_MAX, INT32_MIN, to_utc

DATE_RE = re.compile(r'(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?Z', re.ASCII)
UUID_RE = re.compile(r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}')
INTEGER_RE = re.compile(r'[+-]?\d+', re.ASCII)
REAL_RE = re.compile(r'[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?', re.ASCII)
SPECIAL_REAL_RE = re.compile(r'[+-]?(?:nan|inf|infinity)', re.IGNORECASE)

# microseconds
_FRACTION_DIGITS = 6


def format_date(value: datetime) -> str:
    value = to_utc(value)
    text = (f'{value.year:04d}-{value.month:02d}-{value.day:02d}'
            f'T{value.hour:02d}:{value.minute:02d}:{value.second:02d}')
    if value.microsecond:
        text += f'.{value.microsecond:06d}'
    return text + 'Z'


def parse_date(text: str) -> datetime:
    match = DATE_RE.fullmatch(text)
    if match is None:
        raise ValueError(f'invalid date: {text!r}')
    year, month, day, hour, minute, second = (int(part) for part in match.group(1, 2, 3, 4, 5, 6))
    fraction = (match.group(7) or '')[:_FRACTION_DIGITS].ljust(_FRACTION_DIGITS, '0')
    try:
        return datetime(year, month, day, hour, minute, second, int(fraction), tzinfo=timezone.utc)
    except ValueError as e:
        raise ValueError(f'invalid date: {text!r}') from e


def format_uuid(value: UUID) -> str:
    return str(value)


def parse_uuid(text: str) -> UUID:
    """Only the canonical 8-4-4-4-12 hex form is accepted, in either case."""
    if not UUID_RE.fullmatch(text):
        raise ValueError(f'invalid uuid: {text!r}')
    return UUID(text)


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode('ascii')


def decode_base64(text: str) -> bytes:
    """Strict base64 decoding, whitespace is ignored but any other character outside the alphabet is an error."""
    compact = ''.join(text.split())
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f'invalid base64: {e}') from e


def decode_base16(text: str) -> bytes:
    compact = ''.join(text.split())
    try:
        return bytes.fromhex(compact)
    except ValueError as e:
        raise ValueError(f'invalid base16: {e}') from e


def format_real(value: float) -> str:
    """Shortest text that reads back to the same double, with fixed spellings for the non-finite values."""
    if math.isnan(value):
        return 'nan'
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    return repr(value)


def parse_real(text: str) -> float:
    if not (REAL_RE.fullmatch(text) or SPECIAL_REAL_RE.fullmatch(text)):
        raise ValueError(f'invalid real: {text!r}')
    return float(text)


def parse_integer(text: str) -> int:
    if not INTEGER_RE.fullmatch(text):
        raise ValueError(f'invalid integer: {text!r}')
    value = int(text)
    if not INT32_MIN <= value <= INT32_MAX:
        raise ValueError(f'integer out of range: {text!r}')
    return value


def check_depth(depth: int, max_depth: int, *, offset: Optional[int] = None) -> None:
    """Raise NestingTooDeepError when entering a container at `depth` would go past `max_depth`."""
    if depth > max_depth:
        raise NestingTooDeepError(f'nesting deeper than {max_depth} levels', offset=offset)
