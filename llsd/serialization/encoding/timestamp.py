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
This module implements encoding of a timestamp as the number of seconds since the Unix epoch, stored as an 8-byte
big-endian IEEE-754 double.

Sub-second precision is kept down to the microsecond for any date a `datetime` can represent near the present, the
double has more than enough mantissa for that.

>>> from datetime import datetime, timezone
>>> se = Serializer.build_bytes_serializer()
>>> encode_timestamp(se, datetime(2024, 1, 1, tzinfo=timezone.utc))
>>> bytes(se.finalize()).hex()
'41d9648020000000'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('41d9648020000000'))
>>> decode_timestamp(de)
datetime.datetime(2024, 1, 1, 0, 0, tzinfo=datetime.timezone.utc)
>>> de.finalize()

The last microsecond a `datetime` can hold rounds up past the end, it reads back as `datetime.max`:

>>> seconds_to_datetime(datetime_to_seconds(datetime.max.replace(tzinfo=timezone.utc)))
datetime.datetime(9999, 12, 31, 23, 59, 59, 999999, tzinfo=datetime.timezone.utc)

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('7ff8000000000000'))
>>> try:
...     decode_timestamp(de)
... except BadDataError as e:
...     print(*e.args)
timestamp out of range: nan
"""

from datetime import datetime, timedelta, timezone

from llsd.serialization import BadDataError, Deserializer, Serializer
from llsd.types import EPOCH, to_utc

from .real import decode_real, encode_real

_ONE_SECOND = timedelta(seconds=1)

_MAX_DATETIME = datetime.max.replace(tzinfo=timezone.utc)
# the double nearest to the last microsecond of year 9999 is one past the end
_MAX_SECONDS = (_MAX_DATETIME - EPOCH) / _ONE_SECOND


def datetime_to_seconds(value: datetime) -> float:
    return (to_utc(value) - EPOCH) / _ONE_SECOND


def seconds_to_datetime(seconds: float) -> datetime:
    """Convert seconds since the epoch to an aware UTC datetime, raises ValueError if not representable."""
    try:
        return EPOCH + timedelta(seconds=seconds)
    except (OverflowError, ValueError) as e:
        if _MAX_SECONDS <= seconds < _MAX_SECONDS + 1:
            return _MAX_DATETIME
        raise ValueError(f'timestamp out of range: {seconds}') from e


def encode_timestamp(serializer: Serializer, value: datetime) -> None:
    encode_real(serializer, datetime_to_seconds(value))


def decode_timestamp(deserializer: Deserializer) -> datetime:
    seconds = decode_real(deserializer)
    try:
        return seconds_to_datetime(seconds)
    except ValueError as e:
        raise BadDataError(*e.args) from e
