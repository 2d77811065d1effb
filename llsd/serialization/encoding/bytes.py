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
This modules implements encoding of byte sequence by prefixing it with the length of the sequence encoded as a 4-byte
big-endian signed integer.

>>> se = Serializer.build_bytes_serializer()
>>> encode_bytes(se, b'test')  # will prepend b'\x00\x00\x00\x04' before writing b'test'
>>> bytes(se.finalize()).hex()
'0000000474657374'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('0000000474657374'))
>>> decode_bytes(de)
b'test'
>>> de.finalize()

A negative length is never valid:

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('ffffffff'))
>>> try:
...     decode_bytes(de)
... except BadDataError as e:
...     print(*e.args)
negative length: -1

A length that goes past the end of the data is a truncated payload:

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('0000000574657374'))
>>> try:
...     decode_bytes(de)
... except OutOfDataError as e:
...     print(*e.args)
length 5 exceeds the 4 remaining bytes

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('0000000474657374'))
>>> try:
...     decode_bytes(de, max_length=3)
... except TooLongError as e:
...     print(*e.args)
length 4 exceeds the maximum of 3
"""

from typing import Optional

from llsd.serialization import BadDataError, Deserializer, OutOfDataError, Serializer, TooLongError

from .int import decode_int, encode_int

LENGTH_SIZE = 4


def encode_bytes(serializer: Serializer, data: bytes) -> None:
    """ Encodes a byte-sequence adding a length prefix.

    This modules's docstring has more details and examples.
    """
    encode_int(serializer, len(data), length=LENGTH_SIZE, signed=True)
    serializer.write_bytes(data)


def decode_bytes(deserializer: Deserializer, *, max_length: Optional[int] = None) -> bytes:
    """ Decodes a byte-sequence with a length prefix.

    This modules's docstring has more details and examples.
    """
    size = decode_int(deserializer, length=LENGTH_SIZE, signed=True)
    if size < 0:
        raise BadDataError(f'negative length: {size}')
    if max_length is not None and size > max_length:
        raise TooLongError(f'length {size} exceeds the maximum of {max_length}')
    if size > deserializer.remaining():
        raise OutOfDataError(f'length {size} exceeds the {deserializer.remaining()} remaining bytes')
    return bytes(deserializer.read_bytes(size))
