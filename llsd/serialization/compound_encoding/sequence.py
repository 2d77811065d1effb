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
A sequence is written as an opening byte, each item in order, and a closing byte. There is no count, the decoder reads
items until it peeks the closing byte.

Layout: [begin][value_0]...[value_N][end]

The opening byte is consumed by whoever dispatches on it, so `decode_sequence` starts right after it.

>>> from llsd.serialization.encoding.utf8 import encode_utf8, decode_utf8
>>> se = Serializer.build_bytes_serializer()
>>> encode_sequence(se, ['foo', 'π'], encode_utf8, begin=ord('['), end=ord(']'))
>>> bytes(se.finalize()).hex()
'5b00000003666f6f00000002cf805d'

Breakdown of the result:

    5b: '[', the opening byte
    00000003666f6f: 'foo' with length prefix
    00000002cf80: 'π' with length prefix
    5d: ']', the closing byte

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('5b00000003666f6f00000002cf805d'))
>>> de.read_byte() == ord('[')
True
>>> decode_sequence(de, decode_utf8, list, end=ord(']'))
['foo', 'π']
>>> de.finalize()

Running out of data before the closing byte is an error:

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('00000003666f6f'))
>>> try:
...     decode_sequence(de, decode_utf8, list, end=ord(']'))
... except OutOfDataError as e:
...     print(*e.args)
not enough bytes to read
"""

from collections.abc import Iterable
from typing import Callable, TypeVar

from llsd.serialization import Deserializer, OutOfDataError, Serializer

from . import Decoder, Encoder

T = TypeVar('T')
R = TypeVar('R')


def encode_sequence(serializer: Serializer, values: Iterable[T], encoder: Encoder[T], *, begin: int, end: int) -> None:
    serializer.write_byte(begin)
    for value in values:
        encoder(serializer, value)
    serializer.write_byte(end)


def decode_sequence(
    deserializer: Deserializer,
    decoder: Decoder[T],
    builder: Callable[[list[T]], R],
    *,
    end: int,
) -> R:
    items: list[T] = []
    # peek_byte raises OutOfDataError when the closing byte never comes
    while deserializer.peek_byte() != end:
        items.append(decoder(deserializer))
    deserializer.read_byte()
    return builder(items)
