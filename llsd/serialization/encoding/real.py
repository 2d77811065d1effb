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
This module implements encoding of a float as an 8-byte big-endian IEEE-754 double.

Every float is representable, including NaN and the infinities.

>>> se = Serializer.build_bytes_serializer()
>>> encode_real(se, 1.5)  # writes 3ff8000000000000
>>> encode_real(se, float('-inf'))  # writes fff0000000000000
>>> bytes(se.finalize()).hex()
'3ff8000000000000fff0000000000000'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('3ff8000000000000fff0000000000000'))
>>> decode_real(de)
1.5
>>> decode_real(de)
-inf
>>> de.finalize()
"""

from llsd.serialization import Deserializer, Serializer

_FORMAT = '!d'


def encode_real(serializer: Serializer, value: float) -> None:
    serializer.write_struct((value,), _FORMAT)


def decode_real(deserializer: Deserializer) -> float:
    value, = deserializer.read_struct(_FORMAT)
    return value
