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
This module implements encoding of a UUID as its 16 raw bytes, in big-endian (RFC 4122) order.

>>> from uuid import UUID
>>> se = Serializer.build_bytes_serializer()
>>> encode_uuid(se, UUID('6bad258e-06f0-4d9b-a7c5-3e4a2f1a8b3c'))
>>> bytes(se.finalize()).hex()
'6bad258e06f04d9ba7c53e4a2f1a8b3c'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('6bad258e06f04d9ba7c53e4a2f1a8b3c'))
>>> decode_uuid(de)
UUID('6bad258e-06f0-4d9b-a7c5-3e4a2f1a8b3c')
>>> de.finalize()
"""

from uuid import UUID

from llsd.serialization import Deserializer, Serializer

UUID_SIZE = 16


def encode_uuid(serializer: Serializer, value: UUID) -> None:
    serializer.write_bytes(value.bytes)


def decode_uuid(deserializer: Deserializer) -> UUID:
    return UUID(bytes=bytes(deserializer.read_bytes(UUID_SIZE)))
