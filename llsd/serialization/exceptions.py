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

from llsd.exception import LLSDError


class SerializationError(LLSDError):
    pass


class BadDataError(SerializationError):
    pass


class OutOfDataError(SerializationError, ValueError):
    pass


class TooLongError(SerializationError, ValueError):
    pass


class InvalidTagError(BadDataError):
    """A tag byte that is not valid at the current position."""

    def __init__(self, tag: int) -> None:
        self.tag = tag
        super().__init__(f'invalid tag {bytes([tag])!r}')
