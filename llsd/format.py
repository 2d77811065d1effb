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

from enum import Enum


class LLSDFormat(Enum):
    XML = 'xml'
    BINARY = 'binary'
    NOTATION = 'notation'
    JSON = 'json'

    @classmethod
    def from_name(cls, name: str) -> 'LLSDFormat':
        """Lookup a format by its case-insensitive name, as used on the command line."""
        try:
            return cls(name.lower())
        except ValueError:
            valid = ', '.join(f.value for f in cls)
            raise ValueError(f'unknown format {name!r}, expected one of: {valid}') from None
