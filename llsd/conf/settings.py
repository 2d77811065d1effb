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

from pathlib import Path
from typing import Optional, Union

from pydantic import field_validator

from llsd.utils.pydantic import BaseModel
from llsd.utils.yaml import model_from_extended_yaml


class LLSDSettings(BaseModel):
    # Maximum container depth, deeper documents or values raise NestingTooDeepError
    MAX_NESTING_DEPTH: int = 128

    # Maximum length prefix the binary decoder accepts for text, uri, binary and keys
    MAX_BINARY_LENGTH: int = 64 * 1024 * 1024

    # Whether the binary encoder writes the `<?llsd/binary?>` header when not told explicitly
    BINARY_EMIT_HEADER: bool = False

    # Pretty-print indentation for XML output, None means a single line
    XML_INDENT: Optional[int] = None

    # Pretty-print indentation for JSON output, None means compact separators
    JSON_INDENT: Optional[int] = None

    # Number of leading bytes or characters the format detector scans
    DETECT_PREFIX_LENGTH: int = 1024

    @field_validator('MAX_NESTING_DEPTH', 'MAX_BINARY_LENGTH', 'DETECT_PREFIX_LENGTH')
    @classmethod
    def _validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError('must be a positive integer')
        return value

    @field_validator('XML_INDENT', 'JSON_INDENT')
    @classmethod
    def _validate_indent(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 0:
            raise ValueError('indent cannot be negative')
        return value

    @classmethod
    def from_yaml(cls, *, filepath: Union[Path, str]) -> 'LLSDSettings':
        """Takes a filepath to a yaml file and returns the validated settings."""
        return model_from_extended_yaml(cls, filepath=filepath)
