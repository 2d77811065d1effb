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

from typing import Optional


class LLSDError(Exception):
    """Base class for exceptions in llsd."""
    pass


class CodecError(LLSDError):
    """Base class for errors raised while encoding or decoding a document.

    `offset` is the byte (binary) or character (text formats) position where the problem was detected, when known.
    """

    def __init__(self, message: str, *, offset: Optional[int] = None) -> None:
        self.message = message
        self.offset = offset
        if offset is not None:
            message = f'{message} (at offset {offset})'
        super().__init__(message)


class NestingTooDeepError(CodecError):
    """The document or value tree is nested deeper than the configured maximum depth."""
    pass


class DecodeError(CodecError):
    """Base class for errors while decoding, a failed decode never yields a value."""
    pass


class MalformedInputError(DecodeError):
    """Corrupt or invalid input."""
    pass


class UnexpectedEndOfInputError(MalformedInputError):
    """The input ended before the document was complete."""
    pass


class UnknownTagError(DecodeError):
    """Unrecognized binary tag byte or XML element."""
    pass


class UnknownSigilError(DecodeError):
    """Unrecognized leading character of a notation value."""
    pass


class InvalidEscapeError(DecodeError):
    """Unsupported backslash escape in quoted notation text."""
    pass


class InvalidBase64Error(DecodeError):
    """Binary payload is not valid base64."""
    pass


class InvalidIdentifierFormatError(DecodeError):
    """Identifier is not a valid UUID."""
    pass


class InvalidTimestampFormatError(DecodeError):
    """Timestamp is not a valid ISO-8601 UTC date or is out of range."""
    pass


class EncodeError(CodecError):
    """Base class for errors while encoding."""
    pass


class IntegerOutOfRangeError(EncodeError):
    """Integer does not fit the 32-bit signed wire range."""
    pass


class UnsupportedTypeError(EncodeError):
    """Python object has no LLSD counterpart."""
    pass
