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

import json as _json
from typing import Optional


def json_dumps(obj: object, *, indent: Optional[int] = None) -> str:
    """Compact formating obj as JSON to a string, non-ASCII characters are kept as is.

    With `indent` the output is pretty-printed instead. NaN and the infinities are written as the `NaN`, `Infinity`
    and `-Infinity` literals.
    """
    if indent is not None:
        return _json.dumps(obj, indent=indent, ensure_ascii=False)
    return _json.dumps(obj, separators=(',', ':'), ensure_ascii=False)
