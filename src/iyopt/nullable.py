from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from iyopt.errors import DecodeError
from iyopt.errors import json_type


@dataclass(frozen=True)
class NullableString:
    """string field that may be absent, present-empty or present with a value.

    when valid is False the value is always "".
    """

    valid: bool = False
    value: str = ""

    @classmethod
    def null(cls) -> "NullableString":
        return cls(valid=False, value="")

    @classmethod
    def of(cls, value: str) -> "NullableString":
        return cls(valid=True, value=value)

    @classmethod
    def from_value(cls, data: Any) -> "NullableString":
        """build from an already parsed json value.

        raises:
            DecodeError: if data is neither null nor a string
        """
        if data is None:
            return cls.null()
        if isinstance(data, str):
            return cls.of(data)
        raise DecodeError(f"cannot decode {json_type(data)} into nullable string")

    @classmethod
    def decode(cls, data: bytes | str) -> "NullableString":
        try:
            parsed = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"invalid json: {e}") from e
        return cls.from_value(parsed)

    def to_value(self) -> str | None:
        return self.value if self.valid else None

    def __bool__(self) -> bool:
        return self.valid
