from __future__ import annotations

import json
from dataclasses import dataclass
from dataclasses import field
from typing import Any

from iyopt.errors import DecodeError
from iyopt.errors import json_type
from iyopt.nullable import NullableString


@dataclass(frozen=True)
class Suggestion:
    variant_code: str
    experiment_code: str
    content: NullableString = field(default_factory=NullableString.null)
    reward_token: NullableString = field(default_factory=NullableString.null)

    @classmethod
    def from_dict(cls, data: Any) -> "Suggestion":
        """
        decode a suggestion from a parsed response body.

        args:
            data: json object with variant_id, experiment_id and the optional
                content and reward_token fields

        returns:
            Suggestion, absent optional fields decode as invalid
            and a json null body decodes to the zero suggestion

        raises:
            DecodeError: if data is not an object or a field has the wrong type
        """
        if data is None:
            return cls(variant_code="", experiment_code="")
        if not isinstance(data, dict):
            raise DecodeError(f"cannot decode {json_type(data)} into suggestion")

        return cls(
            variant_code=_string_field(data, "variant_id"),
            experiment_code=_string_field(data, "experiment_id"),
            content=NullableString.from_value(data.get("content")),
            reward_token=NullableString.from_value(data.get("reward_token")),
        )

    @classmethod
    def decode(cls, body: bytes | str) -> "Suggestion":
        try:
            data = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"invalid json: {e}") from e
        return cls.from_dict(data)

    def to_dict(self) -> dict:
        return {
            "variant_id": self.variant_code,
            "experiment_id": self.experiment_code,
            "content": self.content.to_value(),
            "reward_token": self.reward_token.to_value(),
        }


@dataclass(frozen=True)
class Reward:
    token: str


def _string_field(data: dict, key: str) -> str:
    value = data.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"cannot decode {json_type(value)} into {key}")
    return value
