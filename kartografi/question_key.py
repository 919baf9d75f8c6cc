"""Stateless question identity.

A question key is `<type>|<payload>` where the payload is the question's
metadata as compact JSON, URL-safe base64 encoded without padding. The key is
handed to the client with the question and sent back with the answer, so the
server keeps no record of issued questions.
"""
from __future__ import annotations

import base64
import binascii
import dataclasses
import enum
import json
import typing as t

from kartografi.errors import InvalidKeyError, InvalidMetadataError, MalformedKeyError

JsonDict = dict[str, t.Any]

SEPARATOR = "|"


class QuestionType(str, enum.Enum):
    COUNTRY = "country"
    MAIN_CITY = "main_city"
    LANGUAGE = "language"
    FLAG = "flag"

    @classmethod
    def parse(cls, value: str) -> "QuestionType | None":
        try:
            return cls(value)
        except ValueError:
            return None


SUPPORTED_TYPES = frozenset(qt.value for qt in QuestionType)


@dataclasses.dataclass(frozen=True)
class QuestionKey:
    type: QuestionType
    metadata: JsonDict

    def encode(self) -> str:
        return encode_key(self.type, self.metadata)

    def require(self, field: str) -> str:
        value = self.metadata.get(field)
        if not isinstance(value, str) or not value:
            raise InvalidKeyError(f"Invalid {self.type.value} question metadata")
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as e:
            # lone surrogates survive json.loads but cannot go into a URL
            raise InvalidKeyError(f"Invalid {self.type.value} question metadata") from e
        return value


def encode_key(question_type: QuestionType | str, metadata: JsonDict) -> str:
    qt = QuestionType(question_type)
    raw = json.dumps(metadata, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    payload = base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")
    return f"{qt.value}{SEPARATOR}{payload}"


def decode_key(raw: t.Any) -> QuestionKey:
    if not isinstance(raw, str) or SEPARATOR not in raw:
        raise MalformedKeyError("Malformed question key")
    type_name, payload = raw.split(SEPARATOR, 1)
    qt = QuestionType.parse(type_name)
    if qt is None:
        raise MalformedKeyError(f'Unsupported question type "{type_name}"')

    try:
        padded = payload + "=" * (-len(payload) % 4)
        decoded = base64.b64decode(padded, altchars=b"-_", validate=True)
        metadata = json.loads(decoded.decode("utf-8"))
    except (binascii.Error, ValueError, RecursionError) as e:
        # UnicodeDecodeError and JSONDecodeError are ValueErrors; deeply nested arrays recurse
        raise InvalidMetadataError("Invalid question metadata") from e
    if not isinstance(metadata, dict):
        raise InvalidMetadataError("Invalid question metadata")
    return QuestionKey(type=qt, metadata=metadata)
