"""Request Context — framework-free view of a request for handlers.

Invariants:
    - Body JSON is decoded lazily: a handler can answer 404 before the body is examined
    - Path parameters are parsed on access; bad values are MalformedInput (400)
"""

import json
from dataclasses import dataclass, field
from typing import Any, Mapping
from uuid import UUID

from library_api.core.errors import MalformedInputError
from library_api.core.select_action import ActionTable


@dataclass
class RequestContext:
    path_params: dict[str, str]
    headers: Mapping[str, str]
    body: bytes = b""
    base_url: str = ""
    table: ActionTable | None = None

    def uuid_param(self, name: str) -> UUID:
        raw = self.path_params.get(name, "")
        try:
            return UUID(raw)
        except ValueError:
            raise MalformedInputError(
                f"Invalid {name} format", fields={name: [f"'{raw}' is not a valid UUID."]},
            )

    def json(self) -> Any:
        if not self.body:
            return None
        try:
            return json.loads(self.body)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise MalformedInputError(
                "Request body is not valid JSON", fields={"body": [str(exc)]},
            )

    def url_for(self, handler_name: str, **params: object) -> str:
        return self.base_url.rstrip("/") + self.table.path_for(handler_name, **params)


@dataclass
class HandlerResponse:
    content: Any
    status_code: int = 200
    headers: dict[str, str] = field(default_factory=dict)
