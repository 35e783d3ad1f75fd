"""Helpers shared by the JSON routes."""

from __future__ import annotations

import json
from typing import Type, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.errors import ValidationError

SchemaType = TypeVar("SchemaType", bound=BaseModel)


async def read_json_body(request: Request, schema: Type[SchemaType]) -> SchemaType:
    """Parse the request body into ``schema``.

    Routes call this after resolving the caller, so an anonymous request is
    rejected before its body is looked at.

    Raises:
        ValidationError: The body is not a JSON object matching ``schema``
    """
    raw = await request.body()
    try:
        data = json.loads(raw) if raw else {}
    except ValueError as exc:
        raise ValidationError("Invalid request body") from exc
    if not isinstance(data, dict):
        raise ValidationError("Invalid request body")
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError("Invalid request body", details={"errors": exc.errors()}) from exc
