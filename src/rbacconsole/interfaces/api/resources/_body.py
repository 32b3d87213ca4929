"""Request body helpers."""

from typing import Any
from uuid import UUID

import falcon
import falcon.asgi


async def read_json(req: falcon.asgi.Request) -> dict[str, Any]:
    """Return the JSON object body or raise 400."""
    body = await req.get_media(default_when_empty={})
    if not isinstance(body, dict):
        raise falcon.HTTPBadRequest(title="Invalid body", description="Expected a JSON object")
    return body


def name_and_description(body: dict[str, Any]) -> tuple[str, str | None]:
    """Pull name/description from a create or update body. Both are stripped."""
    name = body.get("name")
    if not isinstance(name, str):
        raise falcon.HTTPBadRequest(title="Invalid body", description="Missing required field: name")
    description = body.get("description")
    if description is not None and not isinstance(description, str):
        raise falcon.HTTPBadRequest(title="Invalid body", description="description must be a string")
    return name.strip(), (description.strip() or None) if description else None


def uuid_field(body: dict[str, Any], key: str) -> UUID:
    try:
        return UUID(str(body[key]))
    except KeyError:
        raise falcon.HTTPBadRequest(
            title="Invalid body", description=f"Missing required field: {key}"
        ) from None
    except ValueError:
        raise falcon.HTTPBadRequest(title="Invalid body", description=f"Invalid {key}") from None
