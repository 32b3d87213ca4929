"""Assistant API resource."""

import falcon
import falcon.asgi

from rbacconsole.application.use_cases.assistant.dispatch_command import (
    DispatchCommandUseCase,
)
from rbacconsole.interfaces.api.middleware.auth import require_user
from rbacconsole.interfaces.api.resources._body import read_json
from rbacconsole.interfaces.api.serializers import dispatch_media


class AssistantResource:
    """POST /v1/assistant - run a natural-language command."""

    def __init__(self, dispatch_command: DispatchCommandUseCase) -> None:
        self._dispatch = dispatch_command

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Always 200 once dispatched; success lives in the body."""
        require_user(req)
        body = await read_json(req)
        message = body.get("message")
        if not isinstance(message, str):
            raise falcon.HTTPBadRequest(
                title="Invalid body", description="Missing required field: message"
            )
        result = await self._dispatch.execute(message)
        resp.media = dispatch_media(result)
        resp.status = falcon.HTTP_200
