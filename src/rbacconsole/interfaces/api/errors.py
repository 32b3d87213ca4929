"""Map domain exceptions to HTTP responses."""

import logging

import falcon
import falcon.asgi

from rbacconsole.domain.exceptions import (
    AlreadyAssigned,
    AlreadyExists,
    Busy,
    NotFound,
    RBACConsoleError,
    RemoteStoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS = [
    (ValidationError, falcon.HTTP_400, "validation_error"),
    (NotFound, falcon.HTTP_404, "not_found"),
    (AlreadyAssigned, falcon.HTTP_409, "already_assigned"),
    (AlreadyExists, falcon.HTTP_409, "already_exists"),
    (Busy, falcon.HTTP_409, "busy"),
    (RemoteStoreError, falcon.HTTP_502, "store_error"),
]


async def handle_domain_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: RBACConsoleError, params
) -> None:
    """Respond with {"error", "code"} and the status for the exception type."""
    for exc_type, status, code in _STATUS:
        if isinstance(ex, exc_type):
            break
    else:
        status, code = falcon.HTTP_500, "error"
    resp.status = status
    resp.media = {"error": str(ex), "code": code}


async def handle_unexpected_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: Exception, params
) -> None:
    """Log and hide anything the resources did not anticipate."""
    logger.exception("Unhandled error on %s %s", req.method, req.path)
    resp.status = falcon.HTTP_500
    resp.media = {"title": "500 Internal Server Error"}


def register_error_handlers(app: falcon.asgi.App) -> None:
    """Install handlers. Falcon picks the most specific class; HTTPError keeps its default."""
    app.add_error_handler(Exception, handle_unexpected_error)
    app.add_error_handler(RBACConsoleError, handle_domain_error)
