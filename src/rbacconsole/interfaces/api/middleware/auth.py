"""Auth middleware - extracts the operator from a Keycloak JWT."""

from dataclasses import dataclass

import falcon
import falcon.asgi


@dataclass
class RequestUser:
    """Operator from request context."""

    user_id: str
    email: str | None = None
    username: str | None = None


ANONYMOUS = RequestUser(user_id="anonymous")


class AuthMiddleware:
    """Middleware that validates JWT and sets req.context.user.

    Without a Keycloak provider every request runs as the anonymous operator.
    With one, a missing or inactive token leaves req.context.user as None.
    """

    def __init__(self, keycloak_provider=None) -> None:
        self._keycloak = keycloak_provider

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        """Extract user from Authorization header."""
        if self._keycloak is None:
            req.context.user = ANONYMOUS
            return
        req.context.user = None
        auth = req.get_header("Authorization")
        if auth and auth.startswith("Bearer "):
            user = self._keycloak.decode_token(auth[7:])
            if user:
                req.context.user = RequestUser(
                    user_id=user.user_id,
                    email=user.email,
                    username=user.username,
                )


def require_user(req: falcon.asgi.Request) -> RequestUser:
    """Return the operator or raise 401."""
    user = getattr(req.context, "user", None)
    if not user:
        raise falcon.HTTPUnauthorized(title="Unauthorized")
    return user
