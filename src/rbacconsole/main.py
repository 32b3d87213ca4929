"""Application entry point and composition root."""

import logging

from rbacconsole import __version__
from rbacconsole.application.rbac_cache import RBACCache
from rbacconsole.application.use_cases.assistant.dispatch_command import (
    DispatchCommandUseCase,
)
from rbacconsole.config import get_settings
from rbacconsole.infrastructure.assistant.openai_interpreter import OpenAICommandInterpreter
from rbacconsole.infrastructure.auth.keycloak_provider import KeycloakProvider
from rbacconsole.infrastructure.persistence.postgres.connection import create_pool
from rbacconsole.infrastructure.persistence.postgres.unit_of_work import (
    create_uow_factory,
)
from rbacconsole.interfaces.api.app import create_app
from rbacconsole.interfaces.api.middleware.auth import AuthMiddleware
from rbacconsole.interfaces.api.middleware.cors import CORSMiddleware
from rbacconsole.interfaces.api.middleware.store_lifespan import StoreLifespanMiddleware
from rbacconsole.logging_config import configure_logging

logger = logging.getLogger(__name__)


def create_rbac_console_app():
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    configure_logging(settings.log_level)

    pool = create_pool(
        settings.database_url,
        min_size=settings.database_pool_min_size,
        max_size=settings.database_pool_max_size,
    )
    cache = RBACCache(create_uow_factory(pool))

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning("Keycloak is not configured; all requests run as anonymous operator")

    interpreter = OpenAICommandInterpreter(
        base_url=settings.assistant_api_url,
        api_key=settings.assistant_api_key,
        model=settings.assistant_model,
    )
    dispatch_command = DispatchCommandUseCase(cache, interpreter)

    cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    return create_app(
        cache,
        dispatch_command,
        middleware=[
            CORSMiddleware(cors_origins),
            StoreLifespanMiddleware(pool, cache),
            AuthMiddleware(keycloak),
        ],
    )


def run_server(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Run uvicorn server."""
    import uvicorn

    uvicorn.run(create_rbac_console_app(), host=host, port=port)


def main() -> None:
    """CLI entry point."""
    print(f"RBAC Console v{__version__}")
    run_server()
