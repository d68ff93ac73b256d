"""
===============================================================================
TARJETA CRC - api/main.py (App FastAPI)
===============================================================================

Responsabilidades:
  - create_app(): middlewares, handlers de error, routers y /healthz.
  - lifespan: validar settings, abrir / cerrar el pool y correr el seed
    de admin local.

Colaboradores:
  - container (repositorios y casos de uso)
  - crosscutting.middleware / api.exception_handlers
  - routers: auth_routes, role_routes, admin_routes

Notas:
  - Orden efectivo: RequestContext -> CORS -> BodyLimit -> rutas.
  - Con APP_ENV=test no hay pool: el container entrega repos in-memory.
===============================================================================
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from ..application.dev_seed_admin import ensure_dev_admin
from ..container import (
    get_account_repository,
    get_register_user_use_case,
    get_role_repository,
)
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.middleware import (
    REQUEST_ID_HEADER,
    BodyLimitMiddleware,
    RequestContextMiddleware,
)
from ..domain.repositories import RoleRepository
from ..infrastructure.db.pool import close_pool, init_pool
from .admin_routes import router as admin_router
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers
from .role_routes import router as role_router

APP_TITLE = "Commerce API"
APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    uses_database = not settings.is_test()

    if uses_database:
        await init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    try:
        seeded = await ensure_dev_admin(
            settings,
            accounts=get_account_repository(),
            register=get_register_user_use_case(),
        )
        logger.info(
            "API iniciada",
            extra={
                "app_env": settings.app_env,
                "database": uses_database,
                "dev_admin_seeded": seeded,
                "jwt_ttl_minutes": settings.jwt_access_ttl_minutes,
            },
        )
        yield
    except Exception:
        logger.exception("Fallo durante el ciclo de vida de la API")
        raise
    finally:
        if uses_database:
            await close_pool()
        logger.info("API detenida")


def _cors_options() -> dict:
    try:
        settings = get_settings()
    except ValidationError:
        # R: tooling (openapi export) importa la app sin DATABASE_URL.
        return {"allow_origins": ["http://localhost:3000"], "allow_credentials": False}
    return {
        "allow_origins": settings.get_allowed_origins_list(),
        "allow_credentials": settings.cors_allow_credentials,
    }


async def healthz(
    request: Request,
    roles: RoleRepository = Depends(get_role_repository),
):
    """Siempre 200; `db` indica si el store responde."""
    reachable = await roles.ping()
    return {
        "ok": reachable,
        "db": "connected" if reachable else "disconnected",
        "request_id": getattr(request.state, "request_id", None),
    }


def create_app() -> FastAPI:
    app = FastAPI(
        title=APP_TITLE,
        version=APP_VERSION,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "auth", "description": "Registro, login y perfil (JWT)"},
            {"name": "roles", "description": "Catálogo de roles (Admin, Analyst)"},
            {"name": "admin", "description": "Administración de cuentas (Admin)"},
        ],
    )

    # R: add_middleware apila; el último agregado corre primero.
    app.add_middleware(BodyLimitMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
        **_cors_options(),
    )
    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)

    for router in (auth_router, role_router, admin_router):
        app.include_router(router)
    app.add_api_route("/healthz", healthz, methods=["GET"], tags=["health"])

    return app


app = create_app()
