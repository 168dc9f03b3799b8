from contextlib import asynccontextmanager
from fastapi import FastAPI
from sqlmodel import SQLModel
from storefront.api import version_prefix,cur_version
from storefront.api.routers import public_routers,admin_routers
from storefront.common.custom_exceptions import register_all_exceptions
from storefront.common.logging_setup import setup_logging, shutdown_logging
from storefront.config.admin_config import admin_config
from storefront.config.settings import config_settings
from storefront.db.connection import async_engine,async_session
from storefront.middlewares.auth_middleware import AuthenticationMiddleware
from storefront.middlewares.request_id_middleware import RequestIdMiddleware
import storefront.schema.full_schema  # noqa: F401  registers tables on SQLModel.metadata


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    app_logger = setup_logging()

    if config_settings.AUTO_CREATE_TABLES:
        # local sqlite runs; deployed databases are migrated with alembic
        async with async_engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    app_logger.info("app.startup", extra={"env": admin_config.ENV, "admin_enabled": admin_config.ENABLE_ADMIN})
    try:
        yield
    finally:
        await async_engine.dispose()
        shutdown_logging()


def create_app():
    app=FastAPI(
        title="Storefront",
        version=cur_version,
        lifespan=app_lifespan)

    app.include_router(public_routers)

    if admin_config.ENABLE_ADMIN:
        app.include_router(admin_routers)      # mounts /api/v1/admin

    app.add_middleware(AuthenticationMiddleware,session_maker=async_session,
                       public_paths=[f"{version_prefix}/health",
                                     f"{version_prefix}/products",      # public catalog reads
                                     "/docs","/redoc","/openapi.json"])
    app.add_middleware(RequestIdMiddleware)
    register_all_exceptions(app)

    return app

app=create_app()
