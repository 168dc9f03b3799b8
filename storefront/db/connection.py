from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine,async_sessionmaker,AsyncSession
from sqlalchemy.pool import NullPool
from storefront.config.settings import config_settings
from storefront.db.utils import _normalize_db_url, is_sqlite_url

DATABASE_URL=_normalize_db_url(config_settings.DATABASE_URL)

if is_sqlite_url(DATABASE_URL):
    # sqlite has no server side pool to share
    async_engine=create_async_engine(DATABASE_URL,echo=config_settings.DB_ECHO,poolclass=NullPool)

    @event.listens_for(async_engine.sync_engine, "connect")
    def _sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
else:
    async_engine=create_async_engine(DATABASE_URL,echo=config_settings.DB_ECHO,pool_pre_ping=True)

async_session=async_sessionmaker(bind=async_engine,class_=AsyncSession,expire_on_commit=False)
