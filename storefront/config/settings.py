from pydantic_settings import BaseSettings

class Settings(BaseSettings):

    DATABASE_URL : str = "sqlite+aiosqlite:///./storefront.db"
    DB_ECHO : bool = False
    AUTO_CREATE_TABLES : bool = False
    JWT_SECRET : str = "dev-secret-change-me"
    JWT_ALGO : str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES : int = 60
    WISHLIST_MAX_ITEMS : int = 500

    class Config:
        env_file = ".env"
        extra="ignore"

config_settings = Settings()
