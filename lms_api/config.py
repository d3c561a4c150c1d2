from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.pool import StaticPool
from dotenv import load_dotenv
load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./lms.db"
    storage_backend: str = "sql"  # sql|json
    data_dir: str = "data"

    auth_api_url: str = "https://api.jupiter.com.br/action/Usuario/logar"
    auth_timeout_seconds: float = 20.0
    admin_usernames: str = ""  # comma separated

    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 12

    flussonic_url: str = ""
    flussonic_user: str = ""
    flussonic_password: str = ""
    flussonic_vod_name: str = ""
    upload_max_bytes: int = 500 * 1024 * 1024

    ranking_limit: int = 10
    cors_origins: str = "*"

    log_dir: str = "logs"
    log_level: str = "INFO"

    @property
    def admin_username_list(self) -> list[str]:
        return [u.strip() for u in self.admin_usernames.split(",") if u.strip()]

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()] or ["*"]


settings = Settings()


def _engine_kwargs(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {}
    kwargs: dict = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection, otherwise every pooled connection sees an empty database.
        kwargs["poolclass"] = StaticPool
    return kwargs


engine = create_engine(settings.database_url, **_engine_kwargs(settings.database_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def create_db():
    # Model modules register their tables on Base at import time.
    import lms_api.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
