from typing import Optional, List

from pydantic import Field, AliasChoices, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_WEAK_SEED_PASSWORDS = frozenset({"password", "changeme", "admin", "secret"})

# Origins a local frontend dev server runs on; not acceptable as the only origins in production
_LOCAL_ORIGINS = frozenset({
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
})


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_parse_delimiter=",", extra="ignore")
    PROJECT_NAME: str = "Employee Portal"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    # DEBUG/INFO/WARNING/...; defaults to DEBUG when DEBUG is on, else INFO
    LOG_LEVEL: Optional[str] = None

    # CORS
    # Accept either a JSON array or a comma-separated string; normalized below.
    ALLOWED_ORIGINS: List[str] | str = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"],
        validation_alias=AliasChoices("ALLOWED_ORIGINS", "BACKEND_CORS_ORIGINS"),
    )

    # Database settings
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./employee_portal.db",
        validation_alias=AliasChoices("DATABASE_URL", "SQLALCHEMY_DATABASE_URI"),
    )
    SQLALCHEMY_ECHO: bool = False
    DB_POOL_SIZE: int = Field(default=10, description="Persistent connections (server databases only)")
    DB_MAX_OVERFLOW: int = Field(default=20, description="Extra connections under load (server databases only)")
    # Create tables on startup instead of running Alembic (local development)
    DB_AUTO_CREATE: bool = False

    # Access tokens
    TOKEN_BYTES: int = 40
    TOKEN_NAME: str = "auth-token"

    # Login throttle (fixed window, per client)
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT: str = "5/minute"
    REDIS_URL: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("REDIS_URL", "RATE_LIMIT_STORAGE_URL"),
    )

    # Seeded login account
    SEED_USER_NAME: str = "Admin User"
    SEED_USER_EMAIL: str = "admin@example.com"
    SEED_USER_PASSWORD: str = "password"

    @computed_field
    @property
    def IS_PRODUCTION(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    def production_problems(self) -> List[str]:
        """Settings that are fine for local work but unsafe to deploy."""
        problems = []
        if self.DEBUG:
            problems.append("DEBUG is on; it exposes exception details and the API docs.")
        if not self.ALLOWED_ORIGINS or set(self.ALLOWED_ORIGINS) <= _LOCAL_ORIGINS:
            problems.append("ALLOWED_ORIGINS only lists local dev servers; set the real frontend origin(s).")
        if self.DATABASE_URL.startswith("sqlite"):
            problems.append("DATABASE_URL points at SQLite; use a server database.")
        if self.SEED_USER_PASSWORD in _WEAK_SEED_PASSWORDS:
            problems.append("SEED_USER_PASSWORD is a well-known default.")
        return problems

    def model_post_init(self, __context):
        # Refuse to start a production process with any of them, reporting all at once
        if not self.IS_PRODUCTION:
            return
        problems = self.production_problems()
        if problems:
            raise ValueError(
                "Refusing to start in production:\n" + "\n".join(f"  - {p}" for p in problems)
            )

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, value):
        # Accept "a,b" as well as a JSON list
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


settings = Settings()
