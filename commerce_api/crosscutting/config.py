"""
===============================================================================
TARJETA CRC - crosscutting/config.py (Settings de la API)
===============================================================================

Responsabilidades:
  - Leer la configuración desde variables de entorno / `.env`.
  - Rechazar valores inválidos al arrancar (TTL, costos Argon2, longitudes).
  - Endurecer producción: JWT_SECRET fuerte y seed de admin deshabilitado.

Colaboradores:
  - container.py: costos de hashing, TTL del token, rol por defecto.
  - api/main.py: CORS, pool, validación de arranque.
  - crosscutting/logger.py: LOG_LEVEL / LOG_JSON.

Notas:
  - Una sola instancia por proceso (get_settings, lru_cache).
  - Nada de esto es controlable por request.
===============================================================================
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_KNOWN_WEAK_SECRETS = frozenset({"dev-secret", "secret", "changeme", "change-me", "password"})
_MIN_PRODUCTION_SECRET_LEN = 32
_TEST_ENVS = frozenset({"test", "testing", "ci"})


class Settings(BaseSettings):
    """Configuración tipada. Sólo DATABASE_URL es obligatoria."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str
    app_env: str = "development"

    # HTTP
    allowed_origins: str = "http://localhost:3000"
    cors_allow_credentials: bool = False
    max_body_bytes: int = 1_048_576

    # Logs
    log_level: str = "INFO"
    log_json: bool = True

    # Tokens de acceso (HS256)
    jwt_secret: str = "dev-secret"
    jwt_access_ttl_minutes: int = 60

    # Argon2id + política de contraseñas
    password_time_cost: int = 3
    password_memory_cost: int = 65_536  # KiB
    password_parallelism: int = 4
    password_min_length: int = 8

    # Rol asignado en el alta self-service (2 = User)
    default_role_id: int = 2

    # Pool PostgreSQL
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30_000

    # Seed de admin (sólo APP_ENV=local)
    dev_seed_admin: bool = False
    dev_seed_admin_document: str = "00000000"
    dev_seed_admin_password: str = "Admin#12345"
    dev_seed_admin_fullname: str = "Administrador"
    dev_seed_admin_email: str = "admin@example.com"
    dev_seed_admin_role_id: int = 1

    @field_validator(
        "jwt_access_ttl_minutes",
        "password_min_length",
        "password_time_cost",
        "password_parallelism",
    )
    @classmethod
    def must_be_positive(cls, value: int, info) -> int:
        if value <= 0:
            raise ValueError(f"{info.field_name} debe ser mayor a 0")
        return value

    @model_validator(mode="after")
    def validate_security_requirements(self) -> "Settings":
        """Producción no arranca con secretos débiles ni con el seed activo."""
        if not self.is_production():
            return self

        secret = (self.jwt_secret or "").strip()
        if not secret or secret.lower() in _KNOWN_WEAK_SECRETS:
            raise ValueError("JWT_SECRET no puede ser un valor por defecto en producción")
        if len(secret) < _MIN_PRODUCTION_SECRET_LEN:
            raise ValueError(
                f"JWT_SECRET debe tener al menos {_MIN_PRODUCTION_SECRET_LEN} caracteres en producción"
            )
        if self.dev_seed_admin:
            raise ValueError("DEV_SEED_ADMIN debe estar deshabilitado en producción")
        return self

    def get_allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    def normalized_env(self) -> str:
        return self.app_env.strip().lower()

    def is_production(self) -> bool:
        return self.normalized_env() == "production"

    def is_test(self) -> bool:
        return self.normalized_env() in _TEST_ENVS


@lru_cache
def get_settings() -> Settings:
    """Settings del proceso (lanza ValidationError si el entorno es inválido)."""
    return Settings()
