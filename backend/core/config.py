import os



def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./benigna.db")

STORAGE_BASE_DIR = os.getenv("STORAGE_BASE_DIR", "benigna_data")
# 0 disables the quota check
STORAGE_QUOTA_BYTES = int(os.getenv("STORAGE_QUOTA_BYTES", "0"))
MAX_IMAGE_BYTES = int(os.getenv("MAX_IMAGE_BYTES", str(2 * 1024 * 1024)))

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

SEED_SAMPLE_DATA = _get_bool(os.getenv("SEED_SAMPLE_DATA"), default=True)
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@benigna.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

CORS_ORIGINS = _get_list(os.getenv("CORS_ORIGINS"), ["http://localhost:5173"])

def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if APP_ENV.lower() == "production" and ADMIN_PASSWORD == "admin123":
        raise RuntimeError("ADMIN_PASSWORD must be set in production.")
