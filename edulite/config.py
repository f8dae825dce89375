import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_JWT_SECRET = "change-me-in-production"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _database_url() -> str:
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit
    db_path = os.getenv("DB_PATH", "edulite.db")
    return f"sqlite:///{db_path}"


@dataclass(frozen=True)
class Settings:
    jwt_secret: str = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    jwt_exp_minutes: int = int(os.getenv("JWT_EXP_MINUTES", "60"))
    database_url: str = _database_url()
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "4000"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    audit_log_path: str = os.getenv("AUDIT_LOG_PATH", "audit.log")
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "12"))
    rate_limit_window_seconds: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", str(15 * 60)))
    login_rate_limit: int = int(os.getenv("LOGIN_RATE_LIMIT", "10"))
    api_rate_limit: int = int(os.getenv("API_RATE_LIMIT", "100"))
    cors_origin_regex: str = os.getenv("CORS_ORIGIN_REGEX", r"^http://localhost:\d+$")
    seed_sample_data: bool = _env_flag("SEED_SAMPLE_DATA", "true")
    reset_token_exp_minutes: int = int(os.getenv("RESET_TOKEN_EXP_MINUTES", "30"))
    smtp_host: str = os.getenv("SMTP_SERVER", "smtp.gmail.com")
    smtp_port: int = int(os.getenv("SMTP_PORT", "587"))
    smtp_username: str = os.getenv("SMTP_EMAIL", "")
    smtp_password: str = os.getenv("SMTP_PASSWORD", "")
    api_url: str = os.getenv("EDULITE_API_URL", "http://localhost:4000")
    use_mock: bool = _env_flag("EDULITE_USE_MOCK", "false")


settings = Settings()
