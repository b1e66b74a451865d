import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    log_level: str
    log_path: str
    smtp_host: str
    smtp_port: int
    smtp_use_ssl: bool
    smtp_user: str
    smtp_password: str
    mail_from: str
    event_name: str = "Secret Santa"
    max_participants: int = 100
    search_max_steps: int = 1_000_000
    notify_rate_limit: int = 5
    notify_rate_period: int = 60
    trust_proxy: bool = False
    cors_origin: str = "*"


def _bool_env(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUE_VALUES


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from exc


def load_settings() -> Settings:
    smtp_user = os.getenv("SMTP_USER")
    smtp_password = os.getenv("SMTP_PASSWORD")

    if not smtp_user:
        raise ValueError("SMTP_USER is required. Set it in the environment or .env file.")
    if not smtp_password:
        raise ValueError("SMTP_PASSWORD is required. Set it in the environment or .env file.")

    max_participants = _int_env("MAX_PARTICIPANTS", 100)
    if max_participants < 2:
        raise ValueError("MAX_PARTICIPANTS must be at least 2.")

    return Settings(
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int_env("PORT", 8080),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_path=os.getenv("LOG_PATH", "logs/giftdraw.log"),
        smtp_host=os.getenv("SMTP_HOST", "smtp.gmail.com"),
        smtp_port=_int_env("SMTP_PORT", 465),
        smtp_use_ssl=_bool_env("SMTP_USE_SSL", "true"),
        smtp_user=smtp_user,
        smtp_password=smtp_password,
        mail_from=os.getenv("MAIL_FROM") or smtp_user,
        event_name=os.getenv("EVENT_NAME", "Secret Santa"),
        max_participants=max_participants,
        search_max_steps=_int_env("SEARCH_MAX_STEPS", 1_000_000),
        notify_rate_limit=_int_env("NOTIFY_RATE_LIMIT", 5),
        notify_rate_period=_int_env("NOTIFY_RATE_PERIOD", 60),
        trust_proxy=_bool_env("TRUST_PROXY", "false"),
        cors_origin=os.getenv("CORS_ORIGIN", "*"),
    )
