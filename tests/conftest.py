import pytest

from giftdraw.core.config import Settings


@pytest.fixture
def settings():
    return Settings(
        host="127.0.0.1",
        port=8080,
        log_level="DEBUG",
        log_path="logs/test.log",
        smtp_host="smtp.example.com",
        smtp_port=465,
        smtp_use_ssl=True,
        smtp_user="santa@example.com",
        smtp_password="secret",
        mail_from="santa@example.com",
        notify_rate_limit=2,
        notify_rate_period=60,
    )
