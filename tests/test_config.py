import logging

import pytest
from fastapi.testclient import TestClient

from booking_relay.config import Settings
from booking_relay.errors import ConfigurationError
from booking_relay.server import create_app

from conftest import FakeMailer


def _settings(**overrides):
    return Settings(_env_file=None, **overrides)


def test_defaults():
    settings = _settings()

    assert settings.PORT == 5000
    assert settings.SMTP_SERVER == "smtp.gmail.com"
    assert settings.SMTP_PORT == 587
    assert settings.BUILD_DIR == "build"


def test_missing_gateway_credentials_are_reported():
    settings = _settings(RAZORPAY_KEY_ID="rzp_test_x")

    assert settings.is_gateway_configured is False
    assert settings.validate_required_config() == ["RAZORPAY_SECRET is required"]


def test_create_app_refuses_to_start_without_gateway_credentials():
    with pytest.raises(ConfigurationError) as exc_info:
        create_app(settings=_settings(), mailer=FakeMailer())

    assert "RAZORPAY_KEY_ID is required" in exc_info.value.errors
    assert "RAZORPAY_SECRET is required" in exc_info.value.errors


def test_missing_email_credentials_degrade_without_failing(tmp_path):
    settings = _settings(
        RAZORPAY_KEY_ID="rzp_test_x",
        RAZORPAY_SECRET="secret",
        BUILD_DIR=str(tmp_path / "none"),
    )

    app = create_app(settings=settings)

    assert settings.is_email_configured is False
    assert app.state.mailer.sender_address == ""


def test_admin_email_falls_back_to_email_user():
    assert _settings(EMAIL_USER="coach@example.com").admin_email == "coach@example.com"
    assert _settings(EMAIL_USER="coach@example.com", ADMIN_EMAIL="desk@example.com").admin_email == "desk@example.com"


@pytest.mark.parametrize("raw,expected", [
    ("", ""),
    ("/", ""),
    ("backend", "/backend"),
    ("/backend/", "/backend"),
])
def test_api_prefix_normalization(raw, expected):
    assert _settings(API_PREFIX=raw).api_prefix == expected


def test_cors_origins_split():
    settings = _settings(CORS_ORIGINS="https://a.example, https://b.example,")
    assert settings.cors_origins == ["https://a.example", "https://b.example"]


def test_config_summary_hides_secrets():
    settings = _settings(
        RAZORPAY_KEY_ID="rzp_live_ABCDEFGHIJ12345",
        RAZORPAY_SECRET="very-secret",
        EMAIL_PASSWORD="app-password",
    )
    summary = settings.get_config_summary()

    assert summary["razorpay_key_id"] == "rzp_live_A..."
    assert "very-secret" not in str(summary)
    assert "app-password" not in str(summary)


def test_environment_variables_are_read(monkeypatch):
    monkeypatch.setenv("RAZORPAY_KEY_ID", "rzp_test_env")
    monkeypatch.setenv("PORT", "8080")

    settings = _settings()

    assert settings.RAZORPAY_KEY_ID == "rzp_test_env"
    assert settings.PORT == 8080


def test_startup_logs_config_summary_without_secrets(settings, gateway, caplog):
    settings.RAZORPAY_SECRET = "very-secret"
    app = create_app(settings=settings, gateway=gateway, mailer=FakeMailer())

    with caplog.at_level(logging.INFO, logger="booking_relay.server"):
        with TestClient(app):
            pass

    summary_lines = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Configuration:")]
    assert len(summary_lines) == 1
    assert "'gateway_configured': True" in summary_lines[0]
    assert "very-secret" not in caplog.text
    assert "app-password" not in caplog.text
