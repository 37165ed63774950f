from pathlib import Path

import pytest
from pydantic import ValidationError

from filecourier.errors import FatalConfigError
from filecourier.uploaders import WebhookUploader, WorkspaceUploader, build_uploader
from filecourier.utils.config import Settings
from filecourier.utils.helpers import parse_mapping

ENV_VARS = [
    "WATCH_DIR",
    "IGNORE_DOTFILES",
    "UPLOADER",
    "WEBHOOK_URL",
    "WORKSPACE_TOKEN",
    "WORKSPACE_CHANNEL",
    "WORKSPACE_CHANNEL_MAP",
    "WORKSPACE_API_URL",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def load() -> Settings:
    return Settings(_env_file=None)


def test_defaults():
    settings = load()

    assert settings.watch_dir is None
    assert settings.ignore_dotfiles is True
    assert settings.workspace_api_url == "https://slack.com/api"


def test_values_come_from_environment(monkeypatch):
    monkeypatch.setenv("WATCH_DIR", "/srv/drop")
    monkeypatch.setenv("IGNORE_DOTFILES", "false")
    monkeypatch.setenv("WEBHOOK_URL", "https://hooks.example.com/x")

    settings = load()

    assert settings.watch_dir == Path("/srv/drop")
    assert settings.ignore_dotfiles is False
    assert settings.get_uploader_kind() == "webhook"


def test_invalid_boolean_is_rejected(monkeypatch):
    monkeypatch.setenv("IGNORE_DOTFILES", "maybe")

    with pytest.raises(ValidationError):
        load()


def test_no_destination_is_fatal():
    with pytest.raises(FatalConfigError, match="no destination"):
        load().get_uploader_kind()


def test_token_selects_workspace(monkeypatch):
    monkeypatch.setenv("WORKSPACE_TOKEN", "xoxb-1")
    monkeypatch.setenv("WORKSPACE_CHANNEL", "C1")
    monkeypatch.setenv("WORKSPACE_CHANNEL_MAP", "reports=C2, logs/app = C3")

    settings = load()
    uploader = build_uploader(settings)

    assert isinstance(uploader, WorkspaceUploader)
    assert uploader.default_channel == "C1"
    assert uploader.channel_map == {"reports": "C2", "logs/app": "C3"}


def test_webhook_wins_when_both_present(monkeypatch):
    monkeypatch.setenv("WEBHOOK_URL", "https://hooks.example.com/x")
    monkeypatch.setenv("WORKSPACE_TOKEN", "xoxb-1")

    assert isinstance(build_uploader(load()), WebhookUploader)


def test_explicit_uploader_requires_its_credentials(monkeypatch):
    monkeypatch.setenv("UPLOADER", "workspace")
    monkeypatch.setenv("WEBHOOK_URL", "https://hooks.example.com/x")

    with pytest.raises(FatalConfigError, match="WORKSPACE_TOKEN"):
        build_uploader(load())


def test_bad_channel_map_is_fatal(monkeypatch):
    monkeypatch.setenv("WORKSPACE_TOKEN", "xoxb-1")
    monkeypatch.setenv("WORKSPACE_CHANNEL_MAP", "reports")

    with pytest.raises(FatalConfigError, match="WORKSPACE_CHANNEL_MAP"):
        build_uploader(load())


def test_parse_mapping_skips_blank_entries():
    assert parse_mapping(" a=1 ,, /b/=2,") == {"a": "1", "b": "2"}
    assert parse_mapping("") == {}


@pytest.mark.parametrize(
    "url",
    [
        "https://hooks.example.com/\x7fx",
        "http://files.example/\x00up",
        "ftp://hooks.example.com/x",
        "hooks.example.com/x",
        "https:///x",
    ],
)
def test_bad_webhook_url_is_fatal(url):
    settings = Settings(_env_file=None, webhook_url=url)

    with pytest.raises(FatalConfigError, match="WEBHOOK_URL"):
        build_uploader(settings)


def test_bad_workspace_api_url_is_fatal(monkeypatch):
    monkeypatch.setenv("WORKSPACE_TOKEN", "xoxb-1")
    monkeypatch.setenv("WORKSPACE_API_URL", "file:///tmp/api")

    with pytest.raises(FatalConfigError, match="WORKSPACE_API_URL"):
        build_uploader(load())
