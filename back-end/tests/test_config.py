import pytest
from pydantic import ValidationError

from config import Settings


def test_mongo_uri_is_required(monkeypatch):
    monkeypatch.delenv("MONGO_URI", raising=False)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_defaults(monkeypatch):
    monkeypatch.setenv("MONGO_URI", "mongodb://db:27017")
    for name in ("PORT", "DATABASE_NAME", "COLLECTION_NAME", "BCRYPT_ROUNDS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)
    assert settings.mongo_uri == "mongodb://db:27017"
    assert settings.port == 5000
    assert settings.database_name == "studentsDb"
    assert settings.collection_name == "studentsReg"
    assert settings.bcrypt_rounds == 10
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("MONGO_URI", "mongodb://db:27017")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)
    assert settings.port == 8080
    assert settings.log_level == "DEBUG"


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("MONGO_URI", "mongodb://db:27017")
    monkeypatch.setenv("LOG_LEVEL", "LOUD")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)
