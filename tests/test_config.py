"""
Settings tests — defaults and environment overrides.
"""

from estimate_intake.config import Settings


def test_settings_fields():
    assert set(Settings.model_fields) == {
        "APP_NAME",
        "LOG_LEVEL",
        "CORS_ORIGINS",
        "TEMPLATES_DIR",
        "DEFAULT_TEMPLATE_ID",
        "PRESERVE_MANUAL_DERIVED_FIELDS",
    }


def test_settings_defaults():
    configured = Settings(_env_file=None)
    assert configured.DEFAULT_TEMPLATE_ID == "single_storey_extension"
    assert configured.PRESERVE_MANUAL_DERIVED_FIELDS is True


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("PRESERVE_MANUAL_DERIVED_FIELDS", "false")
    monkeypatch.setenv("DEFAULT_TEMPLATE_ID", "garden_room")
    configured = Settings()
    assert configured.PRESERVE_MANUAL_DERIVED_FIELDS is False
    assert configured.DEFAULT_TEMPLATE_ID == "garden_room"
