import pytest

from reqvim.runtime import telemetry
from reqvim.runtime.telemetry import PRESETS, TelemetrySettings


def test_settings_defaults_without_environment() -> None:
    settings = TelemetrySettings.from_env({})

    assert settings == TelemetrySettings()
    assert settings.console is True
    assert settings.log_file == ""


def test_settings_read_prefixed_variables() -> None:
    settings = TelemetrySettings.from_env(
        {
            "REQVIM_LOG_LEVEL": "warning",
            "REQVIM_LOG_FILE": "/tmp/reqvim.log",
            "REQVIM_DISABLE_CONSOLE": "yes",
            "REQVIM_LOG_JSON": "1",
            "REQVIM_LOG_BUFFER_SIZE": "512",
            "REQVIM_PROFILE": "off",
        }
    )

    assert settings.level == "WARNING"
    assert settings.log_file == "/tmp/reqvim.log"
    assert settings.console is False
    assert settings.json is True
    assert settings.buffer_size == 512
    assert settings.profile is False


def test_bad_buffer_size_is_ignored() -> None:
    settings = TelemetrySettings.from_env({"REQVIM_LOG_BUFFER_SIZE": "lots"})

    assert settings.buffer_size == 0


def test_production_preset_keeps_the_terminal_clean() -> None:
    settings = PRESETS["production"](TelemetrySettings())

    assert settings.console is False
    assert settings.log_file == "reqvim.log"
    assert settings.buffer_size > 0


def test_production_preset_keeps_explicit_log_file() -> None:
    base = TelemetrySettings(log_file="custom.log")

    assert PRESETS["production"](base).log_file == "custom.log"


def test_configure_rejects_unknown_preset() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="loud")


def test_configure_rejects_config_with_preset() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="quiet")


def test_span_reraises_errors() -> None:
    with pytest.raises(RuntimeError):
        with telemetry.span("test::span", metadata={"key": "value"}) as handle:
            handle.add_metadata("step", 1)
            raise RuntimeError("boom")
