import pytest

from settings import Settings, load_settings


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def test_defaults():
    settings = load_settings(environ={})
    assert settings == Settings()
    assert settings.pause_ms == 375
    assert settings.max_ir_repeat == 50
    assert settings.switch_backend is None


def test_environment_values_are_converted():
    settings = load_settings(
        environ={
            "LISTEN_PORT": "9000",
            "IR_HOST": "10.0.0.5",
            "PAUSE_MS": "500",
            "MAX_IR_REPEAT": "20",
            "IS_VERBOSE": "true",
            "BACKEND_TIMEOUT_S": "2.5",
        }
    )
    assert settings.listen_port == 9000
    assert settings.ir_host == "10.0.0.5"
    assert settings.pause_ms == 500
    assert settings.max_ir_repeat == 20
    assert settings.verbose is True
    assert settings.backend_timeout == 2.5


def test_blank_environment_value_is_ignored():
    assert load_settings(environ={"PAUSE_MS": "  "}).pause_ms == 375


def test_yaml_file_with_environment_override(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("roku_host: 10.0.0.9\nPAUSE_MS: 200\nIS_VERBOSE: yes\n")

    settings = load_settings(environ={"PAUSE_MS": "300"}, config_file=str(path))

    assert settings.roku_host == "10.0.0.9"
    assert settings.pause_ms == 300
    assert settings.verbose is True


def test_default_yaml_file_is_picked_up(tmp_path):
    (tmp_path / "irbridge.yaml").write_text("HASS_HOST: hass.local\n")
    settings = load_settings(environ={})
    assert settings.hass_host == "hass.local"
    assert settings.switch_backend == "hass"


def test_missing_explicit_config_file():
    with pytest.raises(FileNotFoundError):
        load_settings(environ={}, config_file="nope.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("PAUSE_MS: [unclosed\n")
    with pytest.raises(ValueError):
        load_settings(environ={}, config_file=str(path))


def test_invalid_number():
    with pytest.raises(ValueError, match="PAUSE_MS"):
        load_settings(environ={"PAUSE_MS": "fast"})


def test_repeat_cap_must_be_positive():
    with pytest.raises(ValueError):
        load_settings(environ={"MAX_IR_REPEAT": "0"})


def test_zway_requires_credentials():
    with pytest.raises(ValueError):
        load_settings(environ={"ZWAY_HOST": "hub.local"})


def test_zway_preferred_over_hass():
    settings = load_settings(
        environ={
            "ZWAY_HOST": "hub.local",
            "ZWAY_USERNAME": "admin",
            "ZWAY_PASSWORD": "pw",
            "HASS_HOST": "hass.local",
        }
    )
    assert settings.switch_backend == "zway"
