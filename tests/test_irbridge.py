import logging

import pytest

import irbridge


@pytest.fixture
def started(tmp_path, monkeypatch):
    """Runs irbridge.run() in tmp_path without starting the event loop."""
    monkeypatch.chdir(tmp_path)
    for name in ("IS_VERBOSE", "IRBRIDGE_CONFIG"):
        monkeypatch.delenv(name, raising=False)

    calls = []

    def fake_run(coro):
        calls.append(coro)
        coro.close()

    monkeypatch.setattr(irbridge.asyncio, "run", fake_run)
    return calls


def test_config_file_is_logged(started, tmp_path, caplog):
    (tmp_path / "irbridge.yaml").write_text("IR_HOST: ir.local\n")

    with caplog.at_level(logging.INFO):
        irbridge.run()

    assert "Loaded configuration from irbridge.yaml" in caplog.text
    assert len(started) == 1


def test_verbose_from_config_enables_debug(started, tmp_path, caplog):
    (tmp_path / "irbridge.yaml").write_text("IS_VERBOSE: true\n")

    with caplog.at_level(logging.INFO):
        irbridge.run()
        assert logging.getLogger().level == logging.DEBUG
