import logging

import pytest

from common.app_setup import load_settings, print_and_log, print_error, setup_logging


def test_defaults_without_config(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    settings = load_settings(environ={})
    assert settings.app_name == "rescat"
    assert settings.port == 8000
    assert settings.catalog is None


def test_yaml_file_and_env_overrides(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("port: 9001\nloglevel: debug\ncatalog: /tmp/catalog.yaml\n")
    settings = load_settings(config, environ={"RESCAT_PORT": "9100"})
    assert settings.port == 9100
    assert settings.loglevel == "DEBUG"
    assert settings.catalog == "/tmp/catalog.yaml"


def test_config_from_environment(tmp_path):
    config = tmp_path / "rescat.yaml"
    config.write_text("host: 0.0.0.0\n")
    settings = load_settings(environ={"RESCAT_CONFIG": str(config)})
    assert settings.host == "0.0.0.0"


def test_unknown_setting_rejected(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("colour: blue\n")
    with pytest.raises(ValueError):
        load_settings(config, environ={})


def test_missing_explicit_config(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.yaml", environ={})


def test_print_and_log_writes_logfile(tmp_path, capsys):
    logfile = tmp_path / "log.txt"
    logger = setup_logging(app_name="rescat-test", daemon=False, loglevel=logging.INFO, logfile=str(logfile))
    try:
        print_and_log("Added [Draft] resource")
        print_error("Something failed")
        captured = capsys.readouterr()
        assert "Added [Draft] resource" in captured.out
        assert "Something failed" in captured.err
        for handler in logger.handlers:
            handler.flush()
        content = logfile.read_text()
        assert "Added [Draft] resource" in content
        assert "ERROR" in content
    finally:
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()
