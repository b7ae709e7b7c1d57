import logging
import os

import pytest



@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """No LABKEY_* variables and an empty home directory for every test."""
    for var in ("LABKEY_URL", "LABKEY_APIKEY", "LABKEY_NETRC"):
        monkeypatch.delenv(var, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    return home


@pytest.fixture
def write_netrc(tmp_path):
    def _write(text, name="netrc", mode=0o600):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        os.chmod(path, mode)
        return path

    return _write




@pytest.fixture
def package_logger():
    """The labkey_query logger, restored to its prior state afterwards."""
    logger = logging.getLogger("labkey_query")
    handlers, level, propagate = logger.handlers[:], logger.level, logger.propagate
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
