import pytest


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    """Point the defaults store at a throwaway file."""
    path = tmp_path / "config" / "config.json"
    monkeypatch.setenv("MYSQL_ASSISTANT_CONFIG", str(path))
    return path


@pytest.fixture
def dump_dir(tmp_path):
    path = tmp_path / "dumps"
    path.mkdir()
    return path
