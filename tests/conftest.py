import pytest

from leasedesk.db.repo import reset_repository


@pytest.fixture(autouse=True)
def isolated_store(tmp_path, monkeypatch):
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.setenv("DB_MODE", "memory")
    yield reset_repository("memory")
