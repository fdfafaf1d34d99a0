import pytest

from app.db import bootstrap


def _raise_error(message: str):
    raise RuntimeError(message)


def test_runtime_schema_bootstrap_raises_on_validation_failure(monkeypatch):
    monkeypatch.setattr(bootstrap.Base.metadata, "create_all", lambda bind: None)
    monkeypatch.setattr(
        bootstrap,
        "_assert_required_columns",
        lambda: _raise_error("missing required schema"),
    )

    with pytest.raises(RuntimeError, match="Runtime schema compatibility bootstrap failed"):
        bootstrap.ensure_runtime_schema_compatibility()


def test_required_columns_cover_registry_and_store_tables():
    assert set(bootstrap.REQUIRED_COLUMNS) == {"faculty_reservations", "generated_timetables"}
    assert {"faculty_id", "day", "period", "class_info"} <= bootstrap.REQUIRED_COLUMNS["faculty_reservations"]
