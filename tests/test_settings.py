from pathlib import Path

from keygrid.settings import Settings, EDITABLE_FIELDS, update_settings, get_editable_settings


def _fresh_settings() -> Settings:
    """Create a fresh Settings instance for testing."""
    return Settings()


def test_defaults():
    cfg = _fresh_settings()
    assert cfg.PRUNE_NON_IMPROVING is True
    assert cfg.TRACE_SEARCH is False
    assert cfg.STRICT_KEY_PAIRING is False
    assert cfg.DEBUG_DIR == cfg.BASE_DIR / "debug"


def test_env_override(monkeypatch):
    monkeypatch.setenv("MAX_GRID_CELLS", "64")
    monkeypatch.setenv("PRUNE_NON_IMPROVING", "false")
    monkeypatch.setenv("TRACE_SEARCH", "yes")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("BASE_DIR", "/tmp/keygrid")
    cfg = _fresh_settings()
    assert cfg.MAX_GRID_CELLS == 64
    assert cfg.PRUNE_NON_IMPROVING is False
    assert cfg.TRACE_SEARCH is True
    assert cfg.LOG_LEVEL == "DEBUG"
    assert cfg.BASE_DIR == Path("/tmp/keygrid")


def test_editable_fields_exist_on_settings():
    """All editable fields must be actual attributes on Settings."""
    cfg = _fresh_settings()
    for field_name in EDITABLE_FIELDS:
        assert hasattr(cfg, field_name), f"{field_name} not found on Settings"


def test_get_editable_settings():
    cfg = _fresh_settings()
    result = get_editable_settings(cfg)
    assert set(result.keys()) == set(EDITABLE_FIELDS.keys())
    assert result["PRUNE_NON_IMPROVING"] == cfg.PRUNE_NON_IMPROVING
    assert result["MAX_GRID_CELLS"] == cfg.MAX_GRID_CELLS


def test_update_int_field():
    cfg = _fresh_settings()
    errors = update_settings(cfg, MAX_GRID_CELLS=100)
    assert errors == {}
    assert cfg.MAX_GRID_CELLS == 100


def test_update_int_rejects_non_positive_and_garbage():
    cfg = _fresh_settings()
    errors = update_settings(cfg, MAX_GRID_CELLS=0)
    assert "MAX_GRID_CELLS" in errors
    errors = update_settings(cfg, MAX_GRID_CELLS="lots")
    assert "MAX_GRID_CELLS" in errors
    assert cfg.MAX_GRID_CELLS == Settings().MAX_GRID_CELLS


def test_update_bool_field():
    cfg = _fresh_settings()
    original = cfg.DEBUG
    errors = update_settings(cfg, DEBUG=not original)
    assert errors == {}
    assert cfg.DEBUG is (not original)


def test_update_bool_from_string():
    cfg = _fresh_settings()
    errors = update_settings(cfg, TRACE_SEARCH="true")
    assert errors == {}
    assert cfg.TRACE_SEARCH is True

    errors = update_settings(cfg, TRACE_SEARCH="false")
    assert errors == {}
    assert cfg.TRACE_SEARCH is False


def test_update_log_level():
    cfg = _fresh_settings()
    assert update_settings(cfg, LOG_LEVEL="warning") == {}
    assert cfg.LOG_LEVEL == "WARNING"
    errors = update_settings(cfg, LOG_LEVEL="chatty")
    assert "LOG_LEVEL" in errors
    assert cfg.LOG_LEVEL == "WARNING"


def test_update_multiple_fields():
    cfg = _fresh_settings()
    errors = update_settings(cfg, MAX_GRID_CELLS=10, PRUNE_NON_IMPROVING=False, STRICT_KEY_PAIRING=True)
    assert errors == {}
    assert cfg.MAX_GRID_CELLS == 10
    assert cfg.PRUNE_NON_IMPROVING is False
    assert cfg.STRICT_KEY_PAIRING is True


def test_update_non_editable_field_returns_error():
    cfg = _fresh_settings()
    errors = update_settings(cfg, RECURSION_HEADROOM=5)
    assert "RECURSION_HEADROOM" in errors
    assert cfg.RECURSION_HEADROOM == 1000


def test_update_unknown_field_returns_error():
    cfg = _fresh_settings()
    errors = update_settings(cfg, NONEXISTENT_FIELD=42)
    assert "NONEXISTENT_FIELD" in errors


def test_update_partial_error():
    """Valid fields update even when invalid fields are present."""
    cfg = _fresh_settings()
    errors = update_settings(cfg, MAX_GRID_CELLS=25, BAD_FIELD="nope")
    assert "BAD_FIELD" in errors
    assert cfg.MAX_GRID_CELLS == 25
