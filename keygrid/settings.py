import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class Settings:
    BASE_DIR: Path = field(default_factory=lambda: Path(__file__).resolve().parent.parent)

    DEBUG_DIR: Path = field(init=False)

    MAX_GRID_CELLS: int = 2500
    RECURSION_HEADROOM: int = 1000

    STRICT_KEY_PAIRING: bool = False
    PRUNE_NON_IMPROVING: bool = True
    TRACE_SEARCH: bool = False

    MAX_UPLOAD_BYTES: int = 1_000_000
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    def __post_init__(self):
        self.DEBUG_DIR = self.BASE_DIR / "debug"

        # Override from environment
        for fld in self.__dataclass_fields__:
            env_val = os.environ.get(fld)
            if env_val is not None:
                current = getattr(self, fld)
                if isinstance(current, bool):
                    setattr(self, fld, env_val.lower() in ("1", "true", "yes"))
                elif isinstance(current, int):
                    setattr(self, fld, int(env_val))
                elif isinstance(current, float):
                    setattr(self, fld, float(env_val))
                elif isinstance(current, Path):
                    setattr(self, fld, Path(env_val))
                else:
                    setattr(self, fld, env_val)


# Fields that may be changed at runtime through /api/settings
EDITABLE_FIELDS: dict[str, type] = {
    "MAX_GRID_CELLS": int,
    "STRICT_KEY_PAIRING": bool,
    "PRUNE_NON_IMPROVING": bool,
    "TRACE_SEARCH": bool,
    "LOG_LEVEL": str,
    "DEBUG": bool,
}


def get_editable_settings(cfg: Settings) -> dict:
    return {name: getattr(cfg, name) for name in EDITABLE_FIELDS}


def update_settings(cfg: Settings, **values) -> dict[str, str]:
    """Apply values to the editable fields of cfg.

    Valid fields are applied even when others fail; returns a mapping of
    field name to error message for the ones that were rejected.
    """
    errors: dict[str, str] = {}
    for name, raw in values.items():
        if name not in cfg.__dataclass_fields__:
            errors[name] = "unknown setting"
            continue
        if name not in EDITABLE_FIELDS:
            errors[name] = "setting is not editable"
            continue

        ftype = EDITABLE_FIELDS[name]
        try:
            if ftype is bool:
                if isinstance(raw, str):
                    value = raw.strip().lower() in ("1", "true", "yes")
                else:
                    value = bool(raw)
            elif ftype is int:
                if isinstance(raw, bool):
                    raise ValueError("expected an integer")
                value = int(raw)
            else:
                value = ftype(raw)
        except (TypeError, ValueError) as e:
            errors[name] = f"invalid {ftype.__name__}: {e}"
            continue

        if name == "MAX_GRID_CELLS" and value <= 0:
            errors[name] = "must be positive"
            continue
        if name == "LOG_LEVEL":
            value = value.upper()
            if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
                errors[name] = f"unknown log level {raw!r}"
                continue
        setattr(cfg, name, value)
    return errors


settings = Settings()
