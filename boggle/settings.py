import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class Settings:
    BASE_DIR: Path = field(default_factory=lambda: Path(__file__).resolve().parent.parent)

    DICTIONARY_PATH: Path = field(init=False)

    MIN_WORD_LENGTH: int = 3
    MAX_WORD_LENGTH: int = 16
    MAX_RESULTS: int = 50

    DEFAULT_ROWS: int = 4
    DEFAULT_COLS: int = 4
    MAX_GRID_CELLS: int = 100

    NTFY_TOPIC: str = "boggle-solver"
    NTFY_URL: str = "https://ntfy.sh"
    NOTIFY_ENABLED: bool = False
    NOTIFY_WORDS_PER_GROUP: int = 10

    DEBUG: bool = False
    PORT: int = 10001

    def __post_init__(self):
        self.DICTIONARY_PATH = self.BASE_DIR / "dictionary.txt"

        # Override from environment
        for fld in self.__dataclass_fields__:
            env_val = os.environ.get(fld)
            if env_val is not None:
                setattr(self, fld, _coerce(getattr(self, fld), env_val))


def _coerce(current, value):
    if isinstance(current, bool):
        if isinstance(value, bool):
            return value
        return str(value).lower() in ("1", "true", "yes")
    if isinstance(current, int):
        return int(value)
    if isinstance(current, float):
        return float(value)
    if isinstance(current, Path):
        return Path(value)
    return str(value)


# Fields that may be changed at runtime through /api/settings
EDITABLE_FIELDS: dict[str, type] = {
    "MIN_WORD_LENGTH": int,
    "MAX_WORD_LENGTH": int,
    "MAX_RESULTS": int,
    "DEFAULT_ROWS": int,
    "DEFAULT_COLS": int,
    "NOTIFY_ENABLED": bool,
    "NOTIFY_WORDS_PER_GROUP": int,
    "NTFY_TOPIC": str,
    "DEBUG": bool,
}

# Changing any of these requires rebuilding the trie
TRIE_FIELDS = ("MIN_WORD_LENGTH", "MAX_WORD_LENGTH")

# Smallest accepted value per field; words shorter than 3 are never reported
FIELD_MINIMUMS = {
    "MIN_WORD_LENGTH": 3,
    "MAX_WORD_LENGTH": 3,
    "DEFAULT_ROWS": 1,
    "DEFAULT_COLS": 1,
}


def get_editable_settings(cfg: Settings) -> dict:
    return {name: getattr(cfg, name) for name in EDITABLE_FIELDS}


def update_settings(cfg: Settings, **changes) -> dict[str, str]:
    """Apply typed updates to *cfg*. Returns {field: error} for rejected fields.

    Valid fields are applied even when others in the same call are rejected.
    """
    errors: dict[str, str] = {}
    pending: dict = {}
    for name, value in changes.items():
        if name not in EDITABLE_FIELDS:
            if hasattr(cfg, name):
                errors[name] = "field is not editable"
            else:
                errors[name] = "unknown field"
            continue

        expected = EDITABLE_FIELDS[name]
        try:
            if expected is bool:
                coerced = _coerce(False, value)
            elif expected is int:
                if isinstance(value, bool):
                    raise ValueError("expected an integer")
                coerced = int(value)
            else:
                coerced = expected(value)
        except (TypeError, ValueError) as e:
            errors[name] = f"invalid {expected.__name__}: {e}"
            continue

        if name in FIELD_MINIMUMS and coerced < FIELD_MINIMUMS[name]:
            errors[name] = f"must be at least {FIELD_MINIMUMS[name]}"
            continue
        if expected is int and coerced < 0:
            errors[name] = "must not be negative"
            continue
        pending[name] = coerced

    min_len = pending.get("MIN_WORD_LENGTH", cfg.MIN_WORD_LENGTH)
    max_len = pending.get("MAX_WORD_LENGTH", cfg.MAX_WORD_LENGTH)
    if min_len > max_len:
        for name in TRIE_FIELDS:
            if name in pending:
                del pending[name]
                errors[name] = "MIN_WORD_LENGTH must not exceed MAX_WORD_LENGTH"

    for name, value in pending.items():
        setattr(cfg, name, value)
    return errors


settings = Settings()
