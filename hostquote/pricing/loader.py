"""Load rate cards (PricingConfig) from JSON. Files are validated once and cached."""
import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from hostquote.models import PricingConfig

_LOG = logging.getLogger(__name__)

_PRICING_DIR = Path(__file__).resolve().parent
_CONFIG_CACHE: dict[str, PricingConfig] = {}
_NAMES: dict[str, str] = {}

DEFAULT_PRICING = "default"


class PricingConfigError(ValueError):
    """Rate card file is unreadable or violates the configuration invariants."""


def load_pricing_config(path: str | Path) -> PricingConfig:
    """Parse and validate one rate card file. Raises PricingConfigError."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise PricingConfigError(f"Cannot read rate card {path}: {e}") from e
    try:
        return PricingConfig.model_validate(data)
    except ValidationError as e:
        raise PricingConfigError(f"Invalid rate card {path}: {e}") from e


def _override_path() -> Path | None:
    raw = (os.environ.get("HOSTQUOTE_PRICING_FILE") or "").strip()
    return Path(raw) if raw else None


def _path_for(name: str) -> Path | None:
    if name == DEFAULT_PRICING:
        override = _override_path()
        if override is not None:
            return override
    path = _PRICING_DIR / f"{name}.json"
    if not path.is_file():
        return None
    return path


def _display_name(path: Path, fallback: str) -> str:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f).get("name") or fallback
    except (json.JSONDecodeError, OSError):
        return fallback


def get_pricing_config(name: str = DEFAULT_PRICING) -> PricingConfig | None:
    """Return the named rate card, or None if no such file. Invalid files raise PricingConfigError."""
    if name in _CONFIG_CACHE:
        return _CONFIG_CACHE[name]
    if not name or "/" in name or "\\" in name or name.startswith("."):
        return None
    path = _path_for(name)
    if path is None:
        return None
    config = load_pricing_config(path)
    _LOG.info("Loaded rate card %s from %s", name, path)
    _CONFIG_CACHE[name] = config
    _NAMES[name] = _display_name(path, name)
    return config


def _all_pricing_ids() -> list[str]:
    ids = [p.stem for p in _PRICING_DIR.iterdir() if p.suffix == ".json"]
    if DEFAULT_PRICING not in ids and _override_path() is not None:
        ids.append(DEFAULT_PRICING)
    return sorted(ids)


def get_pricing_names() -> list[dict[str, Any]]:
    """Return list of { id, name, currency, billing_period } for every rate card."""
    result = []
    for pid in _all_pricing_ids():
        try:
            config = get_pricing_config(pid)
        except PricingConfigError as e:
            _LOG.warning("Skipping rate card %s: %s", pid, e)
            continue
        if config is None:
            continue
        result.append({
            "id": pid,
            "name": _NAMES.get(pid, pid),
            "currency": config.currency,
            "billing_period": config.billing_period,
        })
    return result


def clear_cache() -> None:
    """Forget loaded rate cards (after changing HOSTQUOTE_PRICING_FILE)."""
    _CONFIG_CACHE.clear()
    _NAMES.clear()
