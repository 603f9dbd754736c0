"""Pytest fixtures for HostQuote tests."""
import json
from pathlib import Path

import pytest

from hostquote.models import PricingConfig
from hostquote.pricing import clear_cache

DEFAULT_PRICING_FILE = Path(__file__).resolve().parent.parent / "hostquote" / "pricing" / "default.json"


@pytest.fixture(autouse=True)
def fresh_pricing(monkeypatch):
    """Each test sees the shipped default rate card, loaded from scratch."""
    monkeypatch.delenv("HOSTQUOTE_PRICING_FILE", raising=False)
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def config_dict():
    """Mutable copy of the default rate card, for building variants."""
    with open(DEFAULT_PRICING_FILE, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def default_config(config_dict):
    return PricingConfig.model_validate(config_dict)


@pytest.fixture
def write_pricing(tmp_path, monkeypatch):
    """Write a rate card dict to disk and make it the default via HOSTQUOTE_PRICING_FILE."""
    def _write(data: dict) -> Path:
        path = tmp_path / "pricing.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        monkeypatch.setenv("HOSTQUOTE_PRICING_FILE", str(path))
        clear_cache()
        return path
    return _write
