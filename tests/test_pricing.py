"""Tests for rate card loading and configuration invariants."""
import json

import pytest
from pydantic import ValidationError

from hostquote.models import PricingConfig
from hostquote.pricing import PricingConfigError, get_pricing_config, get_pricing_names, load_pricing_config


def test_default_rate_card():
    config = get_pricing_config()
    assert config is not None
    assert config.currency == "CAD"
    assert config.billing_period == "monthly"
    assert config.costs.vm_base_cost == 6.05
    assert config.costs.cost_per_user is None
    assert config.vm_calculation.max_users_on_main_server == 13
    assert config.prerequisites.min_users == 1
    assert config.prerequisites.max_users is None


def test_rate_card_is_cached():
    assert get_pricing_config("default") is get_pricing_config("default")


def test_unknown_rate_card():
    assert get_pricing_config("nope") is None
    assert get_pricing_config("../default") is None


def test_rate_card_is_immutable(default_config):
    with pytest.raises(ValidationError):
        default_config.currency = "USD"
    with pytest.raises(ValidationError):
        default_config.vm_calculation.max_users_per_server = 99


def test_band_invariant(config_dict):
    config_dict["vm_calculation"]["min_users_per_server"] = 20
    with pytest.raises(ValidationError):
        PricingConfig.model_validate(config_dict)


def test_main_cap_invariant(config_dict):
    config_dict["vm_calculation"]["max_users_on_main_server"] = 14
    with pytest.raises(ValidationError):
        PricingConfig.model_validate(config_dict)


def test_prerequisite_bounds_invariant(config_dict):
    config_dict["prerequisites"] = {"min_users": 10, "max_users": 5}
    with pytest.raises(ValidationError):
        PricingConfig.model_validate(config_dict)


def test_negative_cost_rejected(config_dict):
    config_dict["costs"]["cpu_cost"] = -1
    with pytest.raises(ValidationError):
        PricingConfig.model_validate(config_dict)


def test_load_invalid_file(tmp_path, config_dict):
    config_dict["vm_calculation"]["min_users_per_server"] = 20
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(config_dict), encoding="utf-8")
    with pytest.raises(PricingConfigError):
        load_pricing_config(path)


def test_load_unreadable_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(PricingConfigError):
        load_pricing_config(path)
    with pytest.raises(PricingConfigError):
        load_pricing_config(tmp_path / "missing.json")


def test_override_via_env(write_pricing, config_dict):
    config_dict["currency"] = "USD"
    config_dict["billing_period"] = "annual"
    write_pricing(config_dict)
    config = get_pricing_config()
    assert config.currency == "USD"
    assert config.billing_period == "annual"


def test_pricing_names():
    names = get_pricing_names()
    ids = [n["id"] for n in names]
    assert "default" in ids
    default = next(n for n in names if n["id"] == "default")
    assert default["name"] == "MIR-RT sur BZ Cloud"
    assert default["currency"] == "CAD"
