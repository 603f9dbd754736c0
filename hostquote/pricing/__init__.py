"""Rate cards (PricingConfig) shipped as JSON files in this directory."""
from hostquote.pricing.loader import (
    DEFAULT_PRICING,
    PricingConfigError,
    clear_cache,
    get_pricing_config,
    get_pricing_names,
    load_pricing_config,
)

__all__ = [
    "DEFAULT_PRICING",
    "PricingConfigError",
    "clear_cache",
    "get_pricing_config",
    "get_pricing_names",
    "load_pricing_config",
]
