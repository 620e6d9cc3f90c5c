"""Provider reachability checks."""

from .checks import ZERO_ADDRESS, ProviderStatus, check_providers

__all__ = ["ZERO_ADDRESS", "ProviderStatus", "check_providers"]
