from .loader import find_config, load_config
from .models import CacheConfig, GatekeeperConfig, PolicyConfig

__all__ = [
    "CacheConfig",
    "GatekeeperConfig",
    "PolicyConfig",
    "find_config",
    "load_config",
]
