"""Locating and reading gatekeeper.yaml."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import GatekeeperConfig

CONFIG_ENV_VAR = "GATEKEEPER_CONFIG"

# ${VAR} or ${VAR:-fallback}
_ENV_REF = re.compile(r"\$\{(?P<name>\w+)(?::-(?P<default>[^}]*))?\}")


def find_config(cli_path: str | None = None) -> Path | None:
    """Pick the config file to read.

    A path given on the command line or in $GATEKEEPER_CONFIG must exist.
    Otherwise ./gatekeeper.yaml, then ~/.gatekeeper/config.yaml, are used
    when present.
    """
    explicit = cli_path or os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit)
        if not path.is_file():
            raise ValueError(f"Config file not found: {path}")
        return path

    for path in (Path("gatekeeper.yaml"), Path.home() / ".gatekeeper" / "config.yaml"):
        if path.is_file():
            return path
    return None


def load_config(cli_path: str | None = None) -> GatekeeperConfig:
    path = find_config(cli_path)
    if path is None:
        return GatekeeperConfig()
    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is None:
        return GatekeeperConfig()
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid config in {path}: expected a mapping at the top level")
    try:
        return GatekeeperConfig.model_validate(_expand_env_vars(raw))
    except ValidationError as e:
        raise ValueError(f"Invalid config in {path}: {e}") from e


def _substitute(match: re.Match) -> str:
    value = os.environ.get(match["name"])
    if value:
        return value
    return match["default"] or ""


def _expand_env_vars(obj: object) -> object:
    """Expand ${VAR} and ${VAR:-fallback} in every string of a loaded document."""
    if isinstance(obj, str):
        return _ENV_REF.sub(_substitute, obj)
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    return obj


# Default YAML template for `gatekeeper config init`
DEFAULT_CONFIG_TEMPLATE = """\
# gatekeeper.yaml

# Initial role for checks (usually overridden per request)
role: ""

# Cache for rules generated from class methods
cache:
  backend: "memory"            # memory | sqlite | none
  path: ".gatekeeper/cache.db" # sqlite only
  default_ttl: 0               # seconds; 0 disables caching

# Policy
policy:
  # path: "policy.yaml"
  strict_permissions: false    # reject "rule.action.extra"

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
