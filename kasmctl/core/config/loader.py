"""
Configuration loader — reads and writes the kasmctl config file and
resolves which context a command talks to.

The file lives at ``$KASMCTL_CONFIG`` or, by default, in the platform
config directory (``~/.config/kasmctl/config.yaml`` on Linux).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from kasmctl.core.models.config import Context, KasmConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yaml"
CONFIG_ENV_VAR = "KASMCTL_CONFIG"
API_KEY_ENV_VAR = "KASMCTL_API_KEY"
API_SECRET_ENV_VAR = "KASMCTL_API_SECRET"


class ConfigError(Exception):
    """Raised when the config file is invalid or no context can be resolved."""


def config_path() -> Path:
    """Path of the config file (env override first)."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return Path(click.get_app_dir("kasmctl")) / CONFIG_FILENAME


def load_config_from(path: Path) -> KasmConfig:
    """Load a config file.  A missing file is an empty config.

    Raises:
        ConfigError: If the file exists but cannot be read or parsed.
    """
    if not path.exists():
        logger.debug("No config at %s, using empty config", path)
        return KasmConfig()

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"failed to read config file {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"failed to parse config file {path}: {e}") from e

    if data is None:
        return KasmConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = KasmConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"failed to parse config file {path}: {e}") from e

    logger.debug("Loaded %d context(s) from %s", len(config.contexts), path)
    return config


def save_config_to(path: Path, config: KasmConfig) -> None:
    """Write a config file, creating parent directories as needed."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        text = yaml.safe_dump(config.to_yaml_dict(), sort_keys=False, default_flow_style=False)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"failed to write config file {path}: {e}") from e

    # The file holds API secrets.
    try:
        path.chmod(0o600)
    except OSError:
        logger.debug("Could not restrict permissions on %s", path)

    logger.info("Saved config to %s", path)


def load_config() -> KasmConfig:
    return load_config_from(config_path())


def save_config(config: KasmConfig) -> None:
    save_config_to(config_path(), config)


def resolve_server_override(server: str, api_key: str, api_secret: str) -> Context:
    """Build an ad-hoc context for ``--server``."""
    return Context(server=server, api_key=api_key, api_secret=api_secret)


def resolve_from_config(config: KasmConfig, context_override: str | None = None) -> Context:
    """Pick a context from the config: ``--context`` first, then current-context."""
    name = context_override or config.current_context
    if not name:
        raise ConfigError("no context configured — run `kasmctl config set-context` first")

    named = config.get_context(name)
    if named is None:
        raise ConfigError(f"context {name!r} not found in config")
    return named.context


def resolve_context(
    server_override: str | None = None,
    context_override: str | None = None,
    insecure: bool = False,
) -> Context:
    """Resolve the context for an API command.

    Priority: ``--server`` flag > ``--context`` flag > current-context.
    ``--server`` takes its credentials from the KASMCTL_API_KEY and
    KASMCTL_API_SECRET environment variables.  ``insecure`` forces TLS
    verification off regardless of the stored setting.

    Raises:
        ConfigError: If no usable context can be found.
    """
    if server_override:
        api_key = os.environ.get(API_KEY_ENV_VAR)
        if not api_key:
            raise ConfigError(f"--server requires {API_KEY_ENV_VAR} environment variable")
        api_secret = os.environ.get(API_SECRET_ENV_VAR)
        if not api_secret:
            raise ConfigError(f"--server requires {API_SECRET_ENV_VAR} environment variable")
        context = resolve_server_override(server_override, api_key, api_secret)
    else:
        context = resolve_from_config(load_config(), context_override)

    if insecure:
        context = context.model_copy(update={"insecure_skip_tls_verify": True})

    logger.debug("Resolved context for server %s", context.server)
    return context
