"""Factory helpers for constructing channel instances from configuration."""
from __future__ import annotations

import importlib
from typing import Any, Dict, Mapping

from .config import ConfigurationError, iter_enabled_channel_configs
from .models import ACTIONS
from .rate_limit import RateLimitedChannel, SendQuota


def _load_class(path: str):
    module_name, _, attr = path.rpartition(".")
    if not module_name:
        raise ConfigurationError(f"Invalid channel class path '{path}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Could not import channel module '{module_name}'") from exc
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise ConfigurationError(f"Module '{module_name}' does not define '{attr}'") from exc


def build_channels(config: Mapping[str, Any]) -> Dict[str, RateLimitedChannel]:
    """Instantiate the enabled channels, keyed by the action each one serves."""

    channels: Dict[str, RateLimitedChannel] = {}
    for channel_cfg in iter_enabled_channel_configs(config):
        class_path = channel_cfg.get("class")
        if not class_path:
            raise ConfigurationError("Channel configuration missing required 'class' field")

        action = channel_cfg.get("action")
        if action not in ACTIONS:
            raise ConfigurationError(
                f"Channel '{channel_cfg.get('name', class_path)}' has invalid action {action!r}; expected one of {list(ACTIONS)}"
            )
        if action in channels:
            raise ConfigurationError(f"More than one enabled channel configured for '{action}'")

        options = channel_cfg.get("options", {})
        channel_cls = _load_class(class_path)
        channel_instance = channel_cls(**options)

        channels[action] = RateLimitedChannel(
            channel_instance,
            display_name=channel_cfg.get("name"),
            quota=_build_quota(channel_cfg.get("rate_limit")),
        )
    return channels


def _build_quota(rate_cfg: Any) -> SendQuota:
    if not rate_cfg:
        return SendQuota(None)
    if not isinstance(rate_cfg, Mapping):
        raise ConfigurationError("'rate_limit' must be a mapping with 'max_leads' and 'per_seconds'")
    try:
        return SendQuota(int(rate_cfg["max_leads"]), float(rate_cfg.get("per_seconds", 3600)))
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid rate limit settings {dict(rate_cfg)!r}: {exc}") from exc
