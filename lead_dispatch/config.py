"""Configuration helpers for the dispatch engine and its channels."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from .ledger import DEFAULT_LOW_BALANCE_THRESHOLD

LOGGER = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Raised when configuration files are missing or malformed."""


_SUPPORTED_EXTENSIONS = {".json", ".yaml", ".yml"}


def load_configuration(path: str | Path) -> Dict[str, Any]:
    """Load configuration data from a JSON or YAML file."""

    file_path = Path(path)
    if not file_path.exists():
        raise ConfigurationError(f"Configuration file '{file_path}' was not found")

    if file_path.suffix.lower() not in _SUPPORTED_EXTENSIONS:
        raise ConfigurationError(
            f"Unsupported configuration format '{file_path.suffix}'. Supported extensions: {sorted(_SUPPORTED_EXTENSIONS)}"
        )

    text = file_path.read_text(encoding="utf-8")
    if file_path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Configuration file '{file_path}' is not valid JSON: {exc}") from exc
    else:
        import yaml

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Configuration file '{file_path}' is not valid YAML: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file '{file_path}' must contain a mapping at the top level")
    return data


@dataclass
class EngineSettings:
    """Credit and cost settings read from the ``credits`` and ``costs`` sections."""

    balance: int = 0
    unlimited: bool = False
    low_balance_threshold: int = DEFAULT_LOW_BALANCE_THRESHOLD
    costs: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]]) -> "EngineSettings":
        config = config or {}
        credits = config.get("credits") or {}
        costs = config.get("costs") or {}
        if not isinstance(credits, Mapping) or not isinstance(costs, Mapping):
            raise ConfigurationError("'credits' and 'costs' must be mappings")
        try:
            return cls(
                balance=int(credits.get("balance", 0)),
                unlimited=bool(credits.get("unlimited", False)),
                low_balance_threshold=int(credits.get("low_balance_threshold", DEFAULT_LOW_BALANCE_THRESHOLD)),
                costs={str(action): int(cost) for action, cost in costs.items()},
            )
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid credit settings: {exc}") from exc


def iter_enabled_channel_configs(config: Mapping[str, Any]) -> Iterable[Dict[str, Any]]:
    channels = config.get("channels", [])
    for channel in channels:
        if channel.get("enabled", True):
            yield channel
        else:
            LOGGER.debug("Skipping disabled channel %s", channel.get("name"))
