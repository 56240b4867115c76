"""Config and format file loading utilities for customid."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import UTC, datetime, tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from customid.core.models import EngineConfig, FormatError, IdFormat

logger = logging.getLogger(__name__)


def load_config_file(path: Path) -> dict[str, Any]:
    """Load a YAML config file as a dict.

    Returns empty dict if the file doesn't exist.
    """
    if not path.exists():
        logger.debug("No config found at %s; using defaults", path)
        return {}

    logger.info("Loading config from %s", path)
    with path.open() as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        logger.warning("%s did not contain a mapping; using empty dict", path.name)
        return {}

    return data


def make_engine_config(data: dict[str, Any]) -> EngineConfig:
    """Build an EngineConfig from config file values.

    Only fields present in the ``engine`` section override the defaults
    defined in :class:`EngineConfig`.
    """
    section = data.get("engine", {})
    if not isinstance(section, dict):
        logger.warning("'engine' key is not a mapping; ignoring")
        section = {}

    # Filter to only the fields EngineConfig actually declares so that
    # unknown keys don't cause a validation error.
    valid_fields = EngineConfig.model_fields
    filtered = {k: v for k, v in section.items() if k in valid_fields}

    if dropped := set(section) - set(filtered):
        logger.warning("Ignoring unknown engine config keys: %s", sorted(dropped))

    return EngineConfig(**filtered)


def load_format_file(path: Path) -> IdFormat:
    """Load a format from a YAML or JSON file.

    The file holds either a list of ``{elementType, config, sortOrder}``
    records or a mapping with those records under ``elements``.

    Raises:
        FormatError: If the file cannot be parsed or does not describe a
            well-formed format.
    """
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise FormatError(f"Could not parse {path}: {exc}") from exc

    if isinstance(data, dict):
        data = data.get("elements", [])
    if data is None:
        data = []
    if not isinstance(data, list):
        raise FormatError(f"{path} must contain a list of elements")

    fmt = IdFormat.from_records(data)
    logger.debug("Loaded %d elements from %s", len(fmt.elements), path)
    return fmt


def resolve_timezone(name: str) -> tzinfo | None:
    """Map a configured zone name to a tzinfo.

    ``"local"`` returns None, meaning the host's local zone. Unknown names
    fall back to UTC.
    """
    if name.lower() == "local":
        return None
    if name.upper() == "UTC":
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r; using UTC", name)
        return UTC


def make_clock(config: EngineConfig) -> Callable[[], datetime]:
    """Return a clock producing the current time in the configured zone."""
    zone = resolve_timezone(config.timezone)
    if zone is None:
        return lambda: datetime.now().astimezone()
    return lambda: datetime.now(zone)
