# kioskscan/core/loader.py
"""
YAML configuration loading with environment variable substitution.
"""
from __future__ import annotations

import logging
import os
import re
from glob import glob
from pathlib import Path
from typing import Any, Iterable

import yaml

logger = logging.getLogger(__name__)

# ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def substitute_env_vars(value: Any) -> Any:
    """
    Recursively expand ``${VAR}`` and ``${VAR:-default}`` in strings,
    dicts and lists. Other values pass through untouched.

    Raises:
        ValueError: If a variable is unset and has no default.
    """
    if isinstance(value, str):
        return ENV_VAR_PATTERN.sub(_expand, value)
    if isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [substitute_env_vars(item) for item in value]
    return value


def _expand(match: re.Match) -> str:
    var_name, default = match.group(1), match.group(2)
    env_value = os.environ.get(var_name)
    if env_value is not None:
        return env_value
    if default is not None:
        return default
    raise ValueError(
        f"Environment variable '{var_name}' is not set and no default provided"
    )


def load_yaml_files(patterns: Iterable[str]) -> list[dict[str, Any]]:
    """
    Load every YAML file matching the glob patterns, in sorted path order.

    Returns an empty list (with a warning) when nothing matches.
    """
    patterns = list(patterns)
    files = sorted({Path(m).resolve() for p in patterns for m in glob(p)})

    if not files:
        logger.warning("No config files found matching patterns: %s", patterns)
        return []

    logger.info("Loading config files: %s", [str(f) for f in files])

    out: list[dict[str, Any]] = []
    for f in files:
        try:
            with f.open("r", encoding="utf-8") as fh:
                out.append(yaml.safe_load(fh) or {})
        except Exception as exc:
            logger.error("Failed to load YAML file '%s': %s", f, exc)
            raise
    return out


def merge_sections(documents: Iterable[dict[str, Any]], key: str) -> dict[str, Any]:
    """Merge the mapping under ``key`` across documents; later files win."""
    merged: dict[str, Any] = {}
    for data in documents:
        merged.update(data.get(key) or {})
    return merged
