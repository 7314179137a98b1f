"""
Configuration Loader (``ledger_config.loader``).

Responsibility
--------------
Loads the ledger YAML file and parses it into a ``LedgerConfig``.  The
single public entry point for runtime config is
``ledger_config.get_active_config()``; this module is its tooling.

File layout
-----------
Either the settings at the top level, or nested under a ``ledger:`` key::

    ledger:
      default_currency: INR
      database_url: postgresql://ledger@db/ledger
      max_conflict_retries: 5

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* A document that is not a mapping, or unknown keys  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

import yaml

from ledger_config.schema import LedgerConfig


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping, got {type(data).__name__}")
    return data


def load_config(path: Path) -> LedgerConfig:
    """Parse the ledger configuration at ``path``."""
    data = load_yaml_file(Path(path))
    section = data.get("ledger", data)
    if not isinstance(section, dict):
        raise ValueError(f"{path}: 'ledger' must be a mapping")
    return LedgerConfig.from_dict(dict(section))


def compute_checksum(config: LedgerConfig) -> str:
    """Deterministic SHA-256 of the configuration, for change detection."""
    canonical = json.dumps(asdict(config), sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
