#!/usr/bin/env python3
"""Check a job-hunt configuration file (default: config.example.yaml) and summarize it."""

import sys
from pathlib import Path

import yaml

from jobhunt.config import validate_config_file


def verify_config(config_file: Path = Path("config.example.yaml")) -> bool:
    """Validate config_file against the schema and print what it configures."""
    if not config_file.exists():
        print(f"✗ {config_file} not found")
        return False

    if not validate_config_file(config_file):
        return False

    with open(config_file, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    preferences = config.get("preferences") or {}
    cache = config.get("cache") or {}
    print(f"  - {len(preferences.get('greenhouse_boards') or [])} Greenhouse boards")
    print(f"  - {len(preferences.get('lever_sites') or [])} Lever sites")
    print(f"  - {len(preferences.get('proxies') or [])} proxies")
    print(f"  - Cache TTL: {cache.get('ttl', 'not set (default 30m)')}")
    return True


if __name__ == "__main__":
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("config.example.yaml")
    sys.exit(0 if verify_config(path) else 1)
