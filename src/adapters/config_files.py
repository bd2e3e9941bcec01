"""
JSON config file adapter.

Implements ConfigSourcePort over a config directory laid out as
`<config_path>/<kind>/<name>.json`, e.g. `redactor/Simple.json` or
`htmlpurifier/Default.json`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "Default.json"


class FileConfigSource:
    """Reads named JSON configs, falling back to Default.json."""

    def __init__(self, config_path: Path | str) -> None:
        self._config_path = Path(config_path)

    def get_config(self, kind: str, name: str | None = None) -> dict[str, Any] | None:
        file_name = name or DEFAULT_CONFIG_FILE
        path = self._config_path / kind / file_name

        if not path.is_file():
            if file_name != DEFAULT_CONFIG_FILE:
                logger.debug("Config %s not found, trying %s", path, DEFAULT_CONFIG_FILE)
                return self.get_config(kind)
            return None

        with open(path) as f:
            result: dict[str, Any] = json.load(f)
            return result

    def list_options(self, kind: str) -> dict[str, str]:
        """Selectable configs: file name -> label, with "" for the default."""
        options = {"": "Default"}
        path = self._config_path / kind

        if path.is_dir():
            for file in path.glob("*.json"):
                if file.name != DEFAULT_CONFIG_FILE:
                    options[file.name] = file.stem

        return dict(sorted(options.items()))
