from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from src.rules.models import FieldSettings


def _strip_yaml_fence(content: str) -> str:
    # Settings files may be markdown documents with a ```yaml block
    lines = content.splitlines()
    yaml_lines = []
    in_block = False
    found_block = False

    for line in lines:
        s_line = line.strip()
        if s_line.startswith("```yaml"):
            in_block = True
            found_block = True
            continue
        if in_block and s_line.startswith("```"):
            break

        if in_block:
            yaml_lines.append(line)

    if found_block:
        return "\n".join(yaml_lines)
    return content


def parse_field_settings(data: dict[str, Any] | None) -> FieldSettings:
    """
    Validate raw settings data.
    Raises ValueError with the pydantic error report if invalid.
    """
    try:
        return FieldSettings.model_validate(data or {})
    except ValidationError as e:
        raise ValueError(f"Field settings validation failed:\n{e}") from e


def load_field_settings(path: Path) -> FieldSettings:
    """
    Load and validate a field settings file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if YAML or schema invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Field settings file not found at: {path}")

    with open(path) as f:
        content = f.read()

    try:
        data = yaml.safe_load(_strip_yaml_fence(content))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in field settings file: {e}") from e

    return parse_field_settings(data)
