import os
from functools import lru_cache
from pathlib import Path

import yaml
from fastapi import Depends

from src.adapters.bleach_sanitizer import BleachHtmlSanitizer
from src.adapters.config_files import FileConfigSource
from src.adapters.memory_resolver import InMemoryReferenceResolver
from src.components.richtext import RichTextField
from src.rules.loader import load_field_settings
from src.rules.models import FieldSettings


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        config_dir = os.environ.get("RICHTEXT_CONFIG_DIR", "./config")
        self.config_path = Path(config_dir)
        self.field_settings_path = self.config_path / "field.yaml"
        self.references_path = self.config_path / "references.yaml"


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Field settings ---
@lru_cache
def get_field_settings(settings: Settings = Depends(get_settings)) -> FieldSettings:
    if not settings.field_settings_path.exists():
        return FieldSettings()
    return load_field_settings(settings.field_settings_path)


# --- Collaborators ---
@lru_cache
def get_resolver(settings: Settings = Depends(get_settings)) -> InMemoryReferenceResolver:
    resolver = InMemoryReferenceResolver()
    if settings.references_path.exists():
        with open(settings.references_path) as f:
            for reference, url in (yaml.safe_load(f) or {}).items():
                resolver.register(reference, url)
    return resolver


def get_sanitizer() -> BleachHtmlSanitizer:
    return BleachHtmlSanitizer()


def get_config_source(settings: Settings = Depends(get_settings)) -> FileConfigSource:
    return FileConfigSource(settings.config_path)


# --- Field ---
def get_rich_text_field(
    field_settings: FieldSettings = Depends(get_field_settings),
    resolver: InMemoryReferenceResolver = Depends(get_resolver),
    sanitizer: BleachHtmlSanitizer = Depends(get_sanitizer),
    config_source: FileConfigSource = Depends(get_config_source),
) -> RichTextField:
    return RichTextField(
        field_settings,
        resolver=resolver,
        sanitizer=sanitizer,
        svg_sanitizer=sanitizer,
        config_source=config_source,
    )
