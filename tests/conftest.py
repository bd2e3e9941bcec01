import pytest

from src.adapters.bleach_sanitizer import BleachHtmlSanitizer
from src.adapters.memory_resolver import InMemoryReferenceResolver
from src.components.richtext import RichTextField
from src.rules.models import FieldSettings


@pytest.fixture
def resolver() -> InMemoryReferenceResolver:
    """Resolver knowing a blog post, an asset transform and a localized entry."""
    resolver = InMemoryReferenceResolver()
    resolver.register("entry:5", "/blog/post")
    resolver.register("asset:3:thumb", "/assets/_thumb/a.jpg")
    resolver.register("entry:7", "/en/about")
    resolver.register("entry:7", "/de/ueber-uns", locale_id=2)
    return resolver


@pytest.fixture
def sanitizer() -> BleachHtmlSanitizer:
    return BleachHtmlSanitizer()


@pytest.fixture
def field(resolver: InMemoryReferenceResolver, sanitizer: BleachHtmlSanitizer) -> RichTextField:
    """Field with default settings and alignment + font color enabled."""
    settings = FieldSettings(
        config_selection_mode="manual",
        manual_config='{"plugins": ["alignment", "fontcolor"]}',
    )
    return RichTextField(
        settings,
        resolver=resolver,
        sanitizer=sanitizer,
        svg_sanitizer=sanitizer,
    )
