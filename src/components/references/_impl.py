"""
Reference codec - swaps element URLs and reference tags inside HTML.

Functional Core - pure string transformations; the only collaborator
is the reference resolver.

Stored content keeps links to other elements as reference tags
(`href="{entry:5:url||/blog/post}"`) so they survive URL changes. The
editor needs real URLs, so on load each tag is resolved and the tag is
kept as the URL fragment (`href="/blog/post#entry:5:url"`). On save the
fragment is turned back into a tag.

Key behaviors:
- decode leaves unresolvable tags untouched
- decode is a no-op for content without `{`
- encode always stores a qualifier (`:url` by default)
- encode only consults the resolver when a query string or fragment
  has to be attributed to either the author or the resolved URL
"""

from __future__ import annotations

import html
import logging
import re

from src.domain.entities import HANDLE_PATTERN, ElementContext, ReferenceToken
from src.domain.urls import url_with_params

from .ports import ReferenceResolverPort

logger = logging.getLogger(__name__)

_QUALIFIER = r":(?:transform:)?" + HANDLE_PATTERN

# href="[url][?query][#hash]#type:id[@locale][:qualifier]"
ENCODE_PATTERN = re.compile(
    r"(href=|src=)(['\"])"
    r"([^'\"?#]*)"
    r"(\?[^'\"?#]+)?"
    r"(#[^'\"?#]+)?"
    r"(?:#|%23)([\w\\]+):(\d+)(?:@(\d+))?"
    r"(" + _QUALIFIER + r")?"
    r"\2"
)

# href="{type:id[@locale][:qualifier][||fallback]}[?query][#fragment]"
DECODE_PATTERN = re.compile(
    r"(href=|src=)(['\"])"
    r"(\{([\w\\]+:\d+(?:@\d+)?(?:" + _QUALIFIER + r")?)(?:\|\|[^}]+)?\})"
    r"(?:\?([^'\"#]*))?"
    r"(#[^'\"#]+)?"
    r"\2"
)

# Any reference, wrapped or as a URL fragment
_ANY_REFERENCE = re.compile(
    r"(?:\{|#|%23)([\w\\]+:\d+(?:@\d+)?(?:" + _QUALIFIER + r")?)(?=\|\||\}|['\"])"
)


def decode_references(
    content: str,
    resolver: ReferenceResolverPort,
    element: ElementContext | None = None,
) -> str:
    """
    Resolve reference tags in href/src attributes, keeping each tag as the URL fragment.

    `href="{entry:5:url||/old}"` becomes `href="/blog/post#entry:5:url"`.
    """
    if "{" not in content:
        return content

    context_locale = element.locale_id if element else None

    def replace(match: re.Match[str]) -> str:
        full_match, attr, quote, ref_tag, ref, query, fragment = match.group(0, 1, 2, 3, 4, 5, 6)

        token = ReferenceToken.parse(ref)
        locale_id = None if token.locale_id is not None else context_locale
        parsed = resolver.resolve(ref_tag, locale_id)

        # Unresolvable references are left alone
        if parsed == ref_tag:
            logger.debug("Leaving unresolved reference %s", ref_tag)
            return full_match

        if query:
            # A query the resolved URL already contains came from its URL
            # format; otherwise only params with new keys are appended, so
            # the freshly resolved URL always wins.
            query = html.unescape(query)
            if query not in parsed:
                parsed = url_with_params(parsed, query)

        return f"{attr}{quote}{parsed}{fragment or ''}#{ref}{quote}"

    return DECODE_PATTERN.sub(replace, content)


def encode_references(content: str, resolver: ReferenceResolverPort) -> str:
    """
    Swap element URLs carrying a reference fragment back into reference tags.

    `href="/blog/post#entry:5"` becomes `href="{entry:5:url||/blog/post}"`.
    """

    def replace(match: re.Match[str]) -> str:
        attr, quote, url, query, hash_, ref_type, ref_id, locale, qualifier = match.groups()

        token = ReferenceToken(
            type=ref_type,
            id=int(ref_id),
            locale_id=int(locale) if locale else None,
            qualifier=qualifier[1:] if qualifier else None,
        ).with_default_qualifier()

        if query or hash_:
            # The query/hash may belong to the element's own URL rather than the
            # author, e.g. a URL format with "?slug={slug}", or asset URLs
            # with "?mtime=X". Containment is a plain substring check.
            parsed = resolver.resolve(token.wrap())
            if query:
                query = html.unescape(query)
                if query in parsed:
                    url += query
                    query = None
            if hash_ and hash_ in parsed:
                url += hash_
                hash_ = None

        return f"{attr}{quote}{token.wrap(url)}{query or ''}{hash_ or ''}{quote}"

    return ENCODE_PATTERN.sub(replace, content)


def find_references(content: str) -> set[str]:
    """All references in href/src values, normalized to carry a qualifier."""
    return {
        str(ReferenceToken.parse(ref).with_default_qualifier())
        for ref in _ANY_REFERENCE.findall(content)
    }
