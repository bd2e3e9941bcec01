"""
URL helpers.
"""

from __future__ import annotations

from urllib.parse import parse_qsl, unquote_plus


def url_with_params(url: str, params: str) -> str:
    """
    Append query parameters to a URL.

    The URL's own text is never rewritten: parameters whose key it already
    carries are skipped, the rest are appended as written, and the URL's
    fragment stays at the end.
    """
    params = params.lstrip("?")
    if not params:
        return url

    base, hash_sep, fragment = url.partition("#")
    _, query_sep, query = base.partition("?")
    existing = {key for key, _ in parse_qsl(query, keep_blank_values=True)}

    extra = []
    for pair in params.split("&"):
        key = unquote_plus(pair.partition("=")[0])
        if pair and key not in existing:
            extra.append(pair)

    if not extra:
        return url

    if not query_sep:
        base += "?"
    elif query and not query.endswith("&"):
        base += "&"

    result = base + "&".join(extra)
    if hash_sep:
        result += "#" + fragment
    return result
