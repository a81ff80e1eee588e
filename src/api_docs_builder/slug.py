"""Slug and identifier helpers shared by every stage of the build."""

import re

API_PREFIX = "api/v1/vector/"


def slugify(text) -> str:
    """Convert arbitrary text into a URL fragment.

    Lowercases, drops everything outside ``[a-z0-9]``, whitespace and
    hyphens, then collapses whitespace and hyphen runs into single hyphens.
    """
    slug = str(text if text is not None else "").lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def strip_api_prefix(uri: str) -> str:
    """Remove the leading ``api/v1/vector/`` prefix if present."""
    if uri.startswith(API_PREFIX):
        return uri[len(API_PREFIX):]
    return uri


def endpoint_id(group: str, method: str, uri: str) -> str:
    """Build the anchor ID for an endpoint, e.g. ``sites-get-sites-site``."""
    clean_uri = strip_api_prefix(uri).replace("/", "-")
    return slugify(f"{group}-{method.lower()}-{clean_uri}")


def uri_display(uri: str) -> str:
    return uri if uri.startswith("/") else f"/{uri}"
