"""Tenant slug and tenant-store schema naming rules.

A tenant's store is the schema `tenant_<slug>` with hyphens folded to
underscores. The schema name ends up inside `SET search_path`, so it is checked
against a strict grammar before every use.
"""

import re
from typing import Final

MAX_SCHEMA_LENGTH: Final[int] = 63  # PostgreSQL NAMEDATALEN - 1
TENANT_SCHEMA_PREFIX: Final[str] = "tenant_"
MAX_TENANT_SLUG_LENGTH: Final[int] = MAX_SCHEMA_LENGTH - len(TENANT_SCHEMA_PREFIX)

_SLUG: Final[re.Pattern[str]] = re.compile(r"^[a-z][a-z0-9]*([-_][a-z0-9]+)*$")
_SCHEMA: Final[re.Pattern[str]] = re.compile(
    rf"^{TENANT_SCHEMA_PREFIX}[a-z][a-z0-9]*(_[a-z0-9]+)*$"
)
_FORBIDDEN_FRAGMENTS: Final[tuple[str, ...]] = (
    "pg_",
    "information_schema",
    "public",
    "--",
    ";",
    "/*",
    "*/",
)


def is_valid_tenant_slug(slug: str) -> bool:
    return len(slug) <= MAX_TENANT_SLUG_LENGTH and _SLUG.match(slug) is not None


def validate_tenant_slug_format(slug: str) -> str:
    """Pydantic-style validator: return the slug or raise ValueError."""
    if not _SLUG.match(slug):
        raise ValueError(
            "Slug must start with a letter and contain only lowercase letters, numbers, "
            "and single hyphens or underscores as separators"
        )
    return slug


def slug_to_schema_name(slug: str) -> str:
    """'acme-corp' -> 'tenant_acme_corp'."""
    return TENANT_SCHEMA_PREFIX + slug.replace("-", "_")


def validate_schema_name(schema_name: str) -> None:
    """Raise ValueError unless `schema_name` is a well-formed tenant store schema."""
    if len(schema_name) > MAX_SCHEMA_LENGTH:
        raise ValueError(
            f"Schema name exceeds PostgreSQL limit: {len(schema_name)} > {MAX_SCHEMA_LENGTH}"
        )
    if not _SCHEMA.match(schema_name):
        raise ValueError(
            f"Invalid schema name format: {schema_name!r} "
            f"(expected '{TENANT_SCHEMA_PREFIX}' + lowercase words joined by single underscores)"
        )
    lowered = schema_name.lower()
    for fragment in _FORBIDDEN_FRAGMENTS:
        if fragment in lowered:
            raise ValueError(f"Schema name contains forbidden pattern {fragment!r}: {schema_name}")
