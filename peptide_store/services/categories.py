"""Category id rules: ids are kebab-case slugs, derived from the name when not given."""
from __future__ import annotations

import re

_KEBAB_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


class CategoryError(ValueError):
    pass


def is_kebab_case(value: str) -> bool:
    return bool(_KEBAB_RE.match(value))


def slugify_category_name(name: str) -> str:
    slug = re.sub(r"[^a-z0-9\s-]", "", name.lower())
    slug = re.sub(r"\s+", "-", slug.strip())
    return re.sub(r"-+", "-", slug).strip("-")


def resolve_category_id(name: str, category_id: str | None) -> str:
    candidate = category_id if category_id else slugify_category_name(name)
    if not is_kebab_case(candidate):
        raise CategoryError(
            'Category ID must be in kebab-case format (e.g., "weight-management", "recovery-repair")'
        )
    return candidate


def next_position(current_max: int | None) -> int:
    """Position for a newly appended row: max + 1, or 0 when the list is empty."""
    return 0 if current_max is None else current_max + 1
