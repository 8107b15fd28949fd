"""Template Catalog - curated, read-only prompt templates grouped by category.

Templates ship with the package in ``data/templates.yaml`` and are loaded once
at import. Declaration order is preserved everywhere.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

import yaml

from promptcraft.models import Template

TEMPLATES_FILE = Path(__file__).parent / "data" / "templates.yaml"

ALL_CATEGORIES = "All"
CATEGORY_FILTERS = [ALL_CATEGORIES, "Coding", "Writing", "Analysis", "Education"]


def _load_templates(path: Path = TEMPLATES_FILE) -> Tuple[Template, ...]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or []
    return tuple(Template(**entry) for entry in data)


TEMPLATES: Tuple[Template, ...] = _load_templates()


def list_by_category(filter: str = ALL_CATEGORIES) -> List[Template]:
    """Return templates in the given category, or all of them for "All"."""
    if filter == ALL_CATEGORIES:
        return list(TEMPLATES)
    return [t for t in TEMPLATES if t.category == filter]


def get_template(template_id: str) -> Optional[Template]:
    for template in TEMPLATES:
        if template.id == template_id:
            return template
    return None
