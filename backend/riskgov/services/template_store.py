"""
Readiness template store — supplies the checklist definition per assessment type.

Templates are YAML documents:

    assessment_type: project_readiness
    version: "2"
    categories:
      - id: administrative
        title: Dokumen Administratif
        icon: FileText
        items:
          - {id: contract, title: Kontrak atau PO dari user}

A file in READINESS_TEMPLATE_DIR named <assessment_type>.yaml overrides the
bundled template of the same type.
"""
from __future__ import annotations

import logging
from pathlib import Path

import yaml

from riskgov.config import settings
from riskgov.schemas.readiness import Category, ItemDefinition, ReadinessTemplate

log = logging.getLogger(__name__)

BUNDLED_DIR = Path(__file__).resolve().parent.parent / "data" / "readiness_templates"


def parse_template(content: bytes | str, assessment_type: str | None = None) -> ReadinessTemplate:
    if isinstance(content, bytes):
        content = content.decode("utf-8")
    data = yaml.safe_load(content)
    if not data:
        raise ValueError("Empty template file")

    categories = []
    for cat in data.get("categories") or []:
        items = tuple(
            ItemDefinition(id=str(it["id"]), title=str(it["title"]))
            for it in cat.get("items") or []
        )
        categories.append(Category(
            id=str(cat["id"]),
            title=str(cat.get("title") or cat["id"]),
            icon_ref=cat.get("icon"),
            items=items,
        ))

    return ReadinessTemplate(
        assessment_type=data.get("assessment_type") or assessment_type or "",
        version=str(data.get("version", "1")),
        categories=tuple(categories),
    )


def load_template_file(path: Path | str) -> ReadinessTemplate:
    path = Path(path)
    return parse_template(path.read_text(encoding="utf-8"), assessment_type=path.stem)


class ReadinessTemplateStore:
    """Loads and caches templates from the override dir, then the bundled dir."""

    def __init__(self, template_dir: Path | str | None = None, bundled_dir: Path | str = BUNDLED_DIR):
        self._dirs = [Path(d) for d in (template_dir, bundled_dir) if d]
        self._cache: dict[str, ReadinessTemplate] = {}

    def get(self, assessment_type: str) -> ReadinessTemplate | None:
        if assessment_type in self._cache:
            return self._cache[assessment_type]
        for directory in self._dirs:
            path = directory / f"{assessment_type}.yaml"
            if path.is_file():
                template = load_template_file(path)
                log.info(
                    "Loaded readiness template %s v%s from %s (%d categories)",
                    template.assessment_type, template.version, path, len(template.categories),
                )
                self._cache[assessment_type] = template
                return template
        log.warning("No readiness template for assessment type %r", assessment_type)
        return None

    def clear(self) -> None:
        self._cache.clear()


_store: ReadinessTemplateStore | None = None


def get_template_store() -> ReadinessTemplateStore:
    global _store
    if _store is None:
        _store = ReadinessTemplateStore(settings.READINESS_TEMPLATE_DIR)
    return _store
