"""Readiness template loading."""
import pytest

from riskgov.services.template_store import ReadinessTemplateStore, parse_template


def test_bundled_project_readiness_template():
    template = ReadinessTemplateStore().get("project_readiness")
    assert template is not None
    assert template.assessment_type == "project_readiness"
    ids = [c.id for c in template.categories]
    assert ids == [
        "administrative", "user-technical-data", "personnel", "legal-financial",
        "system-equipment", "hsse-permits", "deliverable-output",
    ]
    admin = template.categories[0]
    assert admin.icon_ref == "FileText"
    assert [i.id for i in admin.items] == ["contract", "handover", "schedule", "weekly-plan"]


def test_unknown_assessment_type_returns_none():
    assert ReadinessTemplateStore().get("does_not_exist") is None


def test_override_directory_wins(tmp_path):
    (tmp_path / "project_readiness.yaml").write_text(
        "assessment_type: project_readiness\n"
        "version: '9'\n"
        "categories:\n"
        "  - id: administrative\n"
        "    title: Admin\n"
        "    items:\n"
        "      - {id: contract, title: Kontrak}\n",
        encoding="utf-8",
    )
    store = ReadinessTemplateStore(tmp_path)
    template = store.get("project_readiness")
    assert template.version == "9"
    assert len(template.categories) == 1
    assert store.get("project_readiness") is template

    store.clear()
    assert store.get("project_readiness") is not template


def test_parse_template_defaults():
    template = parse_template(b"categories:\n  - id: admin\n    items: []\n", assessment_type="custom")
    assert template.assessment_type == "custom"
    assert template.version == "1"
    assert template.categories[0].title == "admin"
    assert template.categories[0].items == ()


def test_parse_empty_template_fails():
    with pytest.raises(ValueError):
        parse_template("")
