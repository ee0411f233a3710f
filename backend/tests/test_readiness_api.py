"""Functional tests — Project readiness (/api/v1/readiness)."""
import io

import pytest
from httpx import AsyncClient
from openpyxl import load_workbook

from factories import risk_json

BASE = "/api/v1/readiness"


def _save_body(**overrides) -> dict:
    body = {
        "project_name": "Pembangunan Gardu Induk",
        "submitted_by": "Budi Santoso",
        "items": [
            {"id": "contract", "category": "administrative", "title": "Kontrak atau PO dari user",
             "user_status": "lengkap", "user_comments": [{"id": "u1", "text": "PO no. 123"}]},
            {"id": "handover", "category": "administrative", "title": "BA serah terima awal (jika ada)",
             "user_status": "parsial"},
        ],
    }
    body.update(overrides)
    return body


async def _submit(client: AsyncClient, project_id: str = "PRJ-001", **overrides) -> dict:
    r = await client.put(f"{BASE}/projects/{project_id}", json=_save_body(**overrides))
    assert r.status_code == 200, r.text
    return r.json()


async def _verify_all(client: AsyncClient, project_id: str, items: list[dict], status="lengkap"):
    for item in items:
        r = await client.patch(
            f"{BASE}/projects/{project_id}/items/{item['id']}/verification",
            json={"verifier_status": status},
        )
        assert r.status_code == 200, r.text


# ═══════════════════ TEMPLATE ═══════════════════

@pytest.mark.asyncio
async def test_get_template(client: AsyncClient):
    r = await client.get(f"{BASE}/template")
    assert r.status_code == 200
    data = r.json()
    assert data["assessment_type"] == "project_readiness"
    assert len(data["categories"]) == 7


@pytest.mark.asyncio
async def test_get_unknown_template_404(client: AsyncClient):
    r = await client.get(f"{BASE}/template", params={"assessment_type": "nope"})
    assert r.status_code == 404


# ═══════════════════ DETAIL / SAVE ═══════════════════

@pytest.mark.asyncio
async def test_new_project_gets_full_blank_checklist(client: AsyncClient):
    tpl = (await client.get(f"{BASE}/template")).json()
    expected = sum(len(c["items"]) for c in tpl["categories"])

    r = await client.get(f"{BASE}/projects/PRJ-NEW")
    assert r.status_code == 200
    data = r.json()
    assert data["submission"] is None
    assert len(data["items"]) == expected
    assert all(i["user_status"] == "tidak_tersedia" for i in data["items"])
    assert data["progress"]["percentage"] == 0
    assert data["can_edit"] is True


@pytest.mark.asyncio
async def test_save_readiness(client: AsyncClient):
    data = await _submit(client)
    assert data["submission"]["status"] == "submitted"
    assert data["submission"]["submitted_by"] == "Budi Santoso"

    items = {i["id"]: i for i in data["items"]}
    assert items["contract"]["user_status"] == "lengkap"
    assert items["contract"]["user_comments"][0]["text"] == "PO no. 123"
    assert items["handover"]["user_status"] == "parsial"
    # the rest of the checklist is reconciled in on read
    assert items["schedule"]["user_status"] == "tidak_tersedia"
    assert data["progress"]["completed"] == 1
    assert data["progress"]["partial"] == 1


@pytest.mark.asyncio
async def test_save_with_invalid_risk_returns_field_errors(client: AsyncClient):
    body = _save_body()
    body["items"][0]["risk_capture"] = [risk_json("r1", 30)]
    r = await client.put(f"{BASE}/projects/PRJ-001", json=body)
    assert r.status_code == 422
    fields = {e["field"] for e in r.json()["detail"]["errors"]}
    assert "administrative.Kontrak atau PO dari user.r1.risiko_awal.level" in fields

    r = await client.get(f"{BASE}/projects/PRJ-001")
    assert r.json()["submission"] is None


@pytest.mark.asyncio
async def test_resubmit_keeps_verifier_fields(client: AsyncClient):
    await _submit(client)
    r = await client.patch(
        f"{BASE}/projects/PRJ-001/items/contract/verification",
        json={"verifier_status": "parsial", "comment": "PO belum ditandatangani"},
    )
    assert r.status_code == 200

    data = await _submit(client)
    contract = next(i for i in data["items"] if i["id"] == "contract")
    assert contract["verifier_status"] == "parsial"
    assert contract["verifier_comments"][0]["text"] == "PO belum ditandatangani"


# ═══════════════════ SUBMISSIONS ═══════════════════

@pytest.mark.asyncio
async def test_list_and_count_submissions(client: AsyncClient):
    await _submit(client, "PRJ-001")
    await _submit(client, "PRJ-002", project_name="Jaringan Fiber", submitted_by="Ani Wijaya")

    r = await client.get(f"{BASE}/submissions", params={"search": "fiber"})
    assert [s["project_id"] for s in r.json()] == ["PRJ-002"]

    r = await client.get(f"{BASE}/submissions", params={"status": "verified"})
    assert r.json() == []

    r = await client.get(f"{BASE}/submissions/counts")
    assert r.json() == {"total": 2, "pending": 2, "under_review": 0, "verified": 0, "revision": 0}


# ═══════════════════ VERIFIER ═══════════════════

@pytest.mark.asyncio
async def test_verify_item(client: AsyncClient):
    await _submit(client)
    r = await client.patch(
        f"{BASE}/projects/PRJ-001/items/handover/verification",
        json={"verifier_status": "lengkap", "comment": "Sudah ada", "risk_capture": [risk_json("r1", 12)]},
    )
    assert r.status_code == 200
    item = r.json()
    assert item["verifier_status"] == "lengkap"
    assert item["user_status"] == "parsial"
    assert item["risk_capture"][0]["id"] == "r1"

    detail = (await client.get(f"{BASE}/projects/PRJ-001")).json()
    assert detail["verification_progress"]["verified"] == 1


@pytest.mark.asyncio
async def test_verify_item_errors(client: AsyncClient):
    r = await client.patch(f"{BASE}/projects/PRJ-X/items/contract/verification", json={"verifier_status": "lengkap"})
    assert r.status_code == 404

    await _submit(client)
    r = await client.patch(f"{BASE}/projects/PRJ-001/items/nope/verification", json={"verifier_status": "lengkap"})
    assert r.status_code == 404

    r = await client.patch(
        f"{BASE}/projects/PRJ-001/items/contract/verification",
        json={"risk_capture": [risk_json("r1", 0)]},
    )
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_finalize_incomplete_is_rejected(client: AsyncClient):
    data = await _submit(client)
    await _verify_all(client, "PRJ-001", data["items"][:2])

    r = await client.post(
        f"{BASE}/projects/PRJ-001/verification",
        json={"status": "verified", "verifier": {"name": "Siti Rahma"}},
    )
    assert r.status_code == 409
    unverified = r.json()["detail"]["unverified"]
    assert len(unverified) == len(data["items"]) - 2
    assert "contract" not in unverified


@pytest.mark.asyncio
async def test_finalize_verified_locks_submission(client: AsyncClient):
    data = await _submit(client)
    await _verify_all(client, "PRJ-001", data["items"])
    await client.patch(
        f"{BASE}/projects/PRJ-001/items/contract/verification",
        json={"risk_capture": [risk_json("r1", 18), risk_json("r2", 4)]},
    )

    r = await client.post(
        f"{BASE}/projects/PRJ-001/verification",
        json={"status": "verified", "overall_comment": "Siap mobilisasi", "verifier": {"name": "Siti Rahma"}},
    )
    assert r.status_code == 200, r.text
    payload = r.json()
    assert payload["status"] == "verified"
    assert payload["verifier_name"] == "Siti Rahma"
    assert payload["risk_capture_summary"]["total"] == 2
    assert payload["risk_capture_summary"]["per_band"]["tinggi"] == 1
    assert all(i["verifier_name"] == "Siti Rahma" for i in payload["items"])

    detail = (await client.get(f"{BASE}/projects/PRJ-001")).json()
    assert detail["submission"]["status"] == "verified"
    assert detail["submission"]["overall_comment"] == "Siap mobilisasi"
    assert detail["can_edit"] is False
    assert detail["verification_progress"]["percentage"] == 100

    r = await client.put(f"{BASE}/projects/PRJ-001", json=_save_body())
    assert r.status_code == 409
    r = await client.patch(f"{BASE}/projects/PRJ-001/items/contract/verification", json={"verifier_status": "parsial"})
    assert r.status_code == 409


@pytest.mark.asyncio
async def test_finalize_with_draft_items(client: AsyncClient):
    data = await _submit(client)
    draft = [dict(i, verifier_status="parsial") for i in data["items"]]
    draft[0]["user_status"] = "tidak_tersedia"

    r = await client.post(
        f"{BASE}/projects/PRJ-001/verification",
        json={"status": "needs_revision", "verifier": {"name": "Siti Rahma"}, "items": draft},
    )
    assert r.status_code == 200, r.text
    items = r.json()["items"]
    assert [i["id"] for i in items] == [i["id"] for i in data["items"]]
    assert all(i["verifier_status"] == "parsial" for i in items)
    # submitter fields are not taken from the verifier draft
    assert items[0]["user_status"] == data["items"][0]["user_status"]

    detail = (await client.get(f"{BASE}/projects/PRJ-001")).json()
    assert detail["submission"]["status"] == "needs_revision"
    assert detail["can_edit"] is True


@pytest.mark.asyncio
async def test_finalize_unknown_draft_item_404(client: AsyncClient):
    await _submit(client)
    r = await client.post(
        f"{BASE}/projects/PRJ-001/verification",
        json={"status": "under_review", "verifier": {"name": "Siti"},
              "items": [{"id": "ghost", "category": "administrative", "title": "Ghost"}]},
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_finalize_missing_submission_404(client: AsyncClient):
    r = await client.post(
        f"{BASE}/projects/PRJ-X/verification",
        json={"status": "under_review", "verifier": {"name": "Siti"}},
    )
    assert r.status_code == 404


# ═══════════════════ EXPORT ═══════════════════

@pytest.mark.asyncio
async def test_export_xlsx(client: AsyncClient):
    await _submit(client)
    await client.patch(
        f"{BASE}/projects/PRJ-001/items/contract/verification",
        json={"risk_capture": [risk_json("r1", 12)]},
    )
    r = await client.get(f"{BASE}/projects/PRJ-001/export")
    assert r.status_code == 200
    assert "spreadsheetml" in r.headers["content-type"]

    wb = load_workbook(io.BytesIO(r.content))
    assert wb.sheetnames == ["Readiness", "Risk Capture"]
    ws = wb["Readiness"]
    assert ws.cell(row=1, column=1).value == "Kategori"
    assert ws.cell(row=2, column=2).value == "Kontrak atau PO dari user"
    assert wb["Risk Capture"].cell(row=2, column=7).value == 12


@pytest.mark.asyncio
async def test_export_missing_submission_404(client: AsyncClient):
    r = await client.get(f"{BASE}/projects/PRJ-X/export")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_finalize_on_verified_submission_is_rejected(client: AsyncClient):
    data = await _submit(client)
    await _verify_all(client, "PRJ-001", data["items"])
    r = await client.post(
        f"{BASE}/projects/PRJ-001/verification",
        json={"status": "verified", "verifier": {"name": "Siti Rahma"}},
    )
    assert r.status_code == 200

    draft = [dict(i, verifier_status="tidak_tersedia") for i in r.json()["items"]]
    r = await client.post(
        f"{BASE}/projects/PRJ-001/verification",
        json={"status": "needs_revision", "verifier": {"name": "Other"}, "items": draft},
    )
    assert r.status_code == 409

    detail = (await client.get(f"{BASE}/projects/PRJ-001")).json()
    assert detail["submission"]["status"] == "verified"
    assert detail["submission"]["verifier_name"] == "Siti Rahma"
    assert all(i["verifier_status"] == "lengkap" for i in detail["items"])
    assert all(i["verifier_name"] == "Siti Rahma" for i in detail["items"])


@pytest.mark.asyncio
async def test_finalize_as_submitted_leaves_header_unstamped(client: AsyncClient):
    await _submit(client)
    r = await client.post(
        f"{BASE}/projects/PRJ-001/verification",
        json={"status": "submitted", "overall_comment": "Belum dimulai", "verifier": {"name": "Siti Rahma"}},
    )
    assert r.status_code == 200, r.text

    submission = (await client.get(f"{BASE}/projects/PRJ-001")).json()["submission"]
    assert submission["status"] == "submitted"
    assert submission["overall_comment"] == "Belum dimulai"
    assert submission["verifier_name"] is None
    assert submission["verified_at"] is None
