"""End-to-end tests for the HTTP API."""

from snapcontract.domain.export.router import get_document_exporter
from snapcontract.domain.share.link import compress_text
from snapcontract.errors import ExportFailure, ExportInProgress
from snapcontract.main import app


def _event(client, state, event):
    response = client.post("/contracts/events", json={"state": state, "event": event})
    return response


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_catalog_and_new_contract(client):
    catalog = client.get("/contracts/catalog").json()
    assert catalog["packages"]["standard"]["price"] == 220000
    assert [d["id"] for d in catalog["discounts"]][0] == "partner"

    state = client.get("/contracts/new").json()
    assert state["packageConfig"] == "standard"
    assert state["finalPrice"] == "220,000원"


def test_events_reprice_the_contract(client):
    state = client.get("/contracts/new").json()

    body = _event(client, state, {"type": "update_field", "field": "options", "value": "banquet"}).json()
    assert body["priceUpdated"] is True
    assert body["state"]["finalPrice"] == "270,000원"

    body = _event(client, body["state"], {"type": "toggle_discount", "discountId": "partner"}).json()
    assert body["state"]["finalPrice"] == "260,000원"

    body = _event(client, body["state"], {"type": "update_field", "field": "venue", "value": "XX호텔"}).json()
    assert body["priceUpdated"] is False
    assert body["state"]["venue"] == "XX호텔"


def test_custom_option_events(client):
    state = client.get("/contracts/new").json()
    state = _event(client, state, {"type": "update_field", "field": "hasCustomOption", "value": True}).json()["state"]
    state = _event(client, state, {"type": "add_custom_option"}).json()["state"]
    option_id = state["customOptions"][0]["id"]

    body = _event(
        client,
        state,
        {"type": "update_custom_option", "optionId": option_id, "field": "price", "value": "10000"},
    ).json()
    assert body["state"]["finalPrice"] == "230,000원"

    body = _event(client, body["state"], {"type": "remove_custom_option", "optionId": option_id}).json()
    assert body["state"]["customOptions"] == []
    assert body["state"]["finalPrice"] == "220,000원"


def test_event_errors(client):
    state = client.get("/contracts/new").json()
    assert _event(client, state, {"type": "update_field", "field": "finalPrice", "value": "1원"}).status_code == 400
    assert _event(client, state, {"type": "set_signature", "signature": ""}).status_code == 400
    missing = {"type": "update_custom_option", "optionId": 99, "field": "name", "value": "x"}
    assert _event(client, state, missing).status_code == 404
    assert _event(client, state, {"type": "explode"}).status_code == 422


def test_price_endpoint(client):
    state = {
        "packageConfig": "standard",
        "options": "banquet",
        "hasCustomOption": True,
        "customOptions": [{"id": 1, "name": "할인", "price": 10000, "sign": -1}],
        "discountItems": ["partner"],
    }
    body = client.post("/contracts/price", json={"state": state}).json()
    assert body == {"total": 250000, "finalPrice": "250,000원"}


def test_share_and_open_round_trip(client, full_state):
    state = full_state.model_dump(mode="json")
    shared = client.post(
        "/contracts/share", json={"state": state, "baseUrl": "https://contract.example.com/"}
    ).json()
    assert shared["url"].startswith("https://contract.example.com/?data=")
    assert shared["length"] == len(shared["url"])

    opened = client.post("/contracts/open", json={"url": shared["url"]}).json()
    assert opened["mode"] == "received"
    assert opened["state"] == state


def test_open_without_data_stays_in_authoring_mode(client):
    body = client.post("/contracts/open", json={"url": "https://contract.example.com/"}).json()
    assert body["mode"] == "authoring"
    assert body["state"]["finalPrice"] == "220,000원"


def test_open_rejects_corrupted_link_with_fresh_state(client):
    response = client.post("/contracts/open", json={"url": "https://contract.example.com/?data=%21%21%21"})
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "InvalidShareLink"
    assert body["mode"] == "authoring"
    assert body["state"]["contractorName"] == ""


def test_page_break_endpoint(client):
    body = client.post(
        "/contracts/layout/page-breaks",
        json={
            "blocks": [{"top": 1100, "height": 100}, {"top": 1300, "height": 50}],
            "pageHeight": 1122.5,
            "buffer": 10,
            "contentHeight": 1400,
        },
    ).json()
    assert body["margins"] == [32.5, 0.0]
    assert body["adjustedTops"] == [1132.5, 1332.5]
    assert body["movedBlocks"] == [0]
    assert body["pageCount"] == 2


def test_preview_endpoint(client, full_state):
    response = client.post(
        "/contracts/preview", json={"state": full_state.model_dump(mode="json"), "pageDividers": 3}
    )
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "WEDDING SNAP CONTRACT" in response.text
    assert response.text.count('class="page-divider"') == 3


class _FakeExporter:
    def __init__(self, fail=False):
        self.fail = fail

    async def export(self, state):
        if self.fail:
            raise ExportFailure("worker exited with 1")
        return b"%PDF-1.4 fake"


def test_export_endpoint(client, full_state):
    app.dependency_overrides[get_document_exporter] = lambda: _FakeExporter()
    try:
        response = client.post("/contracts/export", json={"state": full_state.model_dump(mode="json")})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "contract_" in response.headers["content-disposition"]
    assert response.content == b"%PDF-1.4 fake"


def test_export_failure_is_reported(client, full_state):
    app.dependency_overrides[get_document_exporter] = lambda: _FakeExporter(fail=True)
    try:
        response = client.post("/contracts/export", json={"state": full_state.model_dump(mode="json")})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 502
    assert response.json()["error"] == "ExportFailure"


def test_stale_client_price_is_reported_as_updated(client):
    state = client.get("/contracts/new").json()
    state["finalPrice"] = "1원"

    body = _event(client, state, {"type": "update_field", "field": "venue", "value": "XX호텔"}).json()
    assert body["state"]["finalPrice"] == "220,000원"
    assert body["priceUpdated"] is True


def test_open_rejects_undecodable_contract_data(client):
    payload = compress_text("{not valid json")
    response = client.post("/contracts/open", json={"url": f"https://contract.example.com/?data={payload}"})
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "MalformedShareData"
    assert body["mode"] == "authoring"
    assert body["state"]["finalPrice"] == "220,000원"


class _RecordingExporter:
    def __init__(self):
        self.exported = []

    async def export(self, state):
        self.exported.append(state)
        return b"%PDF-1.4 fake"


def test_export_uses_a_reconciled_snapshot(client, full_state):
    exporter = _RecordingExporter()
    app.dependency_overrides[get_document_exporter] = lambda: exporter
    stale = full_state.replace(finalPrice="1원").model_dump(mode="json")
    try:
        response = client.post("/contracts/export", json={"state": stale})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert exporter.exported[0].finalPrice == "280,000원"


class _BusyExporter:
    async def export(self, state):
        raise ExportInProgress()


def test_export_in_progress_is_a_conflict(client, full_state):
    app.dependency_overrides[get_document_exporter] = lambda: _BusyExporter()
    try:
        response = client.post("/contracts/export", json={"state": full_state.model_dump(mode="json")})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 409
