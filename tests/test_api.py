"""Tests for the HTTP API."""

import io

from fastapi.testclient import TestClient
from PIL import Image

from scrapbook.api.app import create_app
from scrapbook.containers import AppContainer
from scrapbook.services.memories import MemoryService
from tests.conftest import FailingMemoryStorage, make_data_url


def _client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


def _create(client: TestClient, notes: str = "") -> dict:
    response = client.post(
        "/memories",
        json={"photo": make_data_url(400, 300), "filter_id": "warm", "notes": notes},
    )
    assert response.status_code == 201
    return response.json()


def test_health(container: AppContainer) -> None:
    response = _client(container).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_catalog_endpoints(container: AppContainer) -> None:
    client = _client(container)

    templates = client.get("/templates").json()["templates"]
    filters = client.get("/filters").json()["filters"]

    assert [t["id"] for t in templates] == [
        "minimal",
        "vintage",
        "modern",
        "pastel",
        "nature",
    ]
    assert filters[0] == {"id": "none", "name": "Original", "style": ""}


def test_create_list_and_count(container: AppContainer) -> None:
    client = _client(container)
    first = _create(client, "beach day")
    second = _create(client, "rainy afternoon")

    listed = client.get("/memories").json()["memories"]

    assert [m["id"] for m in listed] == [second["id"], first["id"]]
    assert first["display_date"] == "March 5, 2024"
    assert first["label"] == "Mar 5, 2024 - 3:07 PM"
    assert client.get("/memories/count").json() == {"count": 2}


def test_search_and_grouping(container: AppContainer) -> None:
    client = _client(container)
    beach = _create(client, "beach day")
    _create(client, "rainy afternoon")

    found = client.get("/memories", params={"q": "Beach"}).json()["memories"]
    days = client.get("/memories/grouped").json()["days"]

    assert [m["id"] for m in found] == [beach["id"]]
    assert len(days) == 1
    assert days[0]["day"] == "2024-03-05"
    assert days[0]["heading"] == "Tuesday, March 5, 2024"
    assert len(days[0]["memories"]) == 2


def test_update_notes(container: AppContainer) -> None:
    client = _client(container)
    created = _create(client)

    response = client.patch(f"/memories/{created['id']}", json={"notes": "edited"})

    assert response.status_code == 200
    assert response.json()["notes"] == "edited"
    assert response.json()["photo"] == created["photo"]


def test_update_missing_returns_404(container: AppContainer) -> None:
    response = _client(container).patch("/memories/nope", json={"notes": "x"})

    assert response.status_code == 404


def test_delete_is_idempotent(container: AppContainer) -> None:
    client = _client(container)
    created = _create(client)

    assert client.delete(f"/memories/{created['id']}").status_code == 204
    assert client.delete(f"/memories/{created['id']}").status_code == 204
    assert client.get("/memories").json() == {"memories": []}


def test_caption_endpoint(container: AppContainer) -> None:
    client = _client(container)
    created = _create(client)

    response = client.post(f"/memories/{created['id']}/caption")

    assert response.status_code == 200
    assert response.json()["caption"].startswith("📸 Memory from March 5, 2024")


def test_export_returns_png_download(container: AppContainer) -> None:
    client = _client(container)
    created = _create(client)

    response = client.post(
        f"/memories/{created['id']}/export",
        json={"template_id": "pastel", "watermark": False},
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert 'filename="memory-' in response.headers["content-disposition"]
    image = Image.open(io.BytesIO(response.content))
    assert image.size == (1080, 1080)


def test_export_unknown_template_returns_404(container: AppContainer) -> None:
    client = _client(container)
    created = _create(client)

    response = client.post(
        f"/memories/{created['id']}/export", json={"template_id": "neon"}
    )

    assert response.status_code == 404


def test_export_corrupt_photo_returns_422(container: AppContainer) -> None:
    client = _client(container)
    response = client.post(
        "/memories", json={"photo": "data:image/png;base64,AAAA", "filter_id": "none"}
    )
    memory_id = response.json()["id"]

    export = client.post(f"/memories/{memory_id}/export", json={})

    assert export.status_code == 422


def test_storage_failure_returns_503(container: AppContainer) -> None:
    container.memory_service = MemoryService(storage=FailingMemoryStorage())
    client = _client(container)

    response = client.post(
        "/memories", json={"photo": make_data_url(10, 10), "filter_id": "none"}
    )

    assert response.status_code == 503
