from __future__ import annotations

import pytest

from content import repository as content_repository
from records import registry


@pytest.fixture
def pages(monkeypatch):
    store: dict[str, dict] = {}

    async def list_pages():
        return [store[slug] for slug in sorted(store)]

    async def get_page(slug):
        return store.get(slug)

    async def upsert_page(slug, *, content, title):
        created = slug not in store
        page = store.setdefault(slug, {"id": len(store) + 1, "slug": slug, "title": None})
        page["content"] = content
        if title is not None:
            page["title"] = title
        return dict(page), created

    async def delete_page(slug):
        return store.pop(slug, None)

    for fn in (list_pages, get_page, upsert_page, delete_page):
        monkeypatch.setattr(content_repository, fn.__name__, fn)
    return store


def test_page_upsert_creates_then_updates(client, pages):
    created = client.put("/api/pages/privacy", json={"content": "<p>v1</p>", "title": "Privacy"})
    updated = client.put("/api/pages/privacy", json={"content": "<p>v2</p>"})

    assert created.status_code == 201
    assert created.json()["message"] == "Page created successfully."
    assert updated.status_code == 200
    assert updated.json()["data"] == {"id": 1, "slug": "privacy", "title": "Privacy", "content": "<p>v2</p>"}


def test_page_content_is_required(client, pages):
    resp = client.put("/api/pages/privacy", json={"content": ""})

    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert pages == {}


def test_page_read_list_and_delete(client, pages):
    client.put("/api/pages/terms", json={"content": "T"})
    client.put("/api/pages/about", json={"content": "A"})

    assert [p["slug"] for p in client.get("/api/pages").json()["data"]] == ["about", "terms"]
    assert client.get("/api/pages/terms").json()["data"]["content"] == "T"
    assert client.delete("/api/pages/terms").status_code == 200
    assert client.get("/api/pages/terms").status_code == 404
    assert client.delete("/api/pages/terms").status_code == 404


def test_topnavbar_combines_contact_row_and_icons(client, fake_repo):
    fake_repo.seed(registry.get("top-navbar"), email="sales@dealer.example", phone="1800-000")
    fake_repo.seed(registry.get("social-icons"), platform="Facebook", icon_class="fa-facebook", url="https://fb.example")
    fake_repo.seed(registry.get("social-icons"), platform="X", icon_class="fa-x", url="https://x.example")

    data = client.get("/api/topnavbar").json()["data"]

    assert data["navbarInfo"]["email"] == "sales@dealer.example"
    assert [icon["platform"] for icon in data["icons"]] == ["Facebook", "X"]


def test_topnavbar_without_rows(client):
    data = client.get("/api/topnavbar").json()["data"]
    assert data == {"navbarInfo": {}, "icons": []}


def test_faq_categories(client, fake_repo):
    faq = registry.get("faq")
    fake_repo.seed(faq, category="Service", question="q1", answer="a1")
    fake_repo.seed(faq, category="Finance", question="q2", answer="a2")
    fake_repo.seed(faq, category="Service", question="q3", answer="a3")

    assert client.get("/api/faq-categories").json()["data"] == ["Finance", "Service"]


def test_faq_filter_by_category(client, fake_repo):
    faq = registry.get("faq")
    fake_repo.seed(faq, category="Service", question="q1", answer="a1")
    fake_repo.seed(faq, category="Finance", question="q2", answer="a2")

    data = client.get("/api/faq", params={"category": "Finance"}).json()["data"]

    assert [f["question"] for f in data] == ["q2"]


def test_location_page_by_type_and_slug(client, fake_repo):
    locations = registry.get("detailed-locations")
    fake_repo.seed(locations, type="showroom", slug="whitefield", page_heading="Whitefield", main_image="main.png")
    fake_repo.seed(locations, type="workshop", slug="whitefield", page_heading="Whitefield Workshop")

    resp = client.get("/api/detailed-locations/showroom/whitefield")

    data = resp.json()["data"]
    assert data["page_heading"] == "Whitefield"
    assert data["main_image"] == "uploads/locations/main/main.png"
    assert data["gallery_images"] == []
    assert client.get("/api/detailed-locations/service/nowhere").status_code == 404
