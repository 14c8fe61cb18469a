"""Integration tests: News endpoints."""

import pytest
from tests.conftest import requires_db

pytestmark = requires_db
from httpx import AsyncClient


CONTENT = (
    "Scheduled maintenance will interrupt the water supply in District 3 "
    "between 8:00 and 14:00. Please store water in advance."
)


def _article(suffix: str, **overrides) -> dict:
    payload = {
        "title": f"Maintenance notice {suffix}",
        "summary": "Planned supply interruption",
        "content": CONTENT,
        "category": "maintenance",
        "tags": ["maintenance"],
        "status": "published",
    }
    payload.update(overrides)
    return payload


async def _create(client: AsyncClient, api_base: str, admin: dict, suffix: str, **overrides) -> dict:
    resp = await client.post(f"{api_base}/news", json=_article(suffix, **overrides), headers=admin["headers"])
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


@pytest.mark.asyncio
async def test_create_derives_slug_and_publish_time(
    async_client: AsyncClient, api_base: str, admin: dict, unique_suffix: str
):
    news = await _create(async_client, api_base, admin, unique_suffix)
    assert news["slug"] == f"maintenance-notice-{unique_suffix}"
    assert news["published_at"] is not None
    assert news["author"]["id"] == admin["id"]
    assert news["reading_time"] == 1


@pytest.mark.asyncio
async def test_duplicate_slug(async_client: AsyncClient, api_base: str, admin: dict, unique_suffix: str):
    await _create(async_client, api_base, admin, unique_suffix)
    resp = await async_client.post(
        f"{api_base}/news", json=_article(unique_suffix), headers=admin["headers"]
    )
    assert resp.status_code == 409
    assert resp.json()["error"]["field"] == "slug"


@pytest.mark.asyncio
async def test_read_by_slug_counts_views(async_client: AsyncClient, api_base: str, admin: dict, unique_suffix: str):
    news = await _create(async_client, api_base, admin, unique_suffix)

    first = await async_client.get(f"{api_base}/news/{news['slug']}")
    second = await async_client.get(f"{api_base}/news/{news['slug']}")
    assert first.status_code == 200
    assert second.json()["data"]["view_count"] == first.json()["data"]["view_count"] + 1


@pytest.mark.asyncio
async def test_draft_hidden_from_public(async_client: AsyncClient, api_base: str, admin: dict, unique_suffix: str):
    news = await _create(async_client, api_base, admin, unique_suffix, status="draft")
    assert news["published_at"] is None

    resp = await async_client.get(f"{api_base}/news/{news['slug']}")
    assert resp.status_code == 404

    resp = await async_client.get(
        f"{api_base}/news/admin/all", params={"status": "draft", "search": unique_suffix}, headers=admin["headers"]
    )
    assert resp.status_code == 200
    assert [n["id"] for n in resp.json()["data"]] == [news["id"]]

    resp = await async_client.put(
        f"{api_base}/news/{news['id']}", json={"status": "published"}, headers=admin["headers"]
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["published_at"] is not None

    resp = await async_client.get(f"{api_base}/news/{news['slug']}")
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_public_feed_search(async_client: AsyncClient, api_base: str, admin: dict, unique_suffix: str):
    news = await _create(async_client, api_base, admin, unique_suffix, is_pinned=True)
    resp = await async_client.get(f"{api_base}/news", params={"search": unique_suffix})
    assert resp.status_code == 200
    body = resp.json()
    assert body["meta"]["total"] == 1
    assert body["data"][0]["id"] == news["id"]
    assert "content" not in body["data"][0]


@pytest.mark.asyncio
async def test_update_keeps_slug(async_client: AsyncClient, api_base: str, admin: dict, unique_suffix: str):
    news = await _create(async_client, api_base, admin, unique_suffix)
    resp = await async_client.put(
        f"{api_base}/news/{news['id']}",
        json={"title": f"Updated notice {unique_suffix}"},
        headers=admin["headers"],
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["slug"] == news["slug"]


@pytest.mark.asyncio
async def test_like_and_share(async_client: AsyncClient, api_base: str, admin: dict, unique_suffix: str):
    news = await _create(async_client, api_base, admin, unique_suffix)

    resp = await async_client.post(f"{api_base}/news/{news['id']}/like")
    assert resp.status_code == 200
    assert resp.json()["data"]["like_count"] == 1
    resp = await async_client.post(f"{api_base}/news/{news['id']}/like")
    assert resp.json()["data"]["like_count"] == 2

    resp = await async_client.post(f"{api_base}/news/{news['id']}/share")
    assert resp.json()["data"]["share_count"] == 1


@pytest.mark.asyncio
async def test_delete_news(async_client: AsyncClient, api_base: str, admin: dict, customer: dict, unique_suffix: str):
    news = await _create(async_client, api_base, admin, unique_suffix)

    resp = await async_client.delete(f"{api_base}/news/{news['id']}", headers=customer["headers"])
    assert resp.status_code == 403

    resp = await async_client.delete(f"{api_base}/news/{news['id']}", headers=admin["headers"])
    assert resp.status_code == 200

    resp = await async_client.post(f"{api_base}/news/{news['id']}/like")
    assert resp.status_code == 404
