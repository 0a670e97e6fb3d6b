import pytest
from httpx import ASGITransport, AsyncClient
from pymongo.errors import ServerSelectionTimeoutError

from workshop_diag.api.diagnostic import get_catalog


async def _post_suggest(app, payload):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        return await ac.post("/diagnostic/suggest", json=payload)


async def _get_problems(app, params):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        return await ac.get("/diagnostic/problems", params=params)


@pytest.mark.asyncio
async def test_suggest_ranks_brake_pads_first(test_app):
    response = await _post_suggest(test_app, {"symptoms": ["barulho ao frear", "pedal de freio baixo"]})

    assert response.status_code == 200
    body = response.json()
    assert body[0]["name"] == "Pastilhas de freio desgastadas"
    assert body[0]["matchScore"] == 85
    assert body[0]["category"] == "freios"
    assert body[0]["severity"] == "high"
    assert body[0]["estimatedCost"] == 300.0
    assert set(body[0]) == {
        "problemId", "name", "category", "severity",
        "estimatedCost", "description", "solutions", "matchScore",
    }
    scores = [s["matchScore"] for s in body]
    assert scores == sorted(scores, reverse=True)
    assert all(s > 0 for s in scores)


@pytest.mark.asyncio
async def test_suggest_with_category(test_app):
    response = await _post_suggest(test_app, {"symptoms": ["ruído", "barulho"], "category": "suspensao"})

    assert response.status_code == 200
    body = response.json()
    assert body
    assert {s["category"] for s in body} == {"suspensao"}


@pytest.mark.asyncio
async def test_suggest_empty_symptoms(test_app):
    response = await _post_suggest(test_app, {"symptoms": []})

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_suggest_rejects_unknown_category(test_app):
    response = await _post_suggest(test_app, {"symptoms": ["motor"], "category": "banana"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_problems_by_category(test_app):
    response = await _get_problems(test_app, {"category": "pneus"})

    assert response.status_code == 200
    body = response.json()
    assert [p["name"] for p in body] == ["Pneus desgastados", "Pneu furado"]
    assert all(p["matchScore"] == 100 for p in body)


@pytest.mark.asyncio
async def test_problems_requires_category(test_app):
    response = await _get_problems(test_app, {})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_catalog_outage_returns_503(test_app, spy_catalog_factory):
    async def _broken_catalog():
        yield spy_catalog_factory(error=ServerSelectionTimeoutError("no servers"))

    test_app.dependency_overrides[get_catalog] = _broken_catalog

    response = await _post_suggest(test_app, {"symptoms": ["motor"]})

    assert response.status_code == 503
    assert response.json() == {"detail": "Problem catalog unavailable"}


@pytest.mark.asyncio
async def test_healthz(test_app):
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/healthz")

    assert response.json() == {"status": "ok"}
