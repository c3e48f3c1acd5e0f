"""Test the FastAPI endpoints."""
from contextlib import asynccontextmanager
import pytest
from httpx import ASGITransport, AsyncClient
import api.app as app_module
from api.app import app


@asynccontextmanager
async def client():
    """Client bound to the app; stops any battle runner on exit."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        try:
            yield ac
        finally:
            await app_module.shutdown()


async def start(ac, **kwargs):
    # long start delay keeps the loop idle so the board stays at turn 0
    body = {"seed": 42, "start_delay_ms": 60_000, **kwargs}
    return await ac.post("/battle/start", json=body)


@pytest.mark.asyncio
async def test_root():
    async with client() as ac:
        response = await ac.get("/")
    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"


@pytest.mark.asyncio
async def test_state_requires_a_battle():
    async with client() as ac:
        response = await ac.get("/battle/local/state")
    assert response.status_code == 400
    assert response.json()["detail"] == "Battle not started"


@pytest.mark.asyncio
async def test_start_battle():
    """Test starting a new battle."""
    async with client() as ac:
        response = await start(ac)
    assert response.status_code == 200
    assert response.json() == {"battle_id": "local"}


@pytest.mark.asyncio
async def test_start_rejects_bad_speed():
    async with client() as ac:
        response = await start(ac, speed_ms=-1)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_state():
    """Test getting battle state."""
    async with client() as ac:
        await start(ac)
        response = await ac.get("/battle/local/state")

    assert response.status_code == 200
    data = response.json()
    assert len(data["units"]) == 8
    assert data["round"] == 1
    assert data["status"] == "running"
    assert data["paused"] is False
    assert data["tiles"][3][3] == "wall"


@pytest.mark.asyncio
async def test_pause_and_resume():
    async with client() as ac:
        await start(ac)
        assert (await ac.post("/battle/local/pause")).json() == {"paused": True}
        paused = (await ac.get("/battle/local/state")).json()
        assert (await ac.post("/battle/local/resume")).json() == {"paused": False}
        resumed = (await ac.get("/battle/local/state")).json()

    assert paused["paused"] is True and paused["status"] == "paused"
    assert resumed["paused"] is False and resumed["status"] == "running"


@pytest.mark.asyncio
async def test_speed_control():
    async with client() as ac:
        await start(ac)
        cycled = (await ac.post("/battle/local/speed", json={})).json()
        explicit = (await ac.post("/battle/local/speed", json={"speed_ms": 150})).json()
        current = (await ac.get("/battle/local/speed")).json()

    assert cycled == {"speed_ms": 350, "preset": "FAST"}
    assert explicit == {"speed_ms": 150, "preset": "ULTRA"}
    assert current == explicit


@pytest.mark.asyncio
async def test_get_events():
    """Test retrieving events."""
    async with client() as ac:
        await start(ac)
        response = await ac.get("/battle/local/events?since=0")

    assert response.status_code == 200
    data = response.json()
    assert data == {"next_offset": 0, "events": []}


@pytest.mark.asyncio
async def test_get_report():
    async with client() as ac:
        await start(ac)
        response = await ac.get("/battle/local/report")

    data = response.json()
    assert data["winner"] is None
    assert data["victory"] == 0
    assert data["scores"] == {"red": 0, "blue": 0, "total": 0}
