"""Tests for API endpoints."""

from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from api.limiter import limiter
from api.main import app
from core.rules import RULES_VERSION
from core.statistics.house_edge import HouseEdgeResult


def _fake_result(num_hands, rules):
    return HouseEdgeResult(
        house_edge_percent=0.5,
        expected_return=-0.005,
        num_hands=num_hands,
        hands_considered=550,
        max_split_hands=min(rules.max_split_hands, 4),
        player_blackjack_probability=0.0475,
        dealer_blackjack_probability=0.0475,
        action_frequencies={"stand": 0.5, "hit": 0.3, "double": 0.1, "split": 0.1, "surrender": 0.0},
    )


@pytest.fixture(autouse=True)
def reset_limiter():
    """Start each test with a fresh rate-limit window."""
    limiter.reset()
    yield


@pytest.fixture
def fake_simulation():
    """Replace the exact computation with an instant stand-in."""
    with patch("api.routes.simulate.simulate_house_edge", side_effect=_fake_result) as mock:
        yield mock


@pytest_asyncio.fixture
async def client():
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.mark.asyncio
async def test_health_check(client):
    """Test health check endpoint."""
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_simulate_defaults(client, fake_simulation):
    """An empty body runs the default rules at the default resolution."""
    response = await client.post("/api/simulate", json={})
    assert response.status_code == 200
    data = response.json()

    assert data["houseEdgePercent"] == 0.5
    assert data["numHands"] == 10_000
    assert data["rulesVersion"] == RULES_VERSION
    assert data["rules"]["decks"] == 2
    assert data["rules"]["hitSoft17"] is True
    assert data["rules"]["surrenderAllowed"] == "none"
    assert data["rules"]["blackjackPayout"] == 1.5
    assert "estimatedHouseEdgePercent" in data

    num_hands, rules = fake_simulation.call_args.args
    assert num_hands == 10_000
    assert rules.num_decks == 2


@pytest.mark.asyncio
async def test_simulate_without_body(client, fake_simulation):
    response = await client.post("/api/simulate")
    assert response.status_code == 200
    assert response.json()["numHands"] == 10_000


@pytest.mark.asyncio
async def test_simulate_zero_hands_uses_default(client, fake_simulation):
    response = await client.post("/api/simulate", json={"numHands": 0})
    assert response.status_code == 200
    assert response.json()["numHands"] == 10_000


@pytest.mark.asyncio
async def test_simulate_merges_rule_overrides(client, fake_simulation):
    """Supplied rules override defaults field by field."""
    payload = {
        "numHands": 250,
        "rules": {
            "decks": 6,
            "hitSoft17": False,
            "surrenderAllowed": "late",
            "blackjackPays": "6:5",
            "doubleRestriction": "10-11",
        },
    }
    response = await client.post("/api/simulate", json=payload)
    assert response.status_code == 200
    data = response.json()

    assert data["numHands"] == 250
    assert data["rules"]["decks"] == 6
    assert data["rules"]["hitSoft17"] is False
    assert data["rules"]["surrenderAllowed"] == "late"
    assert data["rules"]["blackjackPayout"] == 1.2
    assert data["rules"]["doubleRestriction"] == "10-11"
    # Untouched fields keep their defaults
    assert data["rules"]["doubleAfterSplit"] is True
    assert data["rules"]["resplitAces"] is True

    _, rules = fake_simulation.call_args.args
    assert rules.blackjack_payout == 1.2
    assert rules.double_on == "10-11"


@pytest.mark.asyncio
async def test_simulate_estimate_matches_rules(client, fake_simulation):
    payload = {"rules": {"decks": 6, "hitSoft17": False, "surrenderAllowed": "late", "resplitAces": False}}
    response = await client.post("/api/simulate", json=payload)
    assert response.json()["estimatedHouseEdgePercent"] == pytest.approx(0.41)


@pytest.mark.asyncio
async def test_simulate_rejects_contradictory_rules(client, fake_simulation):
    """European surrender without a no-hole-card game is rejected."""
    response = await client.post("/api/simulate", json={"rules": {"surrenderAllowed": "es10"}})
    assert response.status_code == 422
    fake_simulation.assert_not_called()


@pytest.mark.asyncio
async def test_simulate_accepts_enhc_rules(client, fake_simulation):
    payload = {"rules": {"decks": 6, "noHoleCard": True, "surrenderAllowed": "enhcAll"}}
    response = await client.post("/api/simulate", json=payload)
    assert response.status_code == 200
    assert response.json()["rules"]["noHoleCard"] is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"rules": {"decks": 0}},
        {"rules": {"surrenderAllowed": "sometimes"}},
        {"rules": {"blackjackPays": "2:1"}},
        {"numHands": -1},
    ],
)
async def test_simulate_validates_fields(client, fake_simulation, payload):
    response = await client.post("/api/simulate", json=payload)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_simulate_caps_num_hands(client, fake_simulation):
    response = await client.post("/api/simulate", json={"numHands": 10_000_001})
    assert response.status_code == 422
    fake_simulation.assert_not_called()


@pytest.mark.asyncio
async def test_simulate_failure_returns_error_body(client):
    with patch("api.routes.simulate.simulate_house_edge", side_effect=RuntimeError("boom")):
        response = await client.post("/api/simulate", json={})
    assert response.status_code == 500
    assert response.json() == {"error": "Simulation failed"}
