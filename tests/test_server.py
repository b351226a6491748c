#!/usr/bin/env python3
"""
Tests for the HTTP API in server.py
"""

import os
import sys
import pytest
from unittest.mock import AsyncMock
from httpx import AsyncClient, ASGITransport

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import SwarmConfig
from research_client import RemoteCallError
from server import create_app, PROJECTS_REQUIRED, CRITERIA_INVALID, AGENT_CONFIG_INVALID
from swarm import ResearchSwarm


@pytest.fixture
async def client(swarm):
    """HTTP client bound to an app serving the initialized test swarm"""
    app = create_app(swarm=swarm)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


class TestResearchEndpoint:
    """POST /api/research"""

    async def test_research_batch(self, client):
        resp = await client.post("/api/research", json={
            "projects": ["Solana", "Uniswap", "Aave", "Jupiter"],
            "criteria": ["tokenomics", "team"],
        })

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        data = body["data"]
        assert data["swarm_id"] == "test_swarm"
        assert data["total_projects"] == 4
        assert [r["project"] for r in data["results"]] == ["Solana", "Uniswap", "Aave", "Jupiter"]
        assert [r["agent"] for r in data["results"]] == ["agent_0", "agent_1", "agent_2", "agent_0"]
        assert all(r["result"]["success"] for r in data["results"])

    async def test_criteria_optional(self, client):
        resp = await client.post("/api/research", json={"projects": ["Solana"]})
        assert resp.status_code == 200
        assert resp.json()["data"]["total_projects"] == 1

    @pytest.mark.parametrize("payload", [
        {"projects": []},
        {"projects": "Solana"},
        {"criteria": ["team"]},
        ["Solana"],
    ])
    async def test_invalid_projects(self, client, payload):
        resp = await client.post("/api/research", json=payload)

        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": PROJECTS_REQUIRED}

    async def test_missing_body(self, client):
        resp = await client.post("/api/research")
        assert resp.status_code == 400
        assert resp.json()["error"] == PROJECTS_REQUIRED

    @pytest.mark.parametrize("payload", [
        {"projects": [1, 2]},
        {"projects": ["Solana", None]},
    ])
    async def test_non_string_projects(self, client, payload):
        resp = await client.post("/api/research", json=payload)

        assert resp.status_code == 400
        assert resp.json()["error"] == PROJECTS_REQUIRED

    async def test_malformed_json(self, client):
        resp = await client.post(
            "/api/research",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == PROJECTS_REQUIRED

    @pytest.mark.parametrize("criteria", ["team", [1, 2]])
    async def test_invalid_criteria(self, client, criteria):
        resp = await client.post("/api/research", json={"projects": ["Solana"], "criteria": criteria})

        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": CRITERIA_INVALID}

    async def test_null_criteria_allowed(self, client):
        resp = await client.post("/api/research", json={"projects": ["Solana"], "criteria": None})
        assert resp.status_code == 200

    async def test_failed_project_still_200(self, client, swarm):
        swarm.get_agent("agent_0").client = AsyncMock()
        swarm.get_agent("agent_0").client.submit_prompt.side_effect = Exception("Network error")

        resp = await client.post("/api/research", json={"projects": ["A", "B"]})

        assert resp.status_code == 200
        results = resp.json()["data"]["results"]
        assert results[0]["result"] == {
            "success": False,
            "error": "Network error",
            "timestamp": results[0]["result"]["timestamp"],
        }
        assert results[1]["result"]["success"] is True

    async def test_uninitialized_swarm_returns_500(self, offline_client):
        swarm = ResearchSwarm(offline_client, SwarmConfig(max_agents=2))
        app = create_app(swarm=swarm)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            resp = await c.post("/api/research", json={"projects": ["Solana"]})

        assert resp.status_code == 500
        assert resp.json() == {"success": False, "error": "Swarm not initialized"}


class TestSwarmEndpoints:
    """Status, agents and history"""

    async def test_status(self, client):
        resp = await client.get("/api/status")

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["swarm_id"] == "test_swarm"
        assert data["is_active"] is True
        assert data["queue_size"] == 0
        assert sorted(data["agents"]) == ["agent_0", "agent_1", "agent_2"]

    async def test_list_agents(self, client):
        resp = await client.get("/api/agents")

        data = resp.json()["data"]
        assert data["agent_count"] == 3
        assert data["agents"]["agent_0"]["current_task"] is None

    async def test_add_agent(self, client):
        resp = await client.post("/api/agents", json={"specialization": "defi"})

        assert resp.status_code == 201
        assert resp.json()["data"] == {"agent_id": "agent_3", "agent_count": 4}

    async def test_add_agent_without_body(self, client):
        resp = await client.post("/api/agents")
        assert resp.status_code == 201
        assert resp.json()["data"]["agent_id"] == "agent_3"

    async def test_add_agent_applies_typed_config(self, client, swarm):
        resp = await client.post("/api/agents", json={
            "max_tokens": 500,
            "specializations": ["defi"],
            "tier": "gold",
        })

        assert resp.status_code == 201
        agent = swarm.get_agent("agent_3")
        assert agent.config.max_tokens == 500
        assert agent.config.specializations == ["defi"]
        assert agent.config.extra["tier"] == "gold"
        assert agent.config.swarm_id == "test_swarm"

    async def test_add_agent_rejects_non_object(self, client):
        resp = await client.post("/api/agents", json=["defi"])
        assert resp.status_code == 400

    @pytest.mark.parametrize("payload,field", [
        ({"timeout": "abc"}, "timeout"),
        ({"specializations": "defi"}, "specializations"),
        ({"max_tokens": -5}, "max_tokens"),
        ({"temperature": "hot"}, "temperature"),
    ])
    async def test_add_agent_rejects_bad_types(self, client, swarm, payload, field):
        resp = await client.post("/api/agents", json=payload)

        assert resp.status_code == 400
        error = resp.json()["error"]
        assert error.startswith(AGENT_CONFIG_INVALID)
        assert field in error
        assert swarm.agent_count == 3

    async def test_added_agent_researches_successfully(self, client):
        await client.post("/api/agents", json={"timeout": 15, "specializations": ["defi"]})

        resp = await client.post("/api/research", json={"projects": ["P1", "P2", "P3", "P4"]})

        results = resp.json()["data"]["results"]
        assert results[3]["agent"] == "agent_3"
        assert all(r["result"]["success"] for r in results)

    async def test_remove_agent(self, client):
        resp = await client.delete("/api/agents/agent_1")

        assert resp.status_code == 200
        assert resp.json()["data"]["agent_count"] == 2

    async def test_remove_missing_agent(self, client, swarm):
        resp = await client.delete("/api/agents/agent_99")

        assert resp.status_code == 404
        assert resp.json()["success"] is False
        assert swarm.agent_count == 3

    async def test_history(self, client):
        await client.post("/api/research", json={"projects": ["Solana", "Aave"]})

        resp = await client.get("/api/history")

        data = resp.json()["data"]
        assert data["swarm_id"] == "test_swarm"
        assert data["total_agents"] == 3
        counts = {h["agent_id"]: h["research_count"] for h in data["agent_histories"]}
        assert counts == {"agent_0": 1, "agent_1": 1, "agent_2": 0}


class TestServiceEndpoints:
    """Root, health and on-chain lookups"""

    async def test_root(self, client):
        resp = await client.get("/")

        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Web3 Research Assistant API"
        assert "/api/research" in body["endpoints"]

    async def test_health(self, client):
        resp = await client.get("/api/health")

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["swarm_active"] is True
        assert data["remote"]["status"] == "healthy"

    async def test_health_remote_down(self, client, swarm):
        swarm.client.health_check = AsyncMock(side_effect=RemoteCallError("HTTP 503: down", status=503))

        resp = await client.get("/api/health")

        assert resp.status_code == 502
        assert "503" in resp.json()["error"]

    async def test_onchain(self, client):
        resp = await client.get("/api/onchain/Raydium")

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert set(data) == {"solana", "ethereum", "polygon"}
        assert data["solana"]["token_info"]["project_name"] == "Raydium"
        assert data["ethereum"]["latest"]["block_number"] == 18500000


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
