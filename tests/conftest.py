#!/usr/bin/env python3
"""
Pytest configuration and shared fixtures
"""

import os
import sys
import pytest
from unittest.mock import AsyncMock

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import SwarmConfig, APIConfig
from offline_client import OfflineResearchClient
from swarm import ResearchSwarm, ResearchAgent


@pytest.fixture
def mock_api_key():
    """Fixture to provide a mock API key"""
    return "test_api_key_12345"


@pytest.fixture
def api_config(mock_api_key):
    """Fixture to provide an API config pointing at a mock host"""
    return APIConfig(
        base_url="https://mock-api.juliaos.com",
        api_key=mock_api_key,
        timeout=5,
        max_retries=1,
    )


@pytest.fixture
def offline_client():
    """Fixture to provide a deterministic research client"""
    return OfflineResearchClient()


@pytest.fixture
def failing_client():
    """Fixture to provide a client whose prompt calls always fail"""
    client = OfflineResearchClient()
    client.submit_prompt = AsyncMock(side_effect=Exception("Network error"))
    return client


@pytest.fixture
async def agent(offline_client):
    """Fixture to provide an initialized agent"""
    agent = ResearchAgent("test_agent", offline_client)
    await agent.initialize()
    return agent


@pytest.fixture
async def swarm(offline_client):
    """Fixture to provide an initialized three-agent swarm"""
    swarm = ResearchSwarm(offline_client, SwarmConfig(swarm_id="test_swarm", max_agents=3))
    await swarm.initialize()
    return swarm


@pytest.fixture
def sample_chat_response():
    """Fixture to provide a sample chat completion response"""
    from unittest.mock import MagicMock

    mock_response = MagicMock()
    mock_response.choices = [MagicMock()]
    mock_response.choices[0].message.content = (
        '```json\n{"analysis": "Solid fundamentals", "confidence": 0.9, '
        '"recommendations": ["Watch unlocks"], "risks": ["Validator concentration"]}\n```'
    )
    mock_response.choices[0].finish_reason = "stop"
    mock_response.usage = MagicMock()
    mock_response.usage.total_tokens = 42
    mock_response.model = "gpt-4o-mini"
    return mock_response
