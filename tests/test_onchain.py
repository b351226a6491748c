#!/usr/bin/env python3
"""
Tests for onchain.py
"""

import os
import sys
import pytest
from unittest.mock import AsyncMock

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from onchain import MultiChainAnalyzer, SUPPORTED_CHAINS
from research_client import RemoteCallError


class TestMultiChainAnalyzer:
    """Test per-chain project lookups"""

    async def test_queries_all_supported_chains(self, offline_client):
        analyzer = MultiChainAnalyzer(offline_client)

        data = await analyzer.get_project_data("Jupiter")

        assert list(data) == list(SUPPORTED_CHAINS)
        assert data["solana"]["token_info"]["project_name"] == "Jupiter"
        assert data["solana"]["latest"]["slot"] == 250000000
        assert data["polygon"]["latest"]["block_number"] == 50000000

    async def test_chain_failure_is_isolated(self, offline_client):
        original = offline_client.query_blockchain_data

        async def flaky(chain, query):
            if chain == "ethereum":
                raise RemoteCallError("HTTP 500: Internal Server Error", status=500)
            return await original(chain, query)

        offline_client.query_blockchain_data = flaky
        analyzer = MultiChainAnalyzer(offline_client)

        data = await analyzer.get_project_data("Uniswap")

        assert data["ethereum"] == {"error": "HTTP 500: Internal Server Error"}
        assert "latest" in data["solana"]
        assert "latest" in data["polygon"]

    async def test_unsupported_chain(self, offline_client):
        analyzer = MultiChainAnalyzer(offline_client)

        data = await analyzer.get_project_data("Uniswap", chains=["ethereum", "bitcoin"])

        assert "latest" in data["ethereum"]
        assert data["bitcoin"] == {"error": "Unsupported chain: bitcoin"}

    async def test_custom_chain_set(self):
        client = AsyncMock()
        client.query_blockchain_data.return_value = {"block_number": 1}
        analyzer = MultiChainAnalyzer(client, supported_chains=["ethereum"])

        data = await analyzer.get_project_data("Aave")

        assert data == {"ethereum": {"latest": {"block_number": 1}}}
        client.query_onchain.assert_not_awaited()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
