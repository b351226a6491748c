#!/usr/bin/env python3
"""
Multi-Chain Project Analyzer

Looks a project up on several chains through the research API. Each chain
is queried independently: a failing chain is reported as
``{"error": message}`` and does not affect the others.
"""

from typing import Dict, Any, Optional, Sequence
import logging

from research_client import ResearchAPI

logger = logging.getLogger(__name__)

SUPPORTED_CHAINS = ("solana", "ethereum", "polygon")


class MultiChainAnalyzer:
    """Best-effort per-chain project lookups"""

    def __init__(self, client: ResearchAPI, supported_chains: Sequence[str] = SUPPORTED_CHAINS):
        self.client = client
        self.supported_chains = tuple(supported_chains)

    async def get_project_data(
        self,
        project_name: str,
        chains: Optional[Sequence[str]] = None,
    ) -> Dict[str, Dict[str, Any]]:
        """
        Query every requested chain for a project.

        Args:
            project_name: Project to look up
            chains: Chains to query (default: all supported chains)

        Returns:
            Mapping of chain name to its data or ``{"error": message}``
        """
        results = {}
        for chain in chains or self.supported_chains:
            try:
                results[chain] = await self._query_chain(chain, project_name)
            except Exception as e:
                logger.error(f"Error querying {chain}: {e}")
                results[chain] = {"error": str(e) or type(e).__name__}
        return results

    async def _query_chain(self, chain: str, project_name: str) -> Dict[str, Any]:
        if chain not in self.supported_chains:
            raise ValueError(f"Unsupported chain: {chain}")

        if chain == "solana":
            token_info = await self.client.query_onchain(project_name)
            latest = await self.client.query_blockchain_data(chain, "latest")
            return {"token_info": token_info, "latest": latest}

        return {"latest": await self.client.query_blockchain_data(chain, "latest")}
