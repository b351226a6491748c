"""
Web3 Research Swarm Module

A fixed pool of research agents that turn project names into structured
research reports through a remote AI/blockchain API.

Capabilities:
- Round-robin assignment of projects to agents
- Per-agent task tracking and research history
- Failure isolation: one failing project never aborts the batch
- Optional concurrent assignments with per-agent serialization

Architecture:
    ┌─────────────────────────────────────────────┐
    │               RESEARCH SWARM                │
    │  - Agent lifecycle                          │
    │  - Round-robin assignment (i mod N)         │
    │  - Result aggregation                       │
    └────────────────┬────────────────────────────┘
                     │
         ┌───────────┼───────────┐
         │           │           │
    ┌────▼────┐ ┌────▼────┐ ┌────▼────┐
    │ agent_0 │ │ agent_1 │ │ agent_2 │  × max_agents
    └────┬────┘ └────┬────┘ └────┬────┘
         │           │           │
    ┌────▼───────────▼───────────▼────┐
    │       REMOTE RESEARCH API       │
    │   (LLM prompt + on-chain data)  │
    └─────────────────────────────────┘

Example Usage:
    from research_client import create_client
    from swarm import ResearchSwarm, SwarmConfig

    swarm = ResearchSwarm(create_client(), SwarmConfig(max_agents=3))
    await swarm.initialize()
    report = await swarm.coordinate_research(["Solana", "Aave"], ["security"])
"""

from config import SwarmConfig

from .research_swarm import (
    ResearchSwarm,
    SwarmReport,
    ProjectAssignment,
    SwarmNotInitializedError,
)

from .agents.research_agent import (
    ResearchAgent,
    ResearchResult,
    ResearchRecord,
    AgentTask,
)

__all__ = [
    "ResearchSwarm",
    "SwarmReport",
    "ProjectAssignment",
    "SwarmNotInitializedError",
    "SwarmConfig",
    "ResearchAgent",
    "ResearchResult",
    "ResearchRecord",
    "AgentTask",
]
