#!/usr/bin/env python3
"""
Web3 Research Swarm

The swarm owns a fixed pool of research agents and is responsible for:
1. Agent lifecycle - creating, initializing, adding and removing agents
2. Assignment - project i goes to the agent at position i mod agent count
3. Failure isolation - every project yields exactly one result entry
4. Aggregation - collecting outcomes into one ordered report

Assignments are awaited one after another by default, so batch latency is
the sum of per-project latencies. With ``SwarmConfig(parallel=True)`` they
run concurrently; each agent still serializes its own calls.

Example Usage:
    from offline_client import OfflineResearchClient
    from swarm import ResearchSwarm, SwarmConfig

    swarm = ResearchSwarm(OfflineResearchClient(), SwarmConfig(max_agents=3))
    await swarm.initialize()

    report = await swarm.coordinate_research(["Solana", "Uniswap"], ["tokenomics"])
    for entry in report.results:
        print(entry.project, entry.agent, entry.result.success)
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional, Callable, Sequence
import logging

from config import AgentConfig, SwarmConfig
from research_client import ResearchAPI
from swarm.agents.research_agent import ResearchAgent, ResearchResult

logger = logging.getLogger(__name__)

AgentFactory = Callable[[str, ResearchAPI, AgentConfig], ResearchAgent]


class SwarmNotInitializedError(RuntimeError):
    """Research was requested before the swarm finished initializing"""


@dataclass
class ProjectAssignment:
    """One project's outcome within a batch"""
    project: str
    agent: str
    result: ResearchResult

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project": self.project,
            "agent": self.agent,
            "result": self.result.to_dict(),
        }


@dataclass
class SwarmReport:
    """Aggregated result of a research batch"""
    swarm_id: str
    total_projects: int
    results: List[ProjectAssignment]
    timestamp: str

    @property
    def successful(self) -> int:
        return sum(1 for entry in self.results if entry.result.success)

    @property
    def failed(self) -> int:
        return self.total_projects - self.successful

    def to_dict(self) -> Dict[str, Any]:
        return {
            "swarm_id": self.swarm_id,
            "total_projects": self.total_projects,
            "results": [entry.to_dict() for entry in self.results],
            "timestamp": self.timestamp,
        }


def _default_agent_factory(agent_id: str, client: ResearchAPI, config: AgentConfig) -> ResearchAgent:
    return ResearchAgent(agent_id, client, config=config)


class ResearchSwarm:
    """
    Fixed pool of research agents with round-robin assignment.

    Agents are kept in an explicit ordered list; the order defines the
    round robin. The swarm creates and destroys its agents; nothing else
    holds them.
    """

    def __init__(
        self,
        client: ResearchAPI,
        config: Optional[SwarmConfig] = None,
        agent_factory: Optional[AgentFactory] = None,
    ):
        """
        Initialize the swarm.

        Args:
            client: Remote research API shared by all agents
            config: Swarm configuration (id, agent count, parallel mode)
            agent_factory: Builds an agent from (id, client, config)
        """
        self.client = client
        self.config = config or SwarmConfig()
        self.agent_factory = agent_factory or _default_agent_factory

        self._swarm_id = self.config.swarm_id
        self._agents: List[ResearchAgent] = []
        self._next_agent_number = 0
        # Placeholder for future backpressure; always empty
        self.task_queue: List[Any] = []
        self.is_active = False

    @property
    def swarm_id(self) -> str:
        return self._swarm_id

    @property
    def agents(self) -> Dict[str, ResearchAgent]:
        """Agents by id, in assignment order"""
        return {agent.agent_id: agent for agent in self._agents}

    @property
    def agent_count(self) -> int:
        return len(self._agents)

    def get_agent(self, agent_id: str) -> Optional[ResearchAgent]:
        for agent in self._agents:
            if agent.agent_id == agent_id:
                return agent
        return None

    def _new_agent(self, partial_config: Optional[Dict[str, Any]] = None) -> ResearchAgent:
        agent_id = f"agent_{self._next_agent_number}"
        self._next_agent_number += 1
        agent_config = self.config.agent_defaults.merged({
            **(partial_config or {}),
            "swarm_id": self.swarm_id,
        })
        return self.agent_factory(agent_id, self.client, agent_config)

    async def initialize(self) -> bool:
        """
        Create and initialize the configured number of agents.

        Agents are initialized one at a time. If any agent fails, the agents
        created so far are discarded and the error is re-raised; the swarm
        stays inactive.
        """
        logger.info(f"Research Swarm {self.swarm_id} initializing...")

        previous_number = self._next_agent_number
        self._next_agent_number = 0
        agents = []
        try:
            for _ in range(self.config.max_agents):
                agent = self._new_agent()
                await agent.initialize()
                agents.append(agent)
        except Exception as e:
            logger.error(f"Swarm {self.swarm_id} failed to initialize: {e}")
            self._next_agent_number = previous_number
            raise

        self._agents = agents
        self.is_active = True
        logger.info(f"Swarm initialized with {self.agent_count} agents")
        return True

    async def _research(self, agent: ResearchAgent, project: str, criteria: List[str]) -> ProjectAssignment:
        logger.info(f"Assigning {project} to {agent.agent_id}")
        try:
            result = await agent.research_project(project, criteria)
        except Exception as e:
            logger.error(f"Research failed for {project}: {e}")
            result = ResearchResult(
                success=False,
                error=str(e) or type(e).__name__,
                timestamp=datetime.now(timezone.utc).isoformat(),
            )
        return ProjectAssignment(project=project, agent=agent.agent_id, result=result)

    async def coordinate_research(
        self,
        projects: Sequence[str],
        criteria: Optional[Sequence[str]] = None,
    ) -> SwarmReport:
        """
        Research a batch of projects across the agent pool.

        Args:
            projects: Project names, in the order results should come back
            criteria: Research criteria applied to every project

        Returns:
            SwarmReport with one entry per project, in input order

        Raises:
            SwarmNotInitializedError: if the swarm is inactive or has no agents
        """
        if not self.is_active:
            raise SwarmNotInitializedError("Swarm not initialized")
        if not self._agents:
            raise SwarmNotInitializedError(f"Swarm {self.swarm_id} has no agents")

        criteria = list(criteria or [])
        agents = list(self._agents)
        logger.info(f"Coordinating research for {len(projects)} projects")

        assignments = [
            (agents[i % len(agents)], project)
            for i, project in enumerate(projects)
        ]

        if self.config.parallel:
            results = list(await asyncio.gather(
                *[self._research(agent, project, criteria) for agent, project in assignments]
            ))
        else:
            results = []
            for agent, project in assignments:
                results.append(await self._research(agent, project, criteria))

        return SwarmReport(
            swarm_id=self.swarm_id,
            total_projects=len(projects),
            results=results,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    def get_swarm_status(self) -> Dict[str, Any]:
        """Point-in-time snapshot of the swarm"""
        return {
            "swarm_id": self.swarm_id,
            "is_active": self.is_active,
            "agent_count": self.agent_count,
            "agents": {agent.agent_id: agent.get_state() for agent in self._agents},
            "queue_size": len(self.task_queue),
        }

    def get_research_history(self) -> List[Dict[str, Any]]:
        """Per-agent research history with counts"""
        histories = []
        for agent in self._agents:
            history = agent.get_history()
            histories.append({
                "agent_id": agent.agent_id,
                "research_count": len(history),
                "history": [record.to_dict() for record in history],
            })
        return histories

    async def add_agent(self, partial_config: Optional[Dict[str, Any]] = None) -> str:
        """Create, initialize and append a new agent; returns its id"""
        agent = self._new_agent(partial_config)
        await agent.initialize()
        self._agents.append(agent)

        logger.info(f"Added agent {agent.agent_id} to swarm {self.swarm_id}")
        return agent.agent_id

    async def remove_agent(self, agent_id: str) -> bool:
        """Remove an agent immediately, without waiting for an in-flight task"""
        agent = self.get_agent(agent_id)
        if agent is None:
            return False

        self._agents.remove(agent)
        logger.info(f"Removed agent {agent_id} from swarm {self.swarm_id}")
        return True
