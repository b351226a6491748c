#!/usr/bin/env python3
"""
Web3 Research Agent

A research agent turns a project name plus research criteria into a
structured report by calling the remote research API. Each agent:
- Performs one research operation at a time
- Tracks its current task while a call is in flight
- Keeps a history of successful research
- Never raises out of a research call: failures come back as results

On-chain data is fetched before each prompt on a best-effort basis. If the
lookup fails the prompt is sent without on-chain context.

Example:
    from offline_client import OfflineResearchClient
    from swarm.agents import ResearchAgent

    agent = ResearchAgent("agent_0", OfflineResearchClient())
    await agent.initialize()

    result = await agent.research_project("Solana", ["tokenomics", "team"])
    if result.success:
        print(result.data["analysis"])
"""

import asyncio
import copy
from contextlib import contextmanager
from dataclasses import dataclass, asdict, replace
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional, Sequence, Union
import logging

from config import AgentConfig
from research_client import ResearchAPI
from swarm.agents.strategies import PromptStrategy, SpecializedPromptStrategy, FeedbackTuner, Feedback

logger = logging.getLogger(__name__)

PROJECT_RESEARCH = "project_research"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class AgentTask:
    """The task an agent is currently working on"""
    kind: str
    target: str
    started_at: str


@dataclass
class ResearchResult:
    """Outcome of a single research call"""
    success: bool
    timestamp: str
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {"success": self.success}
        if self.success:
            result["data"] = self.data
        else:
            result["error"] = self.error
        result["timestamp"] = self.timestamp
        return result


@dataclass(frozen=True)
class ResearchRecord:
    """An entry in an agent's research history"""
    project: str
    criteria: List[str]
    result: Dict[str, Any]
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ResearchAgent:
    """
    Research agent wrapping a remote research API.

    Prompt construction and feedback handling are delegated to the injected
    strategies, so specialised agents are configured rather than subclassed.
    """

    def __init__(
        self,
        agent_id: str,
        client: ResearchAPI,
        config: Optional[Union[AgentConfig, Dict[str, Any]]] = None,
        prompt_strategy: Optional[PromptStrategy] = None,
        feedback_tuner: Optional[FeedbackTuner] = None,
    ):
        """
        Initialize an agent.

        Args:
            agent_id: Unique identifier
            client: Remote research API
            config: AgentConfig, or a partial dict merged over the defaults
            prompt_strategy: Prompt builder (default: plain project research)
            feedback_tuner: Feedback handler (default: none, feedback rejected)
        """
        self._agent_id = agent_id
        self.client = client
        if isinstance(config, AgentConfig):
            self.config = config
        else:
            self.config = AgentConfig().merged(config)
        self.prompt_strategy = prompt_strategy or PromptStrategy()
        self.feedback_tuner = feedback_tuner

        # Execution state
        self.is_active = False
        self.current_task: Optional[AgentTask] = None
        self.metadata: Dict[str, Any] = {}
        self._history: List[ResearchRecord] = []
        self._lock = asyncio.Lock()

    @property
    def agent_id(self) -> str:
        return self._agent_id

    @property
    def is_busy(self) -> bool:
        return self.current_task is not None

    async def initialize(self) -> bool:
        logger.info(f"Research Agent {self.agent_id} initializing...")
        self.is_active = True
        return True

    @contextmanager
    def _task(self, kind: str, target: str):
        """Hold the busy state for the duration of a task"""
        self.current_task = AgentTask(kind=kind, target=target, started_at=_now())
        try:
            yield self.current_task
        finally:
            self.current_task = None

    async def _with_timeout(self, coro):
        try:
            return await asyncio.wait_for(coro, timeout=self.config.timeout)
        except asyncio.TimeoutError:
            raise TimeoutError(f"Request timed out after {self.config.timeout}s") from None

    async def use_llm(self, prompt: str, context: Optional[Dict[str, Any]] = None) -> ResearchResult:
        """
        Send a prompt to the remote research API.

        Args:
            prompt: Research prompt
            context: Request context; ``project_name`` triggers an on-chain
                lookup unless ``skip_onchain`` is set

        Returns:
            ResearchResult, successful or not
        """
        context = dict(context or {})
        logger.info(f"Agent {self.agent_id} processing: {prompt[:100]}...")

        try:
            onchain_data = None
            project_name = context.get("project_name")
            if project_name and not context.get("skip_onchain"):
                try:
                    onchain_data = await self._with_timeout(self.client.query_onchain(project_name))
                except Exception as e:
                    logger.warning(f"Onchain research failed for {project_name}: {e}")

            data = await self._with_timeout(self.client.submit_prompt(prompt, {
                **context,
                "onchain_data": onchain_data,
                "config": self.config.to_dict(),
            }))

            return ResearchResult(success=True, data=data, timestamp=_now())

        except Exception as e:
            logger.error(f"LLM call failed for agent {self.agent_id}: {e}")
            return ResearchResult(success=False, error=str(e) or type(e).__name__, timestamp=_now())

    async def research_project(
        self,
        project_name: str,
        criteria: Optional[Sequence[str]] = None,
    ) -> ResearchResult:
        """
        Research a single project.

        Calls on the same agent are serialized. The current task is set for
        the duration of the call and cleared on every exit path.
        """
        criteria = list(criteria or [])

        async with self._lock:
            with self._task(PROJECT_RESEARCH, project_name):
                try:
                    prompt = self.prompt_strategy.build_prompt(project_name, criteria, self.config)
                    context = self.prompt_strategy.extend_context({
                        "project_name": project_name,
                        "criteria": criteria,
                        "agent_id": self.agent_id,
                    }, self.config)
                except Exception as e:
                    logger.error(f"Agent {self.agent_id} could not build prompt for {project_name}: {e}")
                    return ResearchResult(success=False, error=str(e) or type(e).__name__, timestamp=_now())

                result = await self.use_llm(prompt, context)

                if result.success:
                    # The caller owns result.data; history keeps its own copy
                    self._history.append(ResearchRecord(
                        project=project_name,
                        criteria=list(criteria),
                        result=copy.deepcopy(result.data),
                        timestamp=result.timestamp,
                    ))

                return result

    async def conduct_research(
        self,
        project_name: str,
        criteria: Optional[Sequence[str]] = None,
    ) -> ResearchResult:
        """Research a project and shape the payload with the prompt strategy's report format"""
        result = await self.research_project(project_name, criteria)
        if not result.success:
            return result
        report = self.prompt_strategy.format_report(result.data or {}, project_name, self.config)
        return ResearchResult(success=True, data=report, timestamp=result.timestamp)

    async def process_feedback(self, feedback: Union[Feedback, Dict[str, Any]]) -> Dict[str, Any]:
        """Tune this agent from feedback; returns the update reported remotely"""
        if self.feedback_tuner is None:
            raise ValueError(f"Agent {self.agent_id} does not accept feedback")
        if isinstance(feedback, dict):
            feedback = Feedback(**feedback)
        return await self.feedback_tuner.apply(self, feedback)

    def get_state(self) -> Dict[str, Any]:
        """Snapshot of the agent's state; mutating it does not affect the agent"""
        return {
            "is_active": self.is_active,
            "current_task": asdict(self.current_task) if self.current_task else None,
            "research_history": [record.to_dict() for record in self._history],
        }

    def get_history(self) -> List[ResearchRecord]:
        """Copies of the history records, payloads included"""
        return [
            replace(record, criteria=list(record.criteria), result=copy.deepcopy(record.result))
            for record in self._history
        ]

    def clear_history(self):
        self._history = []

    def update_config(self, partial: Dict[str, Any]):
        self.config = self.config.merged(partial)


def create_specialized_agent(
    agent_id: str,
    client: ResearchAPI,
    specializations: Sequence[str],
    learning_rate: float = 0.1,
    config: Optional[Dict[str, Any]] = None,
    **tuner_kwargs,
) -> ResearchAgent:
    """
    Factory function for a specialization-aware agent.

    Args:
        agent_id: Unique identifier
        client: Remote research API
        specializations: Focus areas for prompts
        learning_rate: How strongly feedback moves the temperature
        config: Additional partial configuration
        **tuner_kwargs: FeedbackTuner options (min_temperature, max_temperature)

    Returns:
        ResearchAgent with specialised prompts and feedback tuning
    """
    agent_config = AgentConfig().merged({
        **(config or {}),
        "specializations": list(specializations),
        "learning_rate": learning_rate,
    })
    return ResearchAgent(
        agent_id,
        client,
        config=agent_config,
        prompt_strategy=SpecializedPromptStrategy(),
        feedback_tuner=FeedbackTuner(**tuner_kwargs),
    )
