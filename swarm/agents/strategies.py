#!/usr/bin/env python3
"""
Research Agent Strategies

Agents are specialised by composition rather than subclassing:

- PromptStrategy: how a research prompt and its context are built, and how
  a raw payload is shaped into a report
- FeedbackTuner: how external feedback adjusts an agent's configuration

Example:
    from swarm.agents import ResearchAgent, SpecializedPromptStrategy, FeedbackTuner

    agent = ResearchAgent(
        "agent_defi",
        client,
        config={"specializations": ["defi", "security"]},
        prompt_strategy=SpecializedPromptStrategy(),
        feedback_tuner=FeedbackTuner(),
    )
    await agent.process_feedback(Feedback(rating=0.5, suggested_focus=["governance"]))
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Dict, Any, Sequence, TYPE_CHECKING
import logging

from config import AgentConfig

if TYPE_CHECKING:
    from swarm.agents.research_agent import ResearchAgent

logger = logging.getLogger(__name__)


class PromptStrategy:
    """Default prompt construction for project research"""

    def build_prompt(self, project_name: str, criteria: Sequence[str], config: AgentConfig) -> str:
        return f'Research the Web3 project "{project_name}". Focus on: {", ".join(criteria)}'

    def extend_context(self, context: Dict[str, Any], config: AgentConfig) -> Dict[str, Any]:
        return context

    def format_report(self, data: Dict[str, Any], project_name: str, config: AgentConfig) -> Dict[str, Any]:
        return data


class SpecializedPromptStrategy(PromptStrategy):
    """Narrows prompts to the agent's configured focus areas"""

    def build_prompt(self, project_name: str, criteria: Sequence[str], config: AgentConfig) -> str:
        return (
            f"As a {', '.join(config.specializations)} specialist, "
            f"analyze {project_name} focusing on {', '.join(criteria)}"
        )

    def extend_context(self, context: Dict[str, Any], config: AgentConfig) -> Dict[str, Any]:
        return {
            **context,
            "research_type": "advanced",
            "specialization": list(config.specializations),
        }

    def format_report(self, data: Dict[str, Any], project_name: str, config: AgentConfig) -> Dict[str, Any]:
        return format_advanced_report(data, project_name, config.specializations)


def format_advanced_report(
    data: Dict[str, Any],
    project_name: str,
    specializations: Sequence[str],
) -> Dict[str, Any]:
    """Shape a raw research payload into a structured report"""
    return {
        "project": project_name,
        "analysis": data.get("analysis"),
        "confidence": data.get("confidence", data.get("confidence_score")),
        "specializations_used": list(specializations),
        "recommendations": data.get("recommendations", []),
        "risks": data.get("risks", data.get("risk_assessment", [])),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@dataclass
class Feedback:
    """External feedback on an agent's research quality"""
    rating: float
    suggested_focus: List[str] = field(default_factory=list)


class FeedbackTuner:
    """
    Adjusts an agent's creativity and focus areas from feedback.

    Temperature moves by ``rating * learning_rate`` and is clamped to
    [min_temperature, max_temperature]. Suggested focus areas are appended
    to the agent's specializations. The resulting configuration is reported
    to the remote system.
    """

    def __init__(self, min_temperature: float = 0.1, max_temperature: float = 0.9):
        if min_temperature > max_temperature:
            raise ValueError("min_temperature must not exceed max_temperature")
        self.min_temperature = min_temperature
        self.max_temperature = max_temperature

    def tuned_temperature(self, temperature: float, rating: float, learning_rate: float) -> float:
        return max(self.min_temperature, min(self.max_temperature, temperature + rating * learning_rate))

    async def apply(self, agent: "ResearchAgent", feedback: Feedback) -> Dict[str, Any]:
        """Tune ``agent`` from ``feedback`` and report the change remotely"""
        config = agent.config
        temperature = self.tuned_temperature(config.temperature, feedback.rating, config.learning_rate)
        specializations = list(dict.fromkeys([*config.specializations, *feedback.suggested_focus]))

        agent.update_config({
            "temperature": temperature,
            "specializations": specializations,
        })
        agent.metadata["last_learning"] = datetime.now(timezone.utc).isoformat()
        agent.metadata["learning_count"] = agent.metadata.get("learning_count", 0) + 1

        updates = {
            "config": agent.config.to_dict(),
            "metadata": {
                "last_learning": agent.metadata["last_learning"],
                "learning_count": agent.metadata["learning_count"],
            },
        }
        logger.info(
            f"Agent {agent.agent_id} tuned from feedback: "
            f"temperature={temperature:.2f}, specializations={specializations}"
        )

        await agent.client.update_agent(agent.agent_id, updates)
        return updates
