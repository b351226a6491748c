"""
Web3 Research Swarm Agents

- ResearchAgent: researches one project at a time through the remote API
- PromptStrategy / SpecializedPromptStrategy: prompt construction
- FeedbackTuner: feedback-driven temperature and focus tuning
"""

from .strategies import (
    PromptStrategy,
    SpecializedPromptStrategy,
    FeedbackTuner,
    Feedback,
    format_advanced_report,
)
from .research_agent import (
    ResearchAgent,
    ResearchResult,
    ResearchRecord,
    AgentTask,
    create_specialized_agent,
)

__all__ = [
    "ResearchAgent",
    "ResearchResult",
    "ResearchRecord",
    "AgentTask",
    "create_specialized_agent",
    "PromptStrategy",
    "SpecializedPromptStrategy",
    "FeedbackTuner",
    "Feedback",
    "format_advanced_report",
]
