"""Request bodies accepted by the HTTP API"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ResearchRequest(BaseModel):
    """Research a batch of projects."""
    projects: List[str] = Field(min_length=1, examples=[["Solana", "Uniswap"]])
    criteria: Optional[List[str]] = Field(None, examples=[["tokenomics", "team"]])


class AgentConfigUpdate(BaseModel):
    """Partial agent configuration for a new agent. Unknown keys are kept."""
    model_config = ConfigDict(extra="allow")

    max_tokens: Optional[int] = Field(None, gt=0)
    temperature: Optional[float] = Field(None, ge=0, le=2)
    timeout: Optional[float] = Field(None, gt=0)
    specializations: Optional[List[str]] = None
    learning_rate: Optional[float] = Field(None, ge=0, le=1)

    def to_partial(self) -> dict:
        return self.model_dump(exclude_none=True)
