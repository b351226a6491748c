#!/usr/bin/env python3
"""
Tests for swarm/agents/strategies.py and the specialised agent factory
"""

import os
import sys
import pytest
from unittest.mock import AsyncMock

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import AgentConfig
from swarm.agents import (
    ResearchAgent,
    PromptStrategy,
    SpecializedPromptStrategy,
    FeedbackTuner,
    Feedback,
    create_specialized_agent,
    format_advanced_report,
)


class TestPromptStrategies:
    """Test prompt construction"""

    def test_default_prompt(self):
        prompt = PromptStrategy().build_prompt("Aave", ["security", "team"], AgentConfig())
        assert prompt == 'Research the Web3 project "Aave". Focus on: security, team'

    def test_default_context_unchanged(self):
        context = {"project_name": "Aave"}
        assert PromptStrategy().extend_context(context, AgentConfig()) == {"project_name": "Aave"}

    def test_specialized_prompt(self):
        config = AgentConfig(specializations=["defi", "security"])
        prompt = SpecializedPromptStrategy().build_prompt("Aave", ["audits", "tvl"], config)
        assert prompt == "As a defi, security specialist, analyze Aave focusing on audits, tvl"

    def test_specialized_context(self):
        config = AgentConfig(specializations=["defi"])
        context = SpecializedPromptStrategy().extend_context({"project_name": "Aave"}, config)
        assert context["research_type"] == "advanced"
        assert context["specialization"] == ["defi"]
        assert context["project_name"] == "Aave"


class TestAdvancedReport:
    """Test format_advanced_report"""

    def test_report_fields(self):
        data = {
            "analysis": "Strong lending market",
            "confidence": 0.8,
            "recommendations": ["Monitor utilization"],
            "risks": ["Oracle manipulation"],
        }
        report = format_advanced_report(data, "Aave", ["defi"])

        assert report["project"] == "Aave"
        assert report["analysis"] == "Strong lending market"
        assert report["confidence"] == 0.8
        assert report["specializations_used"] == ["defi"]
        assert report["risks"] == ["Oracle manipulation"]
        assert report["timestamp"]

    def test_report_accepts_alternate_keys(self):
        report = format_advanced_report(
            {"confidence_score": 0.6, "risk_assessment": ["Low liquidity"]}, "X", []
        )
        assert report["confidence"] == 0.6
        assert report["risks"] == ["Low liquidity"]
        assert report["recommendations"] == []


class TestFeedbackTuner:
    """Test feedback-driven tuning"""

    def test_temperature_is_clamped(self):
        tuner = FeedbackTuner()
        assert tuner.tuned_temperature(0.85, 1.0, 0.1) == 0.9
        assert tuner.tuned_temperature(0.15, -1.0, 0.1) == 0.1
        assert tuner.tuned_temperature(0.5, 1.0, 0.1) == pytest.approx(0.6)

    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            FeedbackTuner(min_temperature=0.9, max_temperature=0.1)

    async def test_apply_updates_config_and_reports(self, offline_client):
        offline_client.update_agent = AsyncMock(return_value={"status": "updated"})
        agent = create_specialized_agent(
            "agent_defi", offline_client, ["defi"], learning_rate=0.2, config={"temperature": 0.5}
        )

        updates = await agent.process_feedback(Feedback(rating=1.0, suggested_focus=["governance", "defi"]))

        assert agent.config.temperature == pytest.approx(0.7)
        assert agent.config.specializations == ["defi", "governance"]
        assert agent.metadata["learning_count"] == 1
        assert updates["config"]["temperature"] == pytest.approx(0.7)
        assert updates["metadata"]["learning_count"] == 1
        offline_client.update_agent.assert_awaited_once_with("agent_defi", updates)

    async def test_learning_count_accumulates(self, offline_client):
        agent = create_specialized_agent("agent_defi", offline_client, ["defi"])

        await agent.process_feedback({"rating": 0.5})
        await agent.process_feedback({"rating": -0.5})

        assert agent.metadata["learning_count"] == 2
        assert agent.metadata["last_learning"]

    async def test_agent_without_tuner_rejects_feedback(self, offline_client):
        agent = ResearchAgent("plain", offline_client)
        with pytest.raises(ValueError):
            await agent.process_feedback(Feedback(rating=1.0))


class TestSpecializedAgent:
    """Test the composed specialised agent"""

    async def test_uses_specialized_prompt(self, offline_client):
        offline_client.submit_prompt = AsyncMock(return_value={"analysis": "ok"})
        agent = create_specialized_agent("agent_nft", offline_client, ["nft"])

        result = await agent.research_project("Tensor", ["volume"])

        assert result.success is True
        prompt, context = offline_client.submit_prompt.call_args[0]
        assert prompt == "As a nft specialist, analyze Tensor focusing on volume"
        assert context["research_type"] == "advanced"

    async def test_failure_semantics_unchanged(self, failing_client):
        agent = create_specialized_agent("agent_nft", failing_client, ["nft"])

        result = await agent.research_project("Tensor", ["volume"])

        assert result.success is False
        assert "Network error" in result.error
        assert agent.current_task is None

    async def test_conduct_research_formats_report(self, offline_client):
        agent = create_specialized_agent("agent_nft", offline_client, ["nft"])

        result = await agent.conduct_research("Tensor", ["volume"])

        assert result.success is True
        assert result.data["project"] == "Tensor"
        assert result.data["specializations_used"] == ["nft"]
        assert result.data["confidence"] == 0.85
        # History keeps the raw payload
        assert "summary" in agent.get_history()[0].result

    async def test_feedback_changes_next_prompt(self, offline_client):
        offline_client.submit_prompt = AsyncMock(return_value={"analysis": "ok"})
        agent = create_specialized_agent("agent_nft", offline_client, ["nft"])

        await agent.process_feedback(Feedback(rating=0.0, suggested_focus=["gaming"]))
        await agent.research_project("Tensor", ["volume"])

        prompt, _ = offline_client.submit_prompt.call_args[0]
        assert prompt.startswith("As a nft, gaming specialist")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
