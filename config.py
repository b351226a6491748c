#!/usr/bin/env python3
"""
Web3 Research Swarm Configuration Module

This module provides centralized configuration for the research swarm:
- Remote API endpoints and authentication (JuliaOS, OpenAI-compatible, offline)
- Default agent parameters (token budget, temperature, timeout)
- Swarm sizing and coordination settings
- HTTP server settings

Configuration is explicit: every component receives a config object at
construction. Environment variables are only read by the ``from_env``
constructors, which entry points call once.
"""

import os
from dataclasses import dataclass, field, fields, replace
from typing import Dict, List, Optional, Any
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


DEFAULT_API_URL = "https://api.juliaos.com"
DEFAULT_LLM_MODEL = "gpt-4o-mini"

# Exponential backoff bounds (seconds) between retried API calls
RETRY_WAIT_MIN = 1
RETRY_WAIT_MAX = 10

# Known remote API backends
API_PROVIDERS = {
    "juliaos": {
        "env_key": "JULIAOS_API_KEY",
        "description": "JuliaOS LLM + blockchain API (default)",
    },
    "openai": {
        "env_key": "OPENAI_API_KEY",
        "description": "OpenAI-compatible chat completions, JuliaOS for on-chain data",
    },
    "offline": {
        "env_key": None,
        "description": "Deterministic canned responses, no network access",
    },
}


@dataclass
class APIConfig:
    """Remote research API settings"""
    base_url: str = DEFAULT_API_URL
    api_key: Optional[str] = None
    timeout: float = 30.0
    max_retries: int = 3
    provider: str = "juliaos"

    # OpenAI-compatible provider
    llm_api_key: Optional[str] = None
    llm_base_url: Optional[str] = None
    llm_model: str = DEFAULT_LLM_MODEL

    def __post_init__(self):
        if self.provider not in API_PROVIDERS:
            raise ValueError(
                f"Unknown API provider: {self.provider}. "
                f"Available: {list(API_PROVIDERS.keys())}"
            )

    @property
    def is_offline(self) -> bool:
        return self.provider == "offline"

    @property
    def request_budget(self) -> float:
        """Worst-case seconds for one call: every attempt times out, plus backoff"""
        attempts = max(1, self.max_retries)
        backoff = sum(
            min(RETRY_WAIT_MAX, max(RETRY_WAIT_MIN, 2 ** n))
            for n in range(attempts - 1)
        )
        return self.timeout * attempts + backoff

    @classmethod
    def from_env(cls, provider: Optional[str] = None) -> "APIConfig":
        """Create APIConfig from environment variables.

        A missing API key is allowed: the offline provider needs none, and
        the JuliaOS client simply sends no Authorization header.
        """
        return cls(
            base_url=os.getenv("JULIAOS_API_URL", DEFAULT_API_URL),
            api_key=os.getenv("JULIAOS_API_KEY") or None,
            timeout=float(os.getenv("JULIAOS_API_TIMEOUT", "30")),
            max_retries=int(os.getenv("JULIAOS_API_MAX_RETRIES", "3")),
            provider=provider or os.getenv("RESEARCH_API_PROVIDER", "juliaos"),
            llm_api_key=os.getenv("OPENAI_API_KEY") or None,
            llm_base_url=os.getenv("OPENAI_BASE_URL") or None,
            llm_model=os.getenv("RESEARCH_LLM_MODEL", DEFAULT_LLM_MODEL),
        )


@dataclass
class AgentConfig:
    """Tunable parameters for a research agent"""
    max_tokens: int = 1000
    temperature: float = 0.7
    timeout: float = 30.0
    specializations: List[str] = field(default_factory=list)
    learning_rate: float = 0.1
    swarm_id: Optional[str] = None
    # Keys with no dedicated field (e.g. {"specialization": "defi"})
    extra: Dict[str, Any] = field(default_factory=dict)

    def merged(self, partial: Optional[Dict[str, Any]] = None) -> "AgentConfig":
        """Return a copy with ``partial`` merged in; later keys override."""
        if not partial:
            return replace(self, specializations=list(self.specializations), extra=dict(self.extra))

        known = {f.name for f in fields(self)} - {"extra"}
        updates = {k: v for k, v in partial.items() if k in known}
        extra = dict(self.extra)
        extra.update({k: v for k, v in partial.items() if k not in known})
        if "specializations" in updates:
            updates["specializations"] = list(updates["specializations"])
        else:
            updates["specializations"] = list(self.specializations)
        return replace(self, extra=extra, **updates)

    def to_dict(self) -> Dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "extra"}
        data["specializations"] = list(self.specializations)
        data.update(self.extra)
        return data


@dataclass
class SwarmConfig:
    """Configuration for a research swarm"""
    swarm_id: str = "main_research_swarm"
    max_agents: int = 5
    # Sequential by default; per-agent locks keep parallel mode safe
    parallel: bool = False
    agent_defaults: AgentConfig = field(default_factory=AgentConfig)

    @classmethod
    def from_env(cls, api_config: Optional[APIConfig] = None) -> "SwarmConfig":
        """Create SwarmConfig from environment variables.

        The agent timeout covers the client's whole retry schedule so that
        retries of a timed-out request are not cut short.
        """
        api_config = api_config or APIConfig.from_env()
        return cls(
            swarm_id=os.getenv("RESEARCH_SWARM_ID", "main_research_swarm"),
            max_agents=int(os.getenv("RESEARCH_MAX_AGENTS", "3")),
            parallel=os.getenv("RESEARCH_PARALLEL", "").lower() in ("1", "true", "yes"),
            agent_defaults=AgentConfig(timeout=api_config.request_budget),
        )


@dataclass
class ServerConfig:
    """HTTP gateway settings"""
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "info"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "info"),
        )


def validate_api_key(provider: str = "juliaos") -> bool:
    """Check if an API key is configured for a provider"""
    env_key = API_PROVIDERS[provider]["env_key"]
    if env_key is None:
        return True
    return bool(os.getenv(env_key))


def print_config_summary():
    """Print a summary of current configuration"""
    api_config = APIConfig.from_env()
    swarm_config = SwarmConfig.from_env(api_config)
    server_config = ServerConfig.from_env()

    print("=" * 60)
    print("WEB3 RESEARCH SWARM CONFIGURATION SUMMARY")
    print("=" * 60)

    print(f"\nProvider: {api_config.provider}")
    print(f"  {API_PROVIDERS[api_config.provider]['description']}")
    print(f"  Base URL: {api_config.base_url}")
    print(f"  Timeout: {api_config.timeout}s, retries: {api_config.max_retries}")
    print(f"  API Key: {'Configured' if validate_api_key(api_config.provider) else 'NOT SET'}")

    print(f"\nSwarm: {swarm_config.swarm_id}")
    print(f"  Agents: {swarm_config.max_agents}")
    print(f"  Parallel: {'Yes' if swarm_config.parallel else 'No'}")

    print(f"\nServer: {server_config.host}:{server_config.port}")

    print("\n" + "=" * 60)


if __name__ == "__main__":
    print_config_summary()
