#!/usr/bin/env python3
"""
Web3 Research API Clients

The research swarm treats its AI/blockchain backend as an opaque remote
capability. ``ResearchAPI`` describes that capability; implementations:

- JuliaOSClient: the JuliaOS HTTP API (LLM + blockchain queries + agent registry)
- OpenAIResearchClient: prompts go to an OpenAI-compatible chat completion
  endpoint, on-chain lookups and agent registry calls go to JuliaOS
- OfflineResearchClient (offline_client.py): deterministic canned responses

Example Usage:
    from config import APIConfig
    from research_client import create_client

    client = create_client(APIConfig.from_env())
    data = await client.submit_prompt("Research Solana", {"project_name": "Solana"})
    await client.close()
"""

import json
import asyncio
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Any
import logging

import aiohttp
from openai import AsyncOpenAI, OpenAIError
from tenacity import (
    AsyncRetrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from config import APIConfig, RETRY_WAIT_MIN, RETRY_WAIT_MAX

logger = logging.getLogger(__name__)

USER_AGENT = "Web3-Research-Swarm/1.0.0"

RESEARCH_SYSTEM_PROMPT = (
    "You are a Web3 research analyst in a multi-agent swarm. "
    "Evaluate blockchain projects objectively using the on-chain data provided. "
    "Respond with JSON containing the keys: analysis, summary, confidence (0-1), "
    "recommendations (list), risks (list), sources (list)."
)


class RemoteCallError(Exception):
    """A remote API call failed (network error, timeout or non-2xx status)"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ResearchAPI(ABC):
    """
    Remote research capability consumed by agents.

    Every operation may raise RemoteCallError. Payloads are plain
    JSON-compatible dicts.
    """

    @abstractmethod
    async def submit_prompt(self, prompt: str, context: Dict[str, Any]) -> Dict[str, Any]:
        """Submit a research prompt with its context and return the model payload"""

    @abstractmethod
    async def query_onchain(self, project_name: str) -> Dict[str, Any]:
        """Look up on-chain data for a project"""

    @abstractmethod
    async def query_blockchain_data(self, chain: str, query: str) -> Dict[str, Any]:
        """Query raw chain data (e.g. chain='ethereum', query='latest')"""

    @abstractmethod
    async def create_agent(self, agent_config: Dict[str, Any]) -> Dict[str, Any]:
        """Register an agent with the remote system"""

    @abstractmethod
    async def get_agent_status(self, agent_id: str) -> Dict[str, Any]:
        """Get the remote view of an agent"""

    @abstractmethod
    async def update_agent(self, agent_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """Report configuration changes for an agent"""

    @abstractmethod
    async def delete_agent(self, agent_id: str) -> Dict[str, Any]:
        """Remove an agent from the remote system"""

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """Check remote API health"""

    async def close(self):
        """Release network resources"""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()


class JuliaOSClient(ResearchAPI):
    """
    Client for the JuliaOS research API.

    Transport errors and timeouts are retried with exponential backoff;
    after the last attempt, or on a non-2xx response, RemoteCallError is
    raised.
    """

    def __init__(self, config: Optional[APIConfig] = None):
        self.config = config or APIConfig()
        self._session: Optional[aiohttp.ClientSession] = None
        logger.info(f"Initialized JuliaOSClient for {self.config.base_url}")

    @property
    def headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def _url(self, path: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers=self.headers,
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
            )
        return self._session

    async def _request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Send a request and return the decoded JSON body"""
        logger.debug(f"JuliaOS API Request: {method} {path}")

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(max(1, self.config.max_retries)),
                wait=wait_exponential(multiplier=1, min=RETRY_WAIT_MIN, max=RETRY_WAIT_MAX),
                retry=retry_if_exception_type((aiohttp.ClientError, asyncio.TimeoutError)),
                reraise=True,
            ):
                with attempt:
                    session = await self._get_session()
                    async with session.request(method, self._url(path), json=payload) as resp:
                        logger.debug(f"JuliaOS API Response: {resp.status} {resp.reason}")
                        if resp.status >= 400:
                            body = await resp.text()
                            raise RemoteCallError(
                                f"JuliaOS API {method} {path} returned {resp.status}: {body[:200]}",
                                status=resp.status,
                            )
                        try:
                            data = await resp.json(content_type=None)
                        except ValueError as e:
                            raise RemoteCallError(
                                f"JuliaOS API {method} {path} returned invalid JSON: {e}",
                                status=resp.status,
                            ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            message = str(e) or type(e).__name__
            logger.error(f"JuliaOS API Error: {method} {path}: {message}")
            raise RemoteCallError(f"JuliaOS API {method} {path} failed: {message}") from e

        return data if data is not None else {}

    async def submit_prompt(self, prompt: str, context: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/v1/llm", {"prompt": prompt, "context": context})

    async def query_onchain(self, project_name: str) -> Dict[str, Any]:
        return await self._request("POST", "/v1/blockchain/query", {
            "chain": "solana",
            "method": "searchProject",
            "params": {"name": project_name},
        })

    async def query_blockchain_data(self, chain: str, query: str) -> Dict[str, Any]:
        return await self._request("GET", f"/blockchain/{chain}/{query}")

    async def create_agent(self, agent_config: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/agents", agent_config)

    async def get_agent_status(self, agent_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/agents/{agent_id}")

    async def update_agent(self, agent_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/agents/{agent_id}", updates)

    async def delete_agent(self, agent_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/agents/{agent_id}")

    async def health_check(self) -> Dict[str, Any]:
        return await self._request("GET", "/health")

    async def close(self):
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None


class OpenAIResearchClient(ResearchAPI):
    """
    Research client backed by an OpenAI-compatible chat completion API.

    Only prompt submission goes to the LLM endpoint; on-chain lookups and
    agent registry calls are delegated to a JuliaOS client.
    """

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        onchain_client: Optional[ResearchAPI] = None,
    ):
        """
        Initialize the client.

        Args:
            config: API configuration (llm_* fields select the LLM endpoint)
            onchain_client: Client used for everything except prompts
                (defaults to a JuliaOSClient built from the same config)
        """
        self.config = config or APIConfig(provider="openai")
        if not self.config.llm_api_key:
            raise ValueError(
                "OPENAI_API_KEY environment variable not set. "
                "It is required for the 'openai' research provider."
            )

        self.async_client = AsyncOpenAI(
            api_key=self.config.llm_api_key,
            base_url=self.config.llm_base_url,
            timeout=self.config.timeout,
            max_retries=self.config.max_retries,
        )
        self.onchain_client = onchain_client or JuliaOSClient(self.config)
        self.model = self.config.llm_model

        logger.info(f"Initialized OpenAIResearchClient with model: {self.model}")

    def _build_messages(self, prompt: str, context: Dict[str, Any]) -> List[Dict[str, Any]]:
        user_content = prompt
        onchain_data = context.get("onchain_data")
        if onchain_data:
            user_content += f"\n\nON-CHAIN DATA:\n{json.dumps(onchain_data, default=str)}"
        return [
            {"role": "system", "content": RESEARCH_SYSTEM_PROMPT},
            {"role": "user", "content": user_content},
        ]

    @staticmethod
    def _parse_content(content: str) -> Dict[str, Any]:
        """Extract the JSON report from a completion, falling back to raw text"""
        text = content
        if "```json" in text:
            text = text.split("```json")[1].split("```")[0]
        elif "```" in text:
            text = text.split("```")[1].split("```")[0]

        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            return {"analysis": content}
        if not isinstance(data, dict):
            return {"analysis": content}
        return data

    async def submit_prompt(self, prompt: str, context: Dict[str, Any]) -> Dict[str, Any]:
        agent_config = context.get("config") or {}
        params = {
            "model": self.model,
            "messages": self._build_messages(prompt, context),
            "temperature": agent_config.get("temperature", 0.7),
            "max_tokens": agent_config.get("max_tokens", 1000),
        }

        try:
            response = await self.async_client.chat.completions.create(**params)
        except OpenAIError as e:
            raise RemoteCallError(f"LLM request failed: {e}") from e

        choice = response.choices[0]
        data = self._parse_content(choice.message.content or "")
        data.setdefault("metadata", {})
        data["metadata"]["model"] = response.model
        if response.usage:
            data["metadata"]["tokens_used"] = response.usage.total_tokens
        return data

    async def query_onchain(self, project_name: str) -> Dict[str, Any]:
        return await self.onchain_client.query_onchain(project_name)

    async def query_blockchain_data(self, chain: str, query: str) -> Dict[str, Any]:
        return await self.onchain_client.query_blockchain_data(chain, query)

    async def create_agent(self, agent_config: Dict[str, Any]) -> Dict[str, Any]:
        return await self.onchain_client.create_agent(agent_config)

    async def get_agent_status(self, agent_id: str) -> Dict[str, Any]:
        return await self.onchain_client.get_agent_status(agent_id)

    async def update_agent(self, agent_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return await self.onchain_client.update_agent(agent_id, updates)

    async def delete_agent(self, agent_id: str) -> Dict[str, Any]:
        return await self.onchain_client.delete_agent(agent_id)

    async def health_check(self) -> Dict[str, Any]:
        return await self.onchain_client.health_check()

    async def close(self):
        await self.async_client.close()
        await self.onchain_client.close()


def create_client(config: Optional[APIConfig] = None) -> ResearchAPI:
    """Create the research client selected by ``config.provider``"""
    config = config or APIConfig()

    if config.provider == "offline":
        from offline_client import OfflineResearchClient
        return OfflineResearchClient()
    if config.provider == "openai":
        return OpenAIResearchClient(config)
    return JuliaOSClient(config)
