#!/usr/bin/env python3
"""
Web3 Research Swarm HTTP API

FastAPI application exposing the research swarm:

    GET    /                          Service info
    POST   /api/research              Research a batch of projects
    GET    /api/status                Swarm status snapshot
    GET    /api/agents                Agent states
    POST   /api/agents                Add an agent
    DELETE /api/agents/{agent_id}     Remove an agent
    GET    /api/history               Per-agent research history
    GET    /api/health                Remote API health
    GET    /api/onchain/{project}     Multi-chain project lookup

Every endpoint answers ``{"success": bool, "data": ...}`` or
``{"success": false, "error": message}``.
"""

from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import APIConfig, SwarmConfig
from models import AgentConfigUpdate, ResearchRequest
from onchain import MultiChainAnalyzer
from research_client import RemoteCallError, create_client
from swarm import ResearchSwarm

logger = logging.getLogger(__name__)

VERSION = "1.0.0"
PROJECTS_REQUIRED = "Please provide an array of project names to research"
CRITERIA_INVALID = "criteria must be an array of strings"
AGENT_CONFIG_INVALID = "Invalid agent configuration"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def _validation_message(path: str, errors) -> str:
    """Map body validation errors onto the API's error messages"""
    # loc is ("body",) for a bad body, ("body", field, ...) for a bad field
    bad_fields = {err["loc"][1] if len(err.get("loc", ())) > 1 else None for err in errors}
    if path.endswith("/research"):
        return CRITERIA_INVALID if bad_fields == {"criteria"} else PROJECTS_REQUIRED

    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ())[1:]) or 'body'}: {err.get('msg', '')}"
        for err in errors
    )
    return f"{AGENT_CONFIG_INVALID}: {details}"


def get_swarm(request: Request) -> ResearchSwarm:
    return request.app.state.swarm


def get_analyzer(request: Request) -> MultiChainAnalyzer:
    return request.app.state.analyzer


router = APIRouter(prefix="/api", tags=["research"])


@router.post("/research")
async def research(body: ResearchRequest, swarm: ResearchSwarm = Depends(get_swarm)):
    logger.info(f"Research request for: {', '.join(body.projects)}")

    try:
        report = await swarm.coordinate_research(body.projects, body.criteria or [])
    except Exception as e:
        logger.error(f"Research request failed: {e}")
        return _error(500, str(e))

    return {"success": True, "data": report.to_dict()}


@router.get("/status")
async def status(swarm: ResearchSwarm = Depends(get_swarm)):
    return {"success": True, "data": swarm.get_swarm_status()}


@router.get("/agents")
async def list_agents(swarm: ResearchSwarm = Depends(get_swarm)):
    snapshot = swarm.get_swarm_status()
    return {
        "success": True,
        "data": {
            "swarm_id": snapshot["swarm_id"],
            "agent_count": snapshot["agent_count"],
            "agents": snapshot["agents"],
        },
    }


@router.post("/agents", status_code=201)
async def add_agent(
    body: Optional[AgentConfigUpdate] = None,
    swarm: ResearchSwarm = Depends(get_swarm),
):
    agent_id = await swarm.add_agent(body.to_partial() if body else None)
    return {"success": True, "data": {"agent_id": agent_id, "agent_count": swarm.agent_count}}


@router.delete("/agents/{agent_id}")
async def remove_agent(agent_id: str, swarm: ResearchSwarm = Depends(get_swarm)):
    removed = await swarm.remove_agent(agent_id)
    if not removed:
        return _error(404, f"Agent {agent_id} not found")
    return {"success": True, "data": {"agent_id": agent_id, "agent_count": swarm.agent_count}}


@router.get("/history")
async def history(swarm: ResearchSwarm = Depends(get_swarm)):
    return {
        "success": True,
        "data": {
            "swarm_id": swarm.swarm_id,
            "total_agents": swarm.agent_count,
            "agent_histories": swarm.get_research_history(),
        },
    }


@router.get("/health")
async def health(swarm: ResearchSwarm = Depends(get_swarm)):
    try:
        remote = await swarm.client.health_check()
    except RemoteCallError as e:
        logger.warning(f"Remote health check failed: {e}")
        return _error(502, str(e))
    return {"success": True, "data": {"swarm_active": swarm.is_active, "remote": remote}}


@router.get("/onchain/{project_name}")
async def onchain(project_name: str, analyzer: MultiChainAnalyzer = Depends(get_analyzer)):
    return {"success": True, "data": await analyzer.get_project_data(project_name)}


def build_swarm(
    api_config: Optional[APIConfig] = None,
    swarm_config: Optional[SwarmConfig] = None,
) -> ResearchSwarm:
    """Build a (not yet initialized) swarm from explicit or environment config"""
    api_config = api_config or APIConfig.from_env()
    client = create_client(api_config)
    return ResearchSwarm(client, swarm_config or SwarmConfig.from_env(api_config))


def create_app(
    swarm: Optional[ResearchSwarm] = None,
    analyzer: Optional[MultiChainAnalyzer] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        swarm: Swarm to serve (default: built from environment config).
            An inactive swarm is initialized on startup.
        analyzer: Multi-chain analyzer (default: shares the swarm's client)
    """
    swarm = swarm or build_swarm()
    analyzer = analyzer or MultiChainAnalyzer(swarm.client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Initializing Web3 Research Swarm...")
        if not swarm.is_active:
            await swarm.initialize()
        logger.info("Research swarm initialized successfully")
        yield
        logger.info("Shutting down gracefully...")
        await swarm.client.close()

    app = FastAPI(
        title="Web3 Research Assistant API",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.swarm = swarm
    app.state.analyzer = analyzer

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
        return _error(400, _validation_message(request.url.path, exc.errors()))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return _error(500, str(exc) or type(exc).__name__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        return {
            "message": "Web3 Research Assistant API",
            "version": VERSION,
            "swarm_id": swarm.swarm_id,
            "endpoints": {
                "/api/research": "POST - Research projects",
                "/api/status": "GET - Get swarm status",
                "/api/agents": "GET - List agents, POST - Add agent",
                "/api/agents/{agent_id}": "DELETE - Remove agent",
                "/api/history": "GET - Get research history",
                "/api/health": "GET - Remote API health",
                "/api/onchain/{project}": "GET - Multi-chain project data",
            },
        }

    app.include_router(router)
    return app
