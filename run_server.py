#!/usr/bin/env python3
"""
Start the Web3 Research Swarm API server.

Usage:
    python run_server.py                 # provider from RESEARCH_API_PROVIDER
    python run_server.py --offline       # canned responses, no API key needed
"""

import argparse
import logging

import uvicorn

from config import APIConfig, SwarmConfig, ServerConfig
from server import build_swarm, create_app


def main():
    parser = argparse.ArgumentParser(description="Web3 Research Swarm API server")
    parser.add_argument("--offline", action="store_true", help="Use the offline research client")
    parser.add_argument("--agents", type=int, help="Number of research agents")
    args = parser.parse_args()

    server_config = ServerConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, server_config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    api_config = APIConfig.from_env(provider="offline" if args.offline else None)
    swarm_config = SwarmConfig.from_env(api_config)
    if args.agents:
        swarm_config.max_agents = args.agents

    app = create_app(build_swarm(api_config, swarm_config))

    print(f"Web3 Research Assistant running on port {server_config.port}")
    print(f"API documentation available at http://localhost:{server_config.port}/docs")
    print(f"Swarm status: http://localhost:{server_config.port}/api/status")

    uvicorn.run(
        app,
        host=server_config.host,
        port=server_config.port,
        log_level=server_config.log_level,
    )


if __name__ == "__main__":
    main()
