"""
Centralized application initializer.

This component is responsible for parsing command-line arguments, loading
configurations, and initializing all the core backend services (vector store,
embedding generator, search tool, tool bridge, assistant and ParkService).
It provides a single, reliable entry point for building the application's core,
which the HTTP server then wraps.
"""

import argparse
import logging
import os
from dataclasses import dataclass

from components.assistant import DEFAULT_INSTRUCTIONS, ParkAssistantAgent
from components.embedding_system import EmbeddingGenerator, create_embedding_model
from components.park_service import ParkService
from components.park_tools import SearchTool
from components.tool_bridge import ToolBridge, create_park_tool_bridge
from components.vector_store import ParkVectorStore, create_chroma_client
from park_knowledge.config import Config, load_config

logger = logging.getLogger(__name__)

API_KEY_ENV_VAR = "GENERATION_API_KEY"


@dataclass
class ServiceBundle:
    """The initialized core, ready to be served."""

    config: Config
    service: ParkService
    bridge: ToolBridge
    agent: ParkAssistantAgent


def create_arg_parser() -> argparse.ArgumentParser:
    """
    Creates and returns the command-line argument parser.

    Returns:
        An ArgumentParser instance with all common arguments defined.
    """
    parser = argparse.ArgumentParser(description="Park Knowledge Server.")
    parser.add_argument(
        "--database-dir",
        help="Override the storage directory for the vector database.",
    )
    parser.add_argument(
        "--data-dir",
        help="Override the directory holding the park text files.",
    )
    parser.add_argument(
        "-c",
        "--config",
        help="Path to the config folder to use for all config files.",
    )
    parser.add_argument(
        "-a",
        "--app-config",
        help="Path to the app.toml file to use.",
    )
    parser.add_argument(
        "-p",
        "--prompts-config",
        help="Path to the prompts.toml file to use.",
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Port to run the server on.",
    )
    parser.add_argument(
        "--host",
        type=str,
        help="Host to run the server on.",
    )
    return parser


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Applies command-line and environment overrides to the configuration."""
    if args.database_dir:
        logger.info(f"Overriding database directory with: {args.database_dir}")
        config.paths.database_dir = args.database_dir
    if args.data_dir:
        logger.info(f"Overriding data directory with: {args.data_dir}")
        config.paths.data_dir = args.data_dir
    if args.host:
        logger.info(f"Overriding server host with: {args.host}")
        config.server.host = args.host
    if args.port:
        logger.info(f"Overriding server port with: {args.port}")
        config.server.port = args.port

    if not config.generation_model.api_key:
        env_key = os.getenv(API_KEY_ENV_VAR)
        if env_key:
            config.generation_model.api_key = env_key
    return config


def build_services(config: Config) -> ServiceBundle:
    """
    Wires the core components from an already loaded configuration.

    The tool bridge is created but not started; starting it is the job of
    whoever runs the event loop that serves requests.
    """
    # 1. Vector store. Everything that reads or writes parks depends on it.
    logger.info("Initializing vector store...")
    client = create_chroma_client(config.vector_store, config.paths)
    vector_store = ParkVectorStore(
        client,
        collection_name=config.vector_store.collection_name,
        vector_size=config.vector_store.vector_size,
    )

    # 2. Embedding generator
    logger.info("Initializing embedding model...")
    embedding_generator = EmbeddingGenerator(
        create_embedding_model(config.embedding_model)
    )

    # 3. Search tool and the bridge that exposes it
    logger.info("Initializing park search tool bridge...")
    search_tool = SearchTool(
        embedding_generator, vector_store, limit=config.search.result_limit
    )
    bridge = create_park_tool_bridge(search_tool, config.bridge)

    # 4. Assistant
    logger.info("Initializing assistant...")
    agent = ParkAssistantAgent(
        config.generation_model,
        bridge,
        instructions=config.get_prompt(
            "assistant", "system_prompt", DEFAULT_INSTRUCTIONS
        ),
    )

    # 5. Ingestion service
    logger.info("Initializing ParkService...")
    service = ParkService(config, vector_store, embedding_generator)

    logger.info("Core services initialized successfully.")
    return ServiceBundle(config=config, service=service, bridge=bridge, agent=agent)


def initialize_service_from_args(args: argparse.Namespace) -> ServiceBundle:
    """
    Loads configuration and initializes all core components based on command-line
    arguments.

    Args:
        args: Parsed command-line arguments from an ArgumentParser.

    Returns:
        The initialized ServiceBundle.
    """
    logger.info("Initializing application core services...")

    config = load_config(
        config_dir=args.config,
        app_config_path=args.app_config,
        prompts_config_path=args.prompts_config,
    )
    config = apply_overrides(config, args)
    return build_services(config)
