"""Configuration management for the park knowledge service."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import toml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class PathsConfig(BaseModel):
    """Configuration for file paths."""

    data_dir: str = Field(
        default="./data/parks",
        description="Directory holding park text files used when ingest has no body",
    )
    database_dir: str = Field(
        default="./chroma_db",
        description="Directory to store the ChromaDB vector database",
    )


class VectorStoreConfig(BaseModel):
    """Configuration for the vector database collection."""

    collection_name: str = Field(default="parks", description="Collection name")
    vector_size: int = Field(
        default=384, description="Dimensionality of every stored vector"
    )
    host: Optional[str] = Field(
        default=None,
        description="ChromaDB server host. When unset a local persistent client is used",
    )
    port: int = Field(default=8000, description="ChromaDB server port")


class EmbeddingModelConfig(BaseModel):
    """Configuration for embedding models."""

    provider: str = Field(
        default="sentence_transformers",
        description="Embedding provider: sentence_transformers or openai_endpoint",
    )
    model_name: str = Field(
        default="all-MiniLM-L6-v2", description="Model name or identifier"
    )
    endpoint_url: Optional[str] = Field(
        default=None, description="API endpoint URL for openai_endpoint provider"
    )
    api_key: Optional[str] = Field(
        default=None, description="API key for openai_endpoint provider"
    )


class GenerationModelConfig(BaseModel):
    """Configuration for text generation models."""

    model_name: str = Field(
        default="deepseek/deepseek-chat", description="LiteLLM model identifier"
    )
    api_base: Optional[str] = Field(
        default=None, description="Override for the provider endpoint"
    )
    api_key: Optional[str] = Field(default=None, description="Provider API key")
    parameters: Dict[str, Any] = Field(
        default_factory=lambda: {"temperature": 0.0, "max_tokens": 1024},
        description="Parameters passed to litellm.acompletion()",
    )
    max_tool_rounds: int = Field(
        default=4, description="Maximum tool-calling rounds per question"
    )


class ServerConfig(BaseModel):
    """Configuration for the server."""

    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=7071, description="Server port")


class SearchConfig(BaseModel):
    """Configuration for the park search tool."""

    result_limit: int = Field(
        default=5, description="Maximum number of passages returned per search"
    )


class BridgeConfig(BaseModel):
    """Configuration for the in-process tool bridge."""

    server_name: str = Field(default="ParkKnowledgeAPI", description="Server name")
    server_version: str = Field(default="1.0.0", description="Server version")
    shutdown_timeout: float = Field(
        default=5.0,
        description="Seconds to wait for the server loop before cancelling it",
    )


class Config(BaseModel):
    """Main configuration model."""

    paths: PathsConfig = Field(default_factory=PathsConfig)
    vector_store: VectorStoreConfig = Field(default_factory=VectorStoreConfig)
    embedding_model: EmbeddingModelConfig = Field(default_factory=EmbeddingModelConfig)
    generation_model: GenerationModelConfig = Field(
        default_factory=GenerationModelConfig
    )
    server: ServerConfig = Field(default_factory=ServerConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    bridge: BridgeConfig = Field(default_factory=BridgeConfig)
    prompts: Dict[str, Any] = Field(
        default_factory=dict, description="Loaded prompts from prompts.toml"
    )

    @classmethod
    def load_from_file(cls, config_path: str) -> "Config":
        """Load configuration from a TOML file."""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_file, "r") as f:
            config_data = toml.load(f)

        return cls(**config_data)

    def get_data_path(self) -> Path:
        """Get the park data directory as a Path object."""
        return Path(self.paths.data_dir).expanduser().resolve()

    def get_prompt(self, section: str, key: str, default: str) -> str:
        """Look up a prompt string, falling back to the given default."""
        value = self.prompts.get(section, {}).get(key)
        if not value:
            return default
        return str(value)


def load_config(
    config_dir: Optional[str] = None,
    app_config_path: Optional[str] = None,
    prompts_config_path: Optional[str] = None,
) -> Config:
    """Load all configurations, handling CLI overrides."""
    base_dir = Path(config_dir) if config_dir else Path("config")

    app_path = Path(app_config_path) if app_config_path else base_dir / "app.toml"
    prompts_path = (
        Path(prompts_config_path) if prompts_config_path else base_dir / "prompts.toml"
    )

    try:
        logger.info(f"Loading app config from: {app_path}")
        with open(app_path, "r") as f:
            app_data = toml.load(f)
    except FileNotFoundError:
        logger.error(f"Application config file not found at {app_path}. Aborting.")
        raise

    try:
        logger.info(f"Loading prompts from: {prompts_path}")
        with open(prompts_path, "r") as f:
            prompts_data = toml.load(f)
    except FileNotFoundError:
        logger.warning(
            f"Prompts config file not found at {prompts_path}. Using empty prompts."
        )
        prompts_data = {}

    config = Config(**app_data)
    config.prompts = prompts_data

    return config
