"""Core configuration for the fitness agent."""

import logging
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from fitness_agent.logging import configure_logging


class LLMConfig(BaseSettings):
    """Configuration for LLM providers."""

    provider: Literal["openai"] = Field(
        default="openai",
        description="LLM provider to use",
    )

    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="OpenAI model to use",
    )
    openai_temperature: float = Field(
        default=0.5,
        ge=0.0,
        le=2.0,
        description="Temperature for OpenAI model",
    )
    openai_base_url: str | None = Field(
        default=None,
        description="Override for OpenAI-compatible endpoints",
    )

    timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout applied to each completion request",
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        description="Client-level retries for a failed completion request",
    )

    model_config = SettingsConfigDict(
        env_prefix="FITNESS_AGENT_LLM_",
        env_file=".env",
        extra="ignore",
    )


class CheckpointConfig(BaseSettings):
    """Configuration for checkpoint persistence."""

    backend: Literal["memory", "json"] = Field(
        default="memory",
        description="Where thread checkpoints are kept",
    )
    path: Path = Field(
        default=Path(".state/checkpoints.json"),
        description="Checkpoint file used by the json backend",
    )

    model_config = SettingsConfigDict(
        env_prefix="FITNESS_AGENT_CHECKPOINT_",
        env_file=".env",
        extra="ignore",
    )


class WorkflowConfig(BaseSettings):
    """Configuration for the diet workflow."""

    max_preference_requests: int = Field(
        default=2,
        ge=1,
        description="Times the user is asked for preferences before a human review",
    )
    max_steps: int = Field(
        default=50,
        ge=1,
        description="Node steps allowed in a single invoke/resume call",
    )

    model_config = SettingsConfigDict(
        env_prefix="FITNESS_AGENT_WORKFLOW_",
        env_file=".env",
        extra="ignore",
    )


class AgentConfig(BaseSettings):
    """Main configuration for the agent."""

    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    llm: LLMConfig = Field(
        default_factory=LLMConfig,
        description="LLM configuration",
    )
    checkpoint: CheckpointConfig = Field(
        default_factory=CheckpointConfig,
        description="Checkpoint configuration",
    )
    workflow: WorkflowConfig = Field(
        default_factory=WorkflowConfig,
        description="Workflow configuration",
    )

    model_config = SettingsConfigDict(
        env_prefix="FITNESS_AGENT_",
        env_file=".env",
        extra="ignore",
    )

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        configure_logging(self.log_level, fmt=self.log_format)

        if self.debug:
            logging.getLogger("fitness_agent").setLevel(logging.DEBUG)
