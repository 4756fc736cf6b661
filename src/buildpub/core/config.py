"""
buildpub.core.config - Configuration Management
=================================================

Configuration can be loaded from multiple sources with the following
priority (highest first):

    1. Explicit constructor arguments, including the values load_config()
       reads from buildpub.yaml
    2. Environment variables (prefixed with BUILDPUB_)
    3. Default values defined in the models below

Architecture Context:
    Configuration is created once per build invocation and passed down:

        BuildPublisherSettings
            ├── PublisherConfig  → DeploymentOrchestrator, repository client factory
            ├── export_file      → where the build record is persisted
            └── log_level/format → configure_logging()

Environment Variables:
    BUILDPUB_LOG_LEVEL=DEBUG
    BUILDPUB_EXPORT_FILE=/tmp/build-info.json
    BUILDPUB_PUBLISHER__REPOSITORY_URL=https://repo.example.com/artifactory
    BUILDPUB_PUBLISHER__PUBLISH_ARTIFACTS=true
    BUILDPUB_PUBLISHER__INCLUDE_PATTERNS="**/*.jar,**/*.pom"
    BUILDPUB_PUBLISHER__EXCLUDE_PATTERNS='["*-sources.jar", "**/*.md5"]'
    BUILDPUB_PUBLISHER__ACCUMULATE_ARTIFACTS_DIR=/tmp/accumulated
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsError

from buildpub.core.exceptions import ConfigurationError
from buildpub.core.models import IncludeExcludePatterns, split_patterns


DEFAULT_CONFIG_FILE = "buildpub.yaml"


# =============================================================================
# Publisher Configuration
# =============================================================================
# What to publish and where. ``accumulate_artifacts_dir`` switches the run
# to local accumulation and overrides every publish flag.
# =============================================================================
class PublisherConfig(BaseModel):
    """Publishing switches, deployment filters, and repository coordinates.

    Attributes:
        publish_build_info: Send the build record to the repository.
        publish_artifacts: Deploy the reconciled artifacts.
        even_unstable: Publish even when the build had test failures.
        accumulate_artifacts_dir: Collect artifacts and build-info locally in
            this directory instead of publishing.
        include_patterns: Glob rules an artifact path must match to deploy.
        exclude_patterns: Glob rules that block deployment of a path.
        repository_url: Base URL of the remote repository.
        repository_client: Which client implementation to create
            ("http" or "memory").
        username: Repository user for basic auth (optional).
        password: Repository password or API token (optional).
        timeout_seconds: Per-request timeout for the HTTP client.
    """

    publish_build_info: bool = Field(
        default=True,
        description="Send the build record to the repository",
    )
    publish_artifacts: bool = Field(
        default=True,
        description="Deploy reconciled artifacts to the repository",
    )
    even_unstable: bool = Field(
        default=False,
        description="Publish even if tests failed",
    )
    accumulate_artifacts_dir: Optional[Path] = Field(
        default=None,
        description="Accumulate artifacts locally instead of publishing",
    )
    # NoDecode: env values reach the validator below as raw strings
    include_patterns: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Deployment include rules (empty = include all)",
    )
    exclude_patterns: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Deployment exclude rules",
    )
    repository_url: Optional[str] = Field(
        default=None,
        description="Base URL of the remote repository",
    )
    repository_client: Literal["http", "memory"] = Field(
        default="http",
        description="Repository client implementation",
    )
    username: Optional[str] = Field(default=None)
    password: Optional[str] = Field(default=None)
    timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="HTTP request timeout in seconds",
    )

    @field_validator("accumulate_artifacts_dir", mode="before")
    @classmethod
    def _blank_dir_is_unset(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("include_patterns", "exclude_patterns", mode="before")
    @classmethod
    def _split_patterns(cls, value: Any) -> list[str]:
        if isinstance(value, str) and value.lstrip().startswith("["):
            try:
                value = json.loads(value)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid JSON pattern list: {exc}") from exc
        return split_patterns(value)

    @property
    def deployment_patterns(self) -> IncludeExcludePatterns:
        """The include/exclude rules as an IncludeExcludePatterns value."""
        return IncludeExcludePatterns(
            include=self.include_patterns,
            exclude=self.exclude_patterns,
        )


# =============================================================================
# Main Configuration
# =============================================================================
# Environment Variable Mapping:
#   BUILDPUB_LOG_LEVEL                     → settings.log_level
#   BUILDPUB_EXPORT_FILE                   → settings.export_file
#   BUILDPUB_PUBLISHER__PUBLISH_ARTIFACTS  → settings.publisher.publish_artifacts
# =============================================================================
class BuildPublisherSettings(BaseSettings):
    """Top-level configuration for a buildpub run.

    Attributes:
        environment: Deployment environment of the CI agent.
        log_level: Python logging level name.
        log_format: "console" for humans, "json" for log shippers.
        export_file: Output-file-path override for the build record. When
            unset, the record goes to ``<base_dir>/target/build-info.json``.
        publisher: Publishing switches and repository settings.

    Example:
        >>> settings = BuildPublisherSettings(
        ...     log_level="DEBUG",
        ...     publisher=PublisherConfig(repository_client="memory"),
        ... )
    """

    environment: Literal["dev", "staging", "prod"] = Field(
        default="dev",
        description="Deployment environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log renderer",
    )
    export_file: Optional[Path] = Field(
        default=None,
        description="Where to persist the build record (overrides the default path)",
    )
    publisher: PublisherConfig = Field(
        default_factory=PublisherConfig,
        description="Publishing configuration",
    )

    model_config = {
        "env_prefix": "BUILDPUB_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
    }


# =============================================================================
# Configuration Loader
# =============================================================================
def load_config(path: Optional[str] = None) -> BuildPublisherSettings:
    """Load settings from a YAML file and/or environment variables.

    Args:
        path: Path to a YAML file. If None, ``buildpub.yaml`` in the current
            directory is used when present; otherwise only defaults and
            environment variables apply.

    Returns:
        A validated BuildPublisherSettings instance.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ConfigurationError: If the YAML cannot be parsed or is not a mapping,
            or the resulting settings (file or environment) are invalid.
    """
    if path is None:
        default_path = Path(DEFAULT_CONFIG_FILE)
        if default_path.exists():
            path = str(default_path)

    yaml_data: dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(config_path) as f:
                raw_data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                message=f"Invalid YAML in configuration file: {path}",
                error_code="INVALID_YAML",
                details={"path": str(config_path), "reason": str(exc)},
            ) from exc

        if raw_data is None:
            raw_data = {}
        if not isinstance(raw_data, dict):
            raise ConfigurationError(
                message=f"Configuration file must contain a mapping: {path}",
                error_code="INVALID_CONFIG_SHAPE",
                details={"path": str(config_path)},
            )
        yaml_data = raw_data

    try:
        return BuildPublisherSettings(**yaml_data)
    except (ValidationError, SettingsError) as exc:
        raise ConfigurationError(
            message=f"Invalid buildpub configuration: {exc}",
            error_code="INVALID_CONFIG",
            details={"path": path},
        ) from exc


def get_default_config() -> BuildPublisherSettings:
    """Create settings from defaults and environment variables only."""
    return BuildPublisherSettings()
