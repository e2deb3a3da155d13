"""Configuration management for jira-plan-sync using Pydantic."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationInfo, field_validator

from jira_plan_sync.core.exceptions import ConfigError
from jira_plan_sync.core.logging import LogLevel
from jira_plan_sync.core.output import OutputFormat

ENV_PREFIXES = ("JIRA_PLAN_SYNC_", "JIRA_")


class JiraConfig(BaseModel):
    """Jira Cloud connection settings."""

    url: str | None = None
    email: str | None = None
    api_token: str | None = None
    project_key: str | None = None
    timeout: float | None = 30

    @field_validator("timeout", mode="before")
    @classmethod
    def validate_timeout(cls, v: Any) -> Any:
        """Treat 0, "none", "null" and "off" as no timeout."""
        if isinstance(v, str) and v.strip().lower() in ("none", "null", "off", "0"):
            return None
        if v == 0:
            return None
        return v

    def require(self, project_key: bool = False) -> None:
        """Fail unless every setting needed to talk to Jira is present.

        Raises:
            ConfigError: naming each missing environment variable
        """
        required = ["url", "email", "api_token"]
        if project_key:
            required.append("project_key")

        missing = [f"JIRA_{name.upper()}" for name in required if not getattr(self, name)]
        if missing:
            raise ConfigError(f"Missing required environment variables ({', '.join(missing)})")


class WorkflowConfig(BaseModel):
    """Workflow status labels and issue defaults of the target workspace."""

    finished_statuses: list[str] = Field(default_factory=lambda: ["Closed", "Cancelled", "Done"])
    active_statuses: list[str] = Field(
        default_factory=lambda: ["To Do", "In Progress", "Selected for Development"]
    )
    issue_type: str = "Task"
    search_max_results: int = 100

    @field_validator("finished_statuses", "active_statuses")
    @classmethod
    def validate_statuses(cls, v: list[str], info: ValidationInfo) -> list[str]:
        if any(not status.strip() for status in v):
            raise ValueError(f"{info.field_name} must not contain blank statuses")
        return v

    @field_validator("finished_statuses")
    @classmethod
    def validate_finished_statuses(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("finished_statuses must name at least one status")
        return v


class GlobalConfig(BaseModel):
    """Global settings."""

    output_format: OutputFormat = OutputFormat.JSON
    color: str = "auto"  # auto, always, never
    verbosity: LogLevel = LogLevel.WARNING
    dry_run: bool = False

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        if v not in ("auto", "always", "never"):
            raise ValueError("color must be 'auto', 'always', or 'never'")
        return v


class SyncConfig(BaseModel):
    """Main configuration model."""

    model_config = {"populate_by_name": True}

    version: str = "1"
    global_settings: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    jira: JiraConfig = Field(default_factory=JiraConfig)
    workflow: WorkflowConfig = Field(default_factory=WorkflowConfig)


class ConfigLoader:
    """Loads and merges configuration from files and the environment."""

    CONFIG_FILENAMES = [
        "jira-plan-sync.yaml",
        "jira-plan-sync.yml",
        ".jira-plan-sync.yaml",
        ".jira-plan-sync.yml",
    ]

    def __init__(self, environ: dict[str, str] | None = None):
        self._environ = environ
        self._config: SyncConfig | None = None

    def load(self, config_file: str | Path | None = None) -> SyncConfig:
        """Load configuration from files and environment.

        Priority (highest to lowest):
        1. Environment variables (JIRA_PLAN_SYNC_*, then JIRA_*)
        2. Explicitly specified config file
        3. Project config (./jira-plan-sync.yaml, searched upwards)
        4. User config (~/.jira-plan-sync/config.yaml)

        Args:
            config_file: Optional explicit config file path

        Returns:
            Merged configuration
        """
        configs: list[dict[str, Any]] = []

        user_config_path = Path.home() / ".jira-plan-sync" / "config.yaml"
        if user_config_path.exists():
            configs.append(self._load_yaml_file(user_config_path))

        project_config = self._find_project_config()
        if project_config:
            configs.append(self._load_yaml_file(project_config))

        if config_file:
            config_path = Path(config_file)
            if not config_path.exists():
                raise ConfigError(f"Config file not found: {config_file}")
            configs.append(self._load_yaml_file(config_path))

        configs.append({"jira": self._env_overrides()})

        merged = self._merge_configs(configs)

        try:
            self._config = SyncConfig(**merged)
        except ValueError as e:
            raise ConfigError(f"Invalid configuration: {e}")
        return self._config

    def _env_overrides(self) -> dict[str, Any]:
        """Collect Jira settings from the environment."""
        environ = os.environ if self._environ is None else self._environ
        overrides: dict[str, Any] = {}
        for field in JiraConfig.model_fields:
            for prefix in ENV_PREFIXES:
                value = environ.get(f"{prefix}{field.upper()}")
                if value:
                    overrides[field] = value
                    break
        return overrides

    def _find_project_config(self) -> Path | None:
        """Find project config file in current or parent directories."""
        current = Path.cwd()

        while current != current.parent:
            for filename in self.CONFIG_FILENAMES:
                config_path = current / filename
                if config_path.exists():
                    return config_path
            current = current.parent

        return None

    def _load_yaml_file(self, path: Path) -> dict[str, Any]:
        """Load a YAML config file."""
        try:
            with open(path) as f:
                content = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}")
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}")

        if not isinstance(content, dict):
            raise ConfigError(f"Invalid config in {path}: expected a mapping")
        return content

    def _merge_configs(self, configs: list[dict[str, Any]]) -> dict[str, Any]:
        """Deep merge multiple configuration dictionaries."""
        result: dict[str, Any] = {}
        for config in configs:
            result = self._deep_merge(result, config)
        return result

    def _deep_merge(
        self,
        base: dict[str, Any],
        override: dict[str, Any],
    ) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result


def load_config(config_file: str | Path | None = None) -> SyncConfig:
    """Load jira-plan-sync configuration.

    Args:
        config_file: Optional explicit config file path

    Returns:
        Loaded configuration
    """
    return ConfigLoader().load(config_file)


def get_default_config() -> SyncConfig:
    """Get default configuration without loading from files."""
    return SyncConfig()
