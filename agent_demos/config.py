"""
Configuration
=============
Loads demo settings from JSON files and the environment, then validates them
into typed sections.

Resolution order (later wins):
  1. appsettings.json              (in config_dir, default: cwd)
  2. appsettings.Development.json  (optional)
  3. Conventional env aliases      AZURE_OPENAI_ENDPOINT, AZURE_OPENAI_API_KEY, ...
  4. Section__Key env variables    AzureOpenAI__ApiKey, GitHubMCP__GitHubPersonalAccessToken, ...

Sections:
  AzureAI      ProjectEndpoint, ModelDeploymentName, AgentId, VectorStoreId
  AzureOpenAI  Endpoint, ModelName, ApiKey, ApiVersion
  GitHubMCP    GitHubPersonalAccessToken

Validation happens when a section is requested, not at load time, so demos
that need no model (e.g. the sequential workflow) run without credentials.
"""
import json
import logging
import os
from pathlib import Path
from typing import ClassVar, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

SETTINGS_FILE = "appsettings.json"
DEVELOPMENT_SETTINGS_FILE = "appsettings.Development.json"

ENV_ALIASES: dict[str, tuple[str, str]] = {
    "AZURE_OPENAI_ENDPOINT":        ("AzureOpenAI", "Endpoint"),
    "AZURE_OPENAI_DEPLOYMENT":      ("AzureOpenAI", "ModelName"),
    "AZURE_OPENAI_API_KEY":         ("AzureOpenAI", "ApiKey"),
    "AZURE_OPENAI_API_VERSION":     ("AzureOpenAI", "ApiVersion"),
    "GITHUB_PERSONAL_ACCESS_TOKEN": ("GitHubMCP", "GitHubPersonalAccessToken"),
}


class _Section(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    SECTION_NAME: ClassVar[str] = ""


class AzureAISettings(_Section):
    SECTION_NAME: ClassVar[str] = "AzureAI"

    project_endpoint:      str = Field(default="", alias="ProjectEndpoint")
    model_deployment_name: str = Field(default="", alias="ModelDeploymentName")
    agent_id:              str = Field(default="", alias="AgentId")
    vector_store_id:       str = Field(default="", alias="VectorStoreId")


class AzureOpenAISettings(_Section):
    SECTION_NAME: ClassVar[str] = "AzureOpenAI"

    endpoint:    str = Field(default="", alias="Endpoint")
    model_name:  str = Field(default="", alias="ModelName")
    api_key:     str = Field(default="", alias="ApiKey")
    api_version: str = Field(default="2024-07-01-preview", alias="ApiVersion")


class GitHubMCPSettings(_Section):
    SECTION_NAME: ClassVar[str] = "GitHubMCP"

    github_personal_access_token: str = Field(default="", alias="GitHubPersonalAccessToken")


SECTIONS = (AzureAISettings, AzureOpenAISettings, GitHubMCPSettings)


def _read_json(path: Path) -> dict:
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must contain a JSON object")
    return data


def _merge(base: dict, override: Mapping) -> dict:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _env_overrides(environ: Mapping[str, str]) -> dict:
    known = {section.SECTION_NAME for section in SECTIONS}
    overrides: dict[str, dict] = {}

    for name, (section, key) in ENV_ALIASES.items():
        if environ.get(name):
            overrides.setdefault(section, {})[key] = environ[name]

    for name, value in environ.items():
        if "__" not in name:
            continue
        section, key = name.split("__", 1)
        if section in known and key:
            overrides.setdefault(section, {})[key] = value

    return overrides


def load_config(
    config_dir: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> "AppConfig":
    """
    Read the settings files and environment into an AppConfig.

    A missing appsettings.json is logged, not fatal; the environment may
    still supply everything. A file that exists but is not valid JSON
    raises ConfigurationError.
    """
    base = Path(config_dir) if config_dir is not None else Path.cwd()
    environ = os.environ if environ is None else environ
    raw: dict = {}

    for filename, required in ((SETTINGS_FILE, True), (DEVELOPMENT_SETTINGS_FILE, False)):
        path = base / filename
        if not path.exists():
            if required:
                logger.warning("[config] %s not found in %s; using environment only", filename, base)
            continue
        try:
            raw = _merge(raw, _read_json(path))
        except ValueError as exc:
            raise ConfigurationError(filename, [str(exc)]) from exc
        logger.info("[config] Loaded %s", path)

    return AppConfig(_merge(raw, _env_overrides(environ)))


class AppConfig:
    """Raw merged settings with typed, validated accessors per section."""

    def __init__(self, raw: dict):
        self._raw = raw

    def section(self, name: str) -> dict:
        value = self._raw.get(name)
        return dict(value) if isinstance(value, Mapping) else {}

    def _validate(self, model: type[_Section]):
        """Validate one section; a wrongly typed value names its field in a ConfigurationError."""
        try:
            return model.model_validate(self.section(model.SECTION_NAME))
        except ValidationError as exc:
            fields = [str(err["loc"][0]) for err in exc.errors() if err["loc"]]
            raise ConfigurationError(model.SECTION_NAME, fields) from exc

    def azure_openai(self) -> AzureOpenAISettings:
        settings = self._validate(AzureOpenAISettings)
        _require(settings, {"Endpoint": settings.endpoint,
                            "ModelName": settings.model_name,
                            "ApiKey": settings.api_key})
        return settings

    def azure_ai(self) -> AzureAISettings:
        settings = self._validate(AzureAISettings)
        _require(settings, {"ProjectEndpoint": settings.project_endpoint,
                            "ModelDeploymentName": settings.model_deployment_name})
        return settings

    def github_mcp(self) -> GitHubMCPSettings:
        # Optional section: the GitHub MCP server simply isn't started without a token.
        return self._validate(GitHubMCPSettings)


def _require(settings: _Section, fields: dict[str, str]) -> None:
    missing = [name for name, value in fields.items() if not value or not value.strip()]
    if missing:
        raise ConfigurationError(settings.SECTION_NAME, missing)
