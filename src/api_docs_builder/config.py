"""Site configuration for the API docs build.

Read from a YAML site config (``_config.yml``)::

    api_docs:
      order: [Sites, Environments, "*", Webhooks]
      subgroups:
        Sites: ["", WAF, "*"]
      base_url: https://api.builtfast.com
    ordered_data:
      vector_pro_endpoints:
        key: name
        order: [Sites, "*", API Keys]

Unknown top-level keys are ignored so the whole site config can be passed in.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from api_docs_builder.errors import ConfigError
from api_docs_builder.generator.examples import BASE_URL


class OrderingConfig(BaseModel):
    """Explicit order for a configured list; ``"*"`` marks the wildcard slot."""

    key: str = "name"
    order: list[str] = ["*"]


class ApiDocsConfig(BaseModel):
    order: list[str] = []
    subgroups: dict[str, list[str]] = {}
    base_url: str = BASE_URL


class SiteConfig(BaseModel):
    api_docs: ApiDocsConfig = ApiDocsConfig()
    ordered_data: dict[str, OrderingConfig] = {}

    def ordering_for(self, name: str) -> OrderingConfig:
        return self.ordered_data.get(name, OrderingConfig())


def load_config(path: Path | None) -> SiteConfig:
    """Load the site config, or return defaults when ``path`` is None."""
    if path is None:
        return SiteConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    if data is None:
        return SiteConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(data).__name__}")

    try:
        return SiteConfig(
            api_docs=data.get("api_docs") or {},
            ordered_data=data.get("ordered_data") or {},
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e
