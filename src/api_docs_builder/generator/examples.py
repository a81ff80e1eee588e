"""Code example generator — curl, PHP SDK and JS SDK snippets per endpoint.

curl is always generated. The SDK languages first look up a hand-written
Jinja2 template for the endpoint's (path, method) pair and fall back to
an auto-generated method chain when none is registered or the template
file does not exist.
"""

import json
import logging
import re
from pathlib import Path
from urllib.parse import quote_plus

from jinja2 import Environment, FileSystemLoader, Template, TemplateError, TemplateNotFound

from api_docs_builder.slug import strip_api_prefix

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"

BASE_URL = "https://api.builtfast.com"

SDK_LANGUAGES = ("php", "js")

MUTATING_METHODS = ("POST", "PUT", "PATCH")

# (path after api/v1/vector/, method) -> template name
TEMPLATE_MAP: dict[tuple[str, str], str] = {
    # Account
    ("account", "GET"): "account.getSummary",
    # SSH Keys (Account)
    ("ssh-keys", "GET"): "account.sshKeys.list",
    ("ssh-keys", "POST"): "account.sshKeys.create",
    ("ssh-keys/{key}", "GET"): "account.sshKeys.get",
    ("ssh-keys/{key}", "DELETE"): "account.sshKeys.delete",
    # API Keys
    ("api-keys", "GET"): "account.apiKeys.list",
    ("api-keys", "POST"): "account.apiKeys.create",
    ("api-keys/{token}", "DELETE"): "account.apiKeys.delete",
    # Global Secrets
    ("global-secrets", "GET"): "account.secrets.list",
    ("global-secrets", "POST"): "account.secrets.create",
    ("global-secrets/{secret}", "GET"): "account.secrets.get",
    ("global-secrets/{secret}", "PUT"): "account.secrets.update",
    ("global-secrets/{secret}", "DELETE"): "account.secrets.delete",
    # PHP Versions
    ("php-versions", "GET"): "phpVersions.list",
    # Sites
    ("sites", "GET"): "sites.list",
    ("sites", "POST"): "sites.create",
    ("sites/{site}", "GET"): "sites.get",
    ("sites/{site}", "PUT"): "sites.update",
    ("sites/{site}", "DELETE"): "sites.delete",
    ("sites/{site}/clone", "POST"): "sites.clone",
    ("sites/{site}/suspend", "POST"): "sites.suspend",
    ("sites/{site}/unsuspend", "POST"): "sites.unsuspend",
    ("sites/{site}/sftp/reset-password", "POST"): "sites.resetSftpPassword",
    ("sites/{site}/database/reset-password", "POST"): "sites.db.resetPassword",
    ("sites/{site}/logs", "GET"): "sites.getLogs",
    ("sites/{site}/purge-cache", "POST"): "sites.purgeCache",
    # Sites - SSH Keys
    ("sites/{site}/ssh-keys", "GET"): "sites.sshKeys.list",
    ("sites/{site}/ssh-keys", "POST"): "sites.sshKeys.add",
    ("sites/{site}/ssh-keys/{key}", "DELETE"): "sites.sshKeys.remove",
    # Sites - Database
    ("sites/{site}/db/import", "POST"): "sites.db.import",
    ("sites/{site}/db/imports", "POST"): "sites.db.createImportSession",
    ("sites/{site}/db/imports/{import}", "GET"): "sites.db.getImportStatus",
    ("sites/{site}/db/imports/{import}/run", "POST"): "sites.db.runImport",
    ("sites/{site}/db/export", "POST"): "sites.db.createExport",
    ("sites/{site}/db/exports/{export}", "GET"): "sites.db.getExportStatus",
    # Sites - WAF
    ("sites/{site}/waf/allowed-referrers", "GET"): "sites.waf.listAllowedReferrers",
    ("sites/{site}/waf/allowed-referrers", "POST"): "sites.waf.addAllowedReferrer",
    ("sites/{site}/waf/allowed-referrers/{hostname}", "DELETE"): "sites.waf.removeAllowedReferrer",
    ("sites/{site}/waf/blocked-referrers", "GET"): "sites.waf.listBlockedReferrers",
    ("sites/{site}/waf/blocked-referrers", "POST"): "sites.waf.addBlockedReferrer",
    ("sites/{site}/waf/blocked-referrers/{hostname}", "DELETE"): "sites.waf.removeBlockedReferrer",
    ("sites/{site}/waf/blocked-ips", "GET"): "sites.waf.listBlockedIPs",
    ("sites/{site}/waf/blocked-ips", "POST"): "sites.waf.addBlockedIP",
    ("sites/{site}/waf/blocked-ips/{ip}", "DELETE"): "sites.waf.removeBlockedIP",
    ("sites/{site}/waf/rate-limits", "GET"): "sites.waf.listRateLimits",
    ("sites/{site}/waf/rate-limits", "POST"): "sites.waf.createRateLimit",
    ("sites/{site}/waf/rate-limits/{rule}", "GET"): "sites.waf.getRateLimit",
    ("sites/{site}/waf/rate-limits/{rule}", "PUT"): "sites.waf.updateRateLimit",
    ("sites/{site}/waf/rate-limits/{rule}", "DELETE"): "sites.waf.deleteRateLimit",
    # Environments
    ("sites/{site}/environments", "GET"): "environments.list",
    ("sites/{site}/environments", "POST"): "environments.create",
    ("environments", "GET"): "environments.listAll",
    ("environments/{env}", "GET"): "environments.get",
    ("environments/{env}", "PUT"): "environments.update",
    ("environments/{env}", "DELETE"): "environments.delete",
    ("environments/{env}/database/reset-password", "POST"): "environments.resetDatabasePassword",
    # Environments - SSL
    ("environments/{env}/ssl", "GET"): "sites.ssl.getStatus",
    ("environments/{env}/ssl/nudge", "POST"): "sites.ssl.nudge",
    # Environments - Secrets
    ("environments/{env}/secrets", "GET"): "environments.secrets.list",
    ("environments/{env}/secrets", "POST"): "environments.secrets.create",
    ("secrets/{secret}", "GET"): "environments.secrets.get",
    ("secrets/{secret}", "PUT"): "environments.secrets.update",
    ("secrets/{secret}", "DELETE"): "environments.secrets.delete",
    # Environments - Deployments
    ("environments/{env}/deployments", "GET"): "environments.deployments.list",
    ("environments/{env}/deployments", "POST"): "environments.deployments.create",
    ("deployments/{deployment}", "GET"): "environments.deployments.get",
    ("environments/{env}/rollback", "POST"): "environments.deployments.rollback",
    # Webhooks
    ("webhooks", "GET"): "webhooks.list",
    ("webhooks", "POST"): "webhooks.create",
    ("webhooks/{webhook}", "GET"): "webhooks.get",
    ("webhooks/{webhook}", "PUT"): "webhooks.update",
    ("webhooks/{webhook}", "DELETE"): "webhooks.delete",
    ("webhooks/{webhook}/logs", "GET"): "webhooks.listLogs",
    ("webhooks/{webhook}/rotate-secret", "POST"): "webhooks.rotateSecret",
    # Events
    ("events", "GET"): "events.list",
}

_IDENTIFIER = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


# -- scalar and literal formatting -------------------------------------------


def to_text(value) -> str:
    """String form of an example value as it appears in URLs and YAML."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def single_quote(text: str) -> str:
    """Wrap in single quotes, escaping backslashes and embedded quotes."""
    escaped = text.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def quote_value(value) -> str:
    """Format a positional SDK argument."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return single_quote(to_text(value))


def _literal_scalar(value) -> str | None:
    if isinstance(value, str):
        return single_quote(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if value is None:
        return "null"
    return None


def php_value(value, indent: int = 0) -> str:
    scalar = _literal_scalar(value)
    if scalar is not None:
        return scalar
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(php_value(v, indent) for v in value) + "]"
    if isinstance(value, dict):
        return php_array(value, indent)
    return single_quote(str(value))


def php_array(mapping: dict | None, indent: int = 0) -> str:
    """Render a mapping as a multi-line PHP array literal."""
    if not mapping:
        return "[]"

    pad = " " * indent
    inner_pad = " " * (indent + 4)

    lines = ["["]
    for key, value in mapping.items():
        lines.append(f"{inner_pad}{single_quote(str(key))} => {php_value(value, indent + 4)},")
    lines.append(f"{pad}]")
    return "\n".join(lines)


def js_value(value, indent: int = 0) -> str:
    scalar = _literal_scalar(value)
    if scalar is not None:
        return scalar
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(js_value(v, indent) for v in value) + "]"
    if isinstance(value, dict):
        return js_object(value, indent)
    return single_quote(str(value))


def js_object(mapping: dict | None, indent: int = 0) -> str:
    """Render a mapping as a multi-line JS object literal.

    Keys that are valid identifiers are emitted bare, others quoted.
    """
    if not mapping:
        return "{}"

    pad = " " * indent
    inner_pad = " " * (indent + 4)

    lines = ["{"]
    for key, value in mapping.items():
        key = str(key)
        key_str = key if _IDENTIFIER.match(key) else single_quote(key)
        lines.append(f"{inner_pad}{key_str}: {js_value(value, indent + 4)},")
    lines.append(f"{pad}}}")
    return "\n".join(lines)


def camelize(segment: str) -> str:
    """``rate-limits`` -> ``rateLimits``, ``blocked_ips`` -> ``blockedIps``."""
    return re.sub(r"[-_]([a-z])", lambda m: m.group(1).upper(), segment)


def _is_placeholder(segment: str | None) -> bool:
    return bool(segment) and segment.startswith("{") and segment.endswith("}")


def build_sdk_method_chain(uri: str) -> list[str]:
    """Split a URI into SDK resource names, skipping ``{param}`` segments.

    ``api/v1/vector/sites/{site}/waf/rate-limits`` -> ``["sites", "waf", "rateLimits"]``
    """
    segments = strip_api_prefix(uri).split("/")

    chain = []
    i = 0
    while i < len(segments):
        segment = segments[i]
        if _is_placeholder(segment):
            i += 1
            continue
        if segment:
            chain.append(camelize(segment))
        next_segment = segments[i + 1] if i + 1 < len(segments) else None
        # a placeholder right after a resource is that resource's argument
        i += 2 if _is_placeholder(next_segment) else 1
    return chain


def substitute_url_params(uri: str, url_params: dict) -> str:
    result = uri
    for key, value in url_params.items():
        result = result.replace(f"{{{key}}}", to_text(value))
    return result


# -- template context ---------------------------------------------------------


class TemplateContext:
    """Variables and helpers exposed to SDK example templates."""

    def __init__(self, method: str, uri: str, url_params: dict, query_params: dict, body_params: dict):
        self.method = method
        self.uri = uri
        self.url_params = url_params
        self.query_params = query_params
        self.body_params = body_params

    def quote(self, value) -> str:
        return single_quote(to_text(value))

    def params_if_any(self, params: dict | None) -> str:
        """PHP array of ``params``, or an empty string when there are none."""
        if not params:
            return ""
        return php_array(params)

    def first_url_param(self):
        return next(iter(self.url_params.values()), None)

    def has_body_params(self) -> bool:
        return bool(self.body_params)

    def has_query_params(self) -> bool:
        return bool(self.query_params)

    def as_dict(self) -> dict:
        return {
            "method": self.method,
            "uri": self.uri,
            "url_params": self.url_params,
            "query_params": self.query_params,
            "body_params": self.body_params,
            "quote": self.quote,
            "php_array": php_array,
            "js_object": js_object,
            "params_if_any": self.params_if_any,
            "first_url_param": self.first_url_param,
            "has_body_params": self.has_body_params,
            "has_query_params": self.has_query_params,
        }


# -- generator ---------------------------------------------------------------


class CodeExamples:
    """Builds the curl / php / js examples for endpoints of one build.

    Templates are loaded lazily and cached per ``(language, name)``,
    including lookups that found no template.
    """

    def __init__(self, templates_dir: Path | None = None, base_url: str = BASE_URL):
        self.templates_dir = Path(templates_dir) if templates_dir else TEMPLATES_DIR
        self.base_url = base_url.rstrip("/")
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._template_cache: dict[tuple[str, str], Template | None] = {}

    def build_examples(
        self,
        method: str,
        uri: str,
        url_params: dict,
        query_params: dict,
        body_params: dict,
    ) -> dict[str, str]:
        """Return ``{"curl": ..., "php": ..., "js": ...}`` for one endpoint."""
        return {
            "curl": self.build_curl_example(method, uri, url_params, query_params, body_params),
            "php": self.build_php_example(method, uri, url_params, query_params, body_params),
            "js": self.build_js_example(method, uri, url_params, query_params, body_params),
        }

    # -- templates ------------------------------------------------------------

    def template_name_for(self, uri: str, method: str) -> str | None:
        return TEMPLATE_MAP.get((strip_api_prefix(uri), method))

    def load_template(self, lang: str, name: str) -> Template | None:
        cache_key = (lang, name)
        if cache_key in self._template_cache:
            return self._template_cache[cache_key]

        try:
            template = self._env.get_template(f"{lang}/{name}.{lang}.j2")
        except TemplateNotFound:
            logger.debug("No %s template for %s", lang, name)
            template = None
        except TemplateError as e:
            logger.warning("Template %s/%s failed to compile, using generated example: %s", lang, name, e)
            template = None
        self._template_cache[cache_key] = template
        return template

    def render_template(self, lang: str, method: str, uri: str, url_params, query_params, body_params) -> str | None:
        name = self.template_name_for(uri, method)
        if not name:
            return None
        template = self.load_template(lang, name)
        if template is None:
            return None

        ctx = TemplateContext(method, uri, url_params, query_params, body_params)
        try:
            return template.render(**ctx.as_dict())
        except TemplateError as e:
            logger.warning("Template %s/%s failed to render, using generated example: %s", lang, name, e)
            return None

    # -- curl -----------------------------------------------------------------

    def build_curl_example(self, method, uri, url_params, query_params, body_params) -> str:
        full_uri = substitute_url_params(uri, url_params)
        url = f"{self.base_url}/{full_uri.removeprefix('/')}"

        if query_params:
            query_string = "&".join(f"{k}={quote_plus(to_text(v))}" for k, v in query_params.items())
            url = f"{url}?{query_string}"

        lines = [
            f"curl -X {method} \\",
            f'  "{url}" \\',
            '  -H "Authorization: Bearer $API_KEY" \\',
        ]

        if method in MUTATING_METHODS:
            lines.append('  -H "Content-Type: application/json" \\')
            lines.append('  -H "Accept: application/json"')
            if body_params:
                body = json.dumps(body_params, separators=(",", ":"), ensure_ascii=False)
                lines[-1] += " \\"
                lines.append("  -d '" + body.replace("'", "'\\''") + "'")
        else:
            lines.append('  -H "Accept: application/json"')

        return "\n".join(lines)

    # -- SDK languages ----------------------------------------------------------

    def build_php_example(self, method, uri, url_params, query_params, body_params) -> str:
        result = self.render_template("php", method, uri, url_params, query_params, body_params)
        if result is not None:
            return result
        return self._build_sdk_fallback(
            method, uri, url_params, query_params, body_params,
            root="$response = $vectorPro", accessor="->", literal=php_array,
        )

    def build_js_example(self, method, uri, url_params, query_params, body_params) -> str:
        result = self.render_template("js", method, uri, url_params, query_params, body_params)
        if result is not None:
            return result
        return self._build_sdk_fallback(
            method, uri, url_params, query_params, body_params,
            root="const response = await vectorPro", accessor=".", literal=js_object,
        )

    def _build_sdk_fallback(self, method, uri, url_params, query_params, body_params, root, accessor, literal) -> str:
        chain = build_sdk_method_chain(uri)

        args = [quote_value(value) for value in url_params.values()]
        params = query_params if method == "GET" else body_params
        if params:
            args.append(literal(params, 8))

        lines = [root]
        if chain:
            lines.append(f"    {accessor}{accessor.join(chain)}")
        lines.append(f"    {accessor}{method.lower()}({', '.join(args)});")
        return "\n".join(lines)
