"""OpenAPI fragment builder — a single-path OpenAPI 3.1 YAML document per endpoint."""

import re

from api_docs_builder.generator.examples import MUTATING_METHODS, to_text
from api_docs_builder.parser.base import Parameter
from api_docs_builder.slug import uri_display

OPENAPI_VERSION = "3.1.0"
DOC_VERSION = "1.0.0"

OPENAPI_TYPES = {
    "integer": "integer",
    "int": "integer",
    "number": "number",
    "float": "number",
    "double": "number",
    "boolean": "boolean",
    "bool": "boolean",
    "array": "array",
    "object": "object",
}

_YAML_SPECIAL = re.compile(r"""[:#\[\]{}|>&*!?'"]""")


def openapi_type(type_name) -> str:
    return OPENAPI_TYPES.get(to_text(type_name).lower(), "string")


def yaml_escape(text) -> str:
    """Render a scalar for inline YAML, quoting only when necessary."""
    text = to_text(text)
    if not text:
        return '""'

    text = text.replace("\n", " ").replace("\r", "").strip()
    if _YAML_SPECIAL.search(text) or text.startswith(("-", "@", "`")):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


def strip_html(text) -> str:
    return re.sub(r"<[^>]+>", "", to_text(text)).strip()


class OpenApiBuilder:
    """Emits the OpenAPI YAML shown next to each endpoint."""

    def build(
        self,
        endpoint: dict,
        group_name: str,
        method: str,
        uri: str,
        url_params: list[Parameter],
        query_params: list[Parameter],
        body_params: list[Parameter],
    ) -> str:
        metadata = endpoint.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}
        title = metadata.get("title") or "Untitled Endpoint"
        description = metadata.get("description") or ""

        lines = [
            f"openapi: {OPENAPI_VERSION}",
            "info:",
            f"  title: {yaml_escape(title)}",
            f"  version: {DOC_VERSION}",
            "paths:",
            f"  {uri_display(uri)}:",
            f"    {method.lower()}:",
            f"      summary: {yaml_escape(title)}",
        ]
        if description:
            lines.append(f"      description: {yaml_escape(strip_html(description))}")
        lines.append("      tags:")
        lines.append(f"        - {yaml_escape(group_name)}")

        parameters = self._build_parameters(url_params, query_params)
        if parameters:
            lines.append("      parameters:")
            lines.extend(parameters)

        if method in MUTATING_METHODS and body_params:
            lines.extend(self._build_request_body(body_params))

        lines.append("      responses:")
        lines.extend(self._build_responses(endpoint.get("responses")))

        return "\n".join(lines)

    def _build_parameters(self, url_params: list[Parameter], query_params: list[Parameter]) -> list[str]:
        lines = []

        for param in url_params:
            lines.append(f"        - name: {param.name}")
            lines.append("          in: path")
            lines.append("          required: true")
            lines.append("          schema:")
            lines.append(f"            type: {openapi_type(param.type)}")
            if param.description:
                lines.append(f"          description: {yaml_escape(param.description)}")

        for param in query_params:
            lines.append(f"        - name: {param.name}")
            lines.append("          in: query")
            lines.append(f"          required: {to_text(param.required)}")
            lines.append("          schema:")
            lines.append(f"            type: {openapi_type(param.type)}")
            if param.enum_values:
                lines.append("            enum:")
                lines.extend(f"              - {yaml_escape(v)}" for v in param.enum_values)
            if param.description:
                lines.append(f"          description: {yaml_escape(param.description)}")

        return lines

    def _build_request_body(self, body_params: list[Parameter]) -> list[str]:
        lines = [
            "      requestBody:",
            "        required: true",
            "        content:",
            "          application/json:",
            "            schema:",
            "              type: object",
            "              properties:",
        ]
        for param in body_params:
            lines.extend(self._build_property(param, 16))

        required = [p.name for p in body_params if p.required]
        if required:
            lines.append("              required:")
            lines.extend(f"                - {name}" for name in required)
        return lines

    def _build_property(self, param: Parameter, indent: int) -> list[str]:
        pad = " " * indent
        lines = [
            f"{pad}{param.name}:",
            f"{pad}  type: {openapi_type(param.type)}",
        ]
        if param.description:
            lines.append(f"{pad}  description: {yaml_escape(param.description)}")
        if param.enum_values:
            lines.append(f"{pad}  enum:")
            lines.extend(f"{pad}    - {yaml_escape(v)}" for v in param.enum_values)
        if param.nullable:
            lines.append(f"{pad}  nullable: true")
        if param.deprecated:
            lines.append(f"{pad}  deprecated: true")
        return lines

    def _build_responses(self, responses) -> list[str]:
        responses = [r for r in responses or [] if isinstance(r, dict)]
        if not responses:
            return ["        '200':", "          description: Success"]

        lines = []
        for response in responses:
            lines.append(f"        '{to_text(response.get('status'))}':")
            lines.append(f"          description: {yaml_escape(response.get('description') or 'Response')}")
        return lines
