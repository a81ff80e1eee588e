"""Endpoint normalizer — converts raw scanner records into Endpoint models.

The scanner output is loosely typed: optional keys may be missing, and a
parameter map with no entries is sometimes serialized as an empty list.
Every accessor here falls back to an explicit default instead of failing.
"""

import json

from api_docs_builder.generator.examples import CodeExamples
from api_docs_builder.generator.openapi import OpenApiBuilder
from api_docs_builder.parser.base import Endpoint, Parameter, Response
from api_docs_builder.slug import endpoint_id, slugify, uri_display

DEFAULT_METHOD = "GET"
DEFAULT_TITLE = "Untitled Endpoint"


def normalize_to_mapping(value) -> dict:
    """Return ``value`` if it is a mapping, else an empty mapping."""
    if isinstance(value, dict):
        return value
    return {}


def normalize_to_list(value) -> list:
    if isinstance(value, list):
        return value
    return []


def build_parameters(params) -> list[Parameter]:
    """Build Parameter models from a ``{name: descriptor}`` mapping.

    Order is preserved. Entries whose descriptor is not a mapping are skipped.
    """
    result = []
    for name, param in normalize_to_mapping(params).items():
        if not isinstance(param, dict):
            continue
        result.append(
            Parameter(
                name=str(param.get("name") or name),
                type=str(param.get("type") or "string"),
                required=param.get("required") is True,
                description=str(param.get("description") or ""),
                example=param.get("example"),
                enum_values=normalize_to_list(param.get("enumValues")),
                nullable=param.get("nullable") is True,
                deprecated=param.get("deprecated") is True,
            )
        )
    return result


def _reject_constant(name):
    raise ValueError(f"{name} is not valid JSON")


def pretty_print_json(content) -> str:
    """Pretty-print JSON content, passing anything unparseable through unchanged."""
    if content is None or content == "":
        return ""
    if isinstance(content, (dict, list)):
        return json.dumps(content, indent=2, ensure_ascii=False)

    content = str(content)
    try:
        parsed = json.loads(content, parse_constant=_reject_constant)
    except ValueError:
        return content
    return json.dumps(parsed, indent=2, ensure_ascii=False)


def build_responses(responses) -> list[Response]:
    if not isinstance(responses, list):
        return []

    result = []
    for response in responses:
        if not isinstance(response, dict):
            continue
        status = response.get("status")
        description = str(response.get("description") or "")
        result.append(
            Response(
                status=status,
                description=description,
                slug=slugify(f"{'' if status is None else status}-{description}"),
                content=pretty_print_json(response.get("content")),
            )
        )
    return result


class EndpointNormalizer:
    """Builds one Endpoint per raw record, including examples and OpenAPI YAML."""

    def __init__(self, code_examples: CodeExamples, openapi_builder: OpenApiBuilder):
        self.code_examples = code_examples
        self.openapi_builder = openapi_builder

    def normalize(self, endpoint: dict, group_name: str) -> Endpoint:
        metadata = normalize_to_mapping(endpoint.get("metadata"))
        http_methods = [str(m) for m in normalize_to_list(endpoint.get("httpMethods")) if m]
        method = http_methods[0] if http_methods else DEFAULT_METHOD
        uri = str(endpoint.get("uri") or "")

        url_params = build_parameters(endpoint.get("urlParameters"))
        query_params = build_parameters(endpoint.get("queryParameters"))
        body_params = build_parameters(endpoint.get("bodyParameters"))

        clean_url = normalize_to_mapping(endpoint.get("cleanUrlParameters"))
        clean_query = normalize_to_mapping(endpoint.get("cleanQueryParameters"))
        clean_body = normalize_to_mapping(endpoint.get("cleanBodyParameters"))

        return Endpoint(
            id=endpoint_id(group_name, method, uri),
            title=str(metadata.get("title") or DEFAULT_TITLE),
            description=str(metadata.get("description") or ""),
            method=method,
            methods=http_methods or [method],
            uri=uri,
            uri_display=uri_display(uri),
            group=group_name,
            subgroup=str(metadata.get("subgroup") or ""),
            authenticated=metadata.get("authenticated") is not False,
            deprecated=metadata.get("deprecated") is True,
            url_parameters=url_params,
            query_parameters=query_params,
            body_parameters=body_params,
            responses=build_responses(endpoint.get("responses")),
            examples=self.code_examples.build_examples(method, uri, clean_url, clean_query, clean_body),
            openapi_yaml=self.openapi_builder.build(
                endpoint, group_name, method, uri, url_params, query_params, body_params
            ),
            raw=endpoint,
        )
