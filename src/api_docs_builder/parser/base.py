"""Normalized data models for API documentation pages.

Raw endpoint records from the scanner are converted into these models
by :mod:`api_docs_builder.parser.normalize`, then grouped and sorted by
:mod:`api_docs_builder.generator.groups`.
"""

from typing import Any

from pydantic import BaseModel


class Parameter(BaseModel):
    """A single URL, query, or body parameter."""

    name: str
    type: str = "string"
    required: bool = False
    description: str = ""
    example: Any = None
    enum_values: list = []
    nullable: bool = False
    deprecated: bool = False


class Response(BaseModel):
    """A documented example response."""

    status: Any = None
    description: str = ""
    slug: str = ""
    content: str = ""  # pretty-printed JSON when parseable


class Endpoint(BaseModel):
    """One documented HTTP operation, ready for rendering."""

    id: str
    title: str
    description: str = ""
    method: str  # canonical, first of methods
    methods: list[str]
    uri: str  # api/v1/vector/sites/{site}
    uri_display: str  # /api/v1/vector/sites/{site}
    group: str
    subgroup: str = ""
    authenticated: bool = True
    deprecated: bool = False
    url_parameters: list[Parameter] = []
    query_parameters: list[Parameter] = []
    body_parameters: list[Parameter] = []
    responses: list[Response] = []
    examples: dict[str, str] = {}  # {language: code}
    openapi_yaml: str = ""
    raw: dict = {}


class Subgroup(BaseModel):
    """Named section inside a group. The empty name means ungrouped."""

    name: str
    slug: str
    description: str = ""
    endpoints: list[Endpoint] = []


class Group(BaseModel):
    """Top-level documentation category such as ``Sites``."""

    name: str
    slug: str
    description: str = ""
    subgroups: list[Subgroup] = []
