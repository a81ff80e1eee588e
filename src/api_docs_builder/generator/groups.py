"""Group builder — merges scanner files into the ordered group/subgroup/endpoint tree."""

import logging
from pathlib import Path

from api_docs_builder.config import ApiDocsConfig
from api_docs_builder.errors import DescriptionConflictError
from api_docs_builder.generator.examples import CodeExamples
from api_docs_builder.generator.openapi import OpenApiBuilder
from api_docs_builder.generator.ordering import sort_by_order, sort_endpoints, sort_subgroups
from api_docs_builder.parser.base import Group, Subgroup
from api_docs_builder.parser.normalize import EndpointNormalizer
from api_docs_builder.slug import slugify

logger = logging.getLogger(__name__)


def merge_description(existing: str, incoming: str) -> str | None:
    """Return the description to keep, or None when the two conflict."""
    if incoming and existing and incoming != existing:
        return None
    return existing or incoming


class GroupBuilder:
    """Builds the documentation tree for one build pass.

    Each builder owns its own group maps and template cache, so a fresh
    instance must be used for every build.
    """

    def __init__(self, normalizer: EndpointNormalizer, subgroup_orders: dict[str, list[str]] | None = None):
        self.normalizer = normalizer
        self.subgroup_orders = subgroup_orders or {}
        self._groups: dict[str, Group] = {}
        self._subgroups: dict[str, dict[str, Subgroup]] = {}

    def build(self, endpoints_data: dict) -> list[Group]:
        """Merge every file into groups, then sort endpoints and subgroups.

        Groups are returned in file-key order of their first appearance.
        """
        for file_key, file_data in sorted(endpoints_data.items(), key=lambda item: str(item[0])):
            if not isinstance(file_data, dict) or file_data.get("endpoints") is None or not file_data.get("name"):
                logger.debug("Skipping %s: not an endpoint group", file_key)
                continue
            self._add_file(file_data)

        for group_name, group in self._groups.items():
            subgroups = self._subgroups[group_name]
            for subgroup in subgroups.values():
                subgroup.endpoints = sort_endpoints(subgroup.endpoints)
            group.subgroups = sort_subgroups(subgroups.values(), self.subgroup_orders.get(group_name) or [])

        return list(self._groups.values())

    def _add_file(self, file_data: dict) -> None:
        group_name = str(file_data["name"])
        group = self._resolve_group(group_name, str(file_data.get("description") or ""))

        for endpoint in file_data["endpoints"] or []:
            if not isinstance(endpoint, dict):
                continue
            metadata = endpoint.get("metadata")
            if not isinstance(metadata, dict):
                metadata = {}
            subgroup = self._resolve_subgroup(
                group,
                str(metadata.get("subgroup") or ""),
                str(metadata.get("subgroupDescription") or ""),
            )
            subgroup.endpoints.append(self.normalizer.normalize(endpoint, group_name))

    def _resolve_group(self, name: str, description: str) -> Group:
        group = self._groups.get(name)
        if group is None:
            group = Group(name=name, slug=slugify(name), description=description)
            self._groups[name] = group
            self._subgroups[name] = {}
            return group

        merged = merge_description(group.description, description)
        if merged is None:
            raise DescriptionConflictError(name, group.description, description)
        group.description = merged
        return group

    def _resolve_subgroup(self, group: Group, name: str, description: str) -> Subgroup:
        subgroups = self._subgroups[group.name]
        subgroup = subgroups.get(name)
        if subgroup is None:
            subgroup = Subgroup(name=name, slug=slugify(name), description=description)
            subgroups[name] = subgroup
            return subgroup

        merged = merge_description(subgroup.description, description)
        if merged is None:
            raise DescriptionConflictError(group.name, subgroup.description, description, subgroup=name)
        subgroup.description = merged
        return subgroup


def build_api_groups(endpoints_data: dict, config: ApiDocsConfig | None = None, templates_dir: Path | None = None) -> list[Group]:
    """Run a complete build: normalize, group and order all endpoints."""
    config = config or ApiDocsConfig()

    code_examples = CodeExamples(templates_dir=templates_dir, base_url=config.base_url)
    normalizer = EndpointNormalizer(code_examples, OpenApiBuilder())
    builder = GroupBuilder(normalizer, subgroup_orders=config.subgroups)

    groups = builder.build(endpoints_data)
    return sort_by_order(groups, config.order, key=lambda group: group.name)
