"""Validates generated OpenAPI fragments before they are published."""

import yaml

from api_docs_builder.parser.base import Group


def validate_openapi_yaml(fragments: dict[str, str]) -> dict[str, str]:
    """Check that each fragment parses as YAML and has the expected top level.

    Returns dict of {endpoint_id: error_message} for fragments with errors.
    """
    errors = {}
    for endpoint_id, content in fragments.items():
        try:
            doc = yaml.safe_load(content)
        except yaml.YAMLError as e:
            errors[endpoint_id] = f"YAMLError: {e}"
            continue
        if not isinstance(doc, dict) or "paths" not in doc or "openapi" not in doc:
            errors[endpoint_id] = "Missing 'openapi' or 'paths' section"
    return errors


def validate_groups(groups: list[Group]) -> dict[str, str]:
    """Run all validations on a built tree."""
    fragments = {
        endpoint.id: endpoint.openapi_yaml
        for group in groups
        for subgroup in group.subgroups
        for endpoint in subgroup.endpoints
    }
    return validate_openapi_yaml(fragments)
