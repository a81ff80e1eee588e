from api_docs_builder.generator.groups import build_api_groups
from api_docs_builder.generator.validator import validate_groups, validate_openapi_yaml


class TestValidateOpenApiYaml:
    def test_valid_fragment(self):
        errors = validate_openapi_yaml({"sites-get-sites": "openapi: 3.1.0\npaths:\n  /sites: {}\n"})
        assert errors == {}

    def test_invalid_yaml(self):
        errors = validate_openapi_yaml({"bad": "openapi: 3.1.0\npaths: [invalid\n"})
        assert "bad" in errors
        assert "YAMLError" in errors["bad"]

    def test_missing_sections(self):
        errors = validate_openapi_yaml({"empty": "title: nothing\n"})
        assert errors == {"empty": "Missing 'openapi' or 'paths' section"}


class TestValidateGroups:
    def test_built_tree_is_valid(self):
        data = {
            "sites": {
                "name": "Sites",
                "endpoints": [{
                    "httpMethods": ["POST"],
                    "uri": "api/v1/vector/sites",
                    "metadata": {"title": "Create: site", "description": "Uses {braces} & [brackets]"},
                    "bodyParameters": {"name": {"required": True, "description": "#1 choice"}},
                }],
            },
        }
        assert validate_groups(build_api_groups(data)) == {}
