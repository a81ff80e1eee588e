import logging
from unittest.mock import patch

import pytest

from api_docs_builder.generator.examples import (
    TEMPLATE_MAP,
    CodeExamples,
    TemplateContext,
    build_sdk_method_chain,
    camelize,
    js_object,
    php_array,
    quote_value,
)


@pytest.fixture
def gen():
    return CodeExamples()


class TestCurlExample:
    def test_post_with_body(self, gen):
        curl = gen.build_curl_example("POST", "api/v1/vector/sites", {}, {}, {"name": "example"})
        assert curl == (
            "curl -X POST \\\n"
            '  "https://api.builtfast.com/api/v1/vector/sites" \\\n'
            '  -H "Authorization: Bearer $API_KEY" \\\n'
            '  -H "Content-Type: application/json" \\\n'
            '  -H "Accept: application/json" \\\n'
            "  -d '{\"name\":\"example\"}'"
        )

    def test_get_with_url_and_query_params(self, gen):
        curl = gen.build_curl_example(
            "GET", "api/v1/vector/sites/{site}/logs", {"site": "abc123"}, {"limit": 10, "q": "a b&c"}, {},
        )
        assert '"https://api.builtfast.com/api/v1/vector/sites/abc123/logs?limit=10&q=a+b%26c"' in curl
        assert "Content-Type" not in curl
        assert curl.endswith('-H "Accept: application/json"')

    def test_mutating_without_body(self, gen):
        curl = gen.build_curl_example("DELETE", "webhooks/{webhook}", {"webhook": 5}, {}, {})
        assert "Content-Type" not in curl
        curl = gen.build_curl_example("PUT", "webhooks/{webhook}", {"webhook": 5}, {}, {})
        assert curl.endswith('-H "Content-Type: application/json" \\\n  -H "Accept: application/json"')
        assert "-d" not in curl

    def test_leading_slash_not_doubled(self, gen):
        curl = gen.build_curl_example("GET", "/health", {}, {}, {})
        assert '"https://api.builtfast.com/health"' in curl

    def test_custom_base_url(self):
        curl = CodeExamples(base_url="http://localhost:8000/").build_curl_example("GET", "events", {}, {}, {})
        assert '"http://localhost:8000/events"' in curl

    def test_single_quote_in_body_is_shell_escaped(self, gen):
        curl = gen.build_curl_example("POST", "sites", {}, {}, {"name": "it's"})
        assert curl.endswith("""-d '{"name":"it'\\''s"}'""")


class TestSdkFallback:
    def test_single_url_param_no_literal(self, gen):
        php = gen.build_php_example("GET", "api/v1/vector/widgets/{widget}/parts", {"widget": "w1"}, {}, {})
        assert php == "$response = $vectorPro\n    ->widgets->parts\n    ->get('w1');"
        js = gen.build_js_example("GET", "api/v1/vector/widgets/{widget}/parts", {"widget": "w1"}, {}, {})
        assert js == "const response = await vectorPro\n    .widgets.parts\n    .get('w1');"

    def test_no_args(self, gen):
        js = gen.build_js_example("GET", "api/v1/vector/widgets", {}, {}, {})
        assert js.endswith("    .get();")

    def test_body_literal_for_post(self, gen):
        php = gen.build_php_example(
            "POST", "api/v1/vector/widgets", {}, {"ignored": 1},
            {"name": "x", "count": 2, "tags": ["a", "b"], "meta": {"k": True}},
        )
        assert php == (
            "$response = $vectorPro\n"
            "    ->widgets\n"
            "    ->post([\n"
            "            'name' => 'x',\n"
            "            'count' => 2,\n"
            "            'tags' => ['a', 'b'],\n"
            "            'meta' => [\n"
            "                'k' => true,\n"
            "            ],\n"
            "        ]);"
        )

    def test_query_literal_for_get(self, gen):
        js = gen.build_js_example("GET", "api/v1/vector/widgets", {}, {"per_page": 5}, {"ignored": 1})
        assert js == (
            "const response = await vectorPro\n"
            "    .widgets\n"
            "    .get({\n"
            "            per_page: 5,\n"
            "        });"
        )

    def test_registered_without_template_file_falls_back(self, gen):
        assert ("sites/{site}/clone", "POST") in TEMPLATE_MAP
        php = gen.build_php_example("POST", "api/v1/vector/sites/{site}/clone", {"site": "abc"}, {}, {})
        assert php == "$response = $vectorPro\n    ->sites->clone\n    ->post('abc');"


class TestSdkTemplates:
    def test_sites_get_template(self, gen):
        php = gen.build_php_example("GET", "api/v1/vector/sites/{site}", {"site": "abc123"}, {}, {})
        assert php == "$response = $vectorPro->sites->get('abc123');"
        js = gen.build_js_example("GET", "api/v1/vector/sites/{site}", {"site": "abc123"}, {}, {})
        assert js == "const response = await vectorPro.sites.get('abc123');"

    def test_sites_list_with_query(self, gen):
        php = gen.build_php_example("GET", "api/v1/vector/sites", {}, {"per_page": 25}, {})
        assert php == "$response = $vectorPro->sites->list([\n    'per_page' => 25,\n]);"
        js = gen.build_js_example("GET", "api/v1/vector/sites", {}, {}, {})
        assert js == "const response = await vectorPro.sites.list();"

    def test_two_url_params(self, gen):
        js = gen.build_js_example(
            "DELETE", "api/v1/vector/sites/{site}/waf/rate-limits/{rule}", {"site": "abc", "rule": 7}, {}, {},
        )
        assert js == "const response = await vectorPro.sites.waf.deleteRateLimit('abc', '7');"

    def test_method_must_match(self, gen):
        # PATCH sites/{site} is not registered
        php = gen.build_php_example("PATCH", "api/v1/vector/sites/{site}", {"site": "abc"}, {}, {})
        assert php.startswith("$response = $vectorPro\n")

    def test_template_cache(self, tmp_path):
        (tmp_path / "php").mkdir()
        (tmp_path / "php" / "sites.list.php.j2").write_text("$vectorPro->sites->list();\n")
        gen = CodeExamples(templates_dir=tmp_path)

        with patch.object(gen._env, "get_template", wraps=gen._env.get_template) as get_template:
            for _ in range(3):
                examples = gen.build_examples("GET", "api/v1/vector/sites", {}, {}, {})
            assert get_template.call_count == 2

        assert examples["php"] == "$vectorPro->sites->list();"
        assert examples["js"].startswith("const response = await vectorPro\n")
        assert gen._template_cache[("js", "sites.list")] is None

    def test_render_error_falls_back(self, tmp_path):
        (tmp_path / "js").mkdir()
        (tmp_path / "js" / "events.list.js.j2").write_text("{{ no_such_helper() }}")
        gen = CodeExamples(templates_dir=tmp_path)
        js = gen.build_js_example("GET", "api/v1/vector/events", {}, {}, {})
        assert js == "const response = await vectorPro\n    .events\n    .get();"

    def test_syntax_error_falls_back(self, tmp_path):
        (tmp_path / "js").mkdir()
        (tmp_path / "js" / "events.list.js.j2").write_text("{% if %}broken{% endif %}")
        gen = CodeExamples(templates_dir=tmp_path)
        js = gen.build_js_example("GET", "api/v1/vector/events", {}, {}, {})
        assert js == "const response = await vectorPro\n    .events\n    .get();"
        assert gen._template_cache[("js", "events.list")] is None

    def test_syntax_error_logs_warning(self, tmp_path, caplog):
        (tmp_path / "js").mkdir()
        (tmp_path / "js" / "events.list.js.j2").write_text("{% if %}broken{% endif %}")
        gen = CodeExamples(templates_dir=tmp_path)
        with caplog.at_level(logging.WARNING, logger="api_docs_builder.generator.examples"):
            gen.build_js_example("GET", "api/v1/vector/events", {}, {}, {})
        assert "failed to compile" in caplog.text


class TestFormatting:
    def test_quote_value(self):
        assert quote_value("abc") == "'abc'"
        assert quote_value(5) == "5"
        assert quote_value(1.5) == "1.5"
        assert quote_value(True) == "true"
        assert quote_value(None) == "''"
        assert quote_value("it's") == "'it\\'s'"

    def test_empty_literals(self):
        assert php_array({}) == "[]"
        assert php_array(None) == "[]"
        assert js_object({}) == "{}"

    def test_js_object_quotes_non_identifier_keys(self):
        assert js_object({"x-y": None, "ok_1": False}) == "{\n    'x-y': null,\n    ok_1: false,\n}"

    def test_php_array_nested_list(self):
        assert php_array({"ids": [1, "two", None]}) == "[\n    'ids' => [1, 'two', null],\n]"

    def test_camelize(self):
        assert camelize("rate-limits") == "rateLimits"
        assert camelize("blocked_ips") == "blockedIps"
        assert camelize("sites") == "sites"

    def test_method_chain_skips_params(self):
        assert build_sdk_method_chain("api/v1/vector/sites/{site}/waf/rate-limits/{rule}") == ["sites", "waf", "rateLimits"]
        assert build_sdk_method_chain("{tenant}/events") == ["events"]


class TestTemplateContext:
    def test_helpers(self):
        ctx = TemplateContext("POST", "sites", {"site": "a", "env": "b"}, {}, {"name": "x"})
        assert ctx.first_url_param() == "a"
        assert ctx.has_body_params() is True
        assert ctx.has_query_params() is False
        assert ctx.params_if_any({}) == ""
        assert ctx.params_if_any({"a": 1}) == "[\n    'a' => 1,\n]"
        assert ctx.quote(3) == "'3'"

    def test_first_url_param_empty(self):
        assert TemplateContext("GET", "sites", {}, {}, {}).first_url_param() is None
