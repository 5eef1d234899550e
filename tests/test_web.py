"""Tests for the HTTP interface."""
import pytest
from fastapi.testclient import TestClient

from mwlint_server.core.linter import get_rules
from mwlint_server.core.settings import Settings
from mwlint_server.core.texcheck import CachedTexChecker, TexChecker
from mwlint_server.web import USAGE, create_app, json_response


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


# ---------------------------------------------------------------------------
# GET
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("path", ["/", "/mwlint/"])
def test_usage(client, path):
    response = client.get(path)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == USAGE


@pytest.mark.parametrize("path", ["/examples", "/mwlint/examples"])
def test_examples(client, path):
    response = client.get(path)

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    examples = response.json()
    assert examples[0]["rule"] == get_rules()[0].name
    assert set(examples[0]) == {"rule", "text", "bad", "explanation"}


def test_examples_without_rules(settings):
    with TestClient(create_app(settings, rules=[])) as client:
        assert client.get("/examples").json() == []


# ---------------------------------------------------------------------------
# POST
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("path", ["/", "/mwlint/"])
def test_lint(client, path):
    response = client.post(path, content="== A ==\n==== B ====\n")

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    (lint,) = response.json()["Lints"]
    assert lint["rule"] == "heading_hierarchy"


def test_lint_empty_body(client):
    response = client.post("/", content=b"")
    assert response.json() == {"Lints": []}


def test_parse_error_is_a_regular_response(client):
    response = client.post("/", content="{{unterminated")

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.json()["Error"]["ParseError"]["expected"] == ["}}"]


def test_invalid_utf8_is_replaced(client):
    response = client.post("/", content=b"<center>\xff</center>")

    assert response.status_code == 200
    (lint,) = response.json()["Lints"]
    assert lint["rule"] == "deprecated_html"


def test_missing_checker_executable(tmp_path):
    settings = Settings(tex_checker=CachedTexChecker(TexChecker(tmp_path / "missing"), 4))

    with TestClient(create_app(settings)) as client:
        response = client.post("/", content="<math>x</math>")
        plain = client.post("/", content="no formulas")

    assert response.status_code == 200
    assert response.json()["Error"]["TransformationError"]["kind"] == "checker_failure"
    assert plain.json() == {"Lints": []}


def test_formula_check_through_http(checked_settings, fake_checker):
    with TestClient(create_app(checked_settings)) as client:
        client.post("/", content="<math>x^2</math>")
        response = client.post("/mwlint/", content="<math>x^2</math>")

    assert response.json() == {"Lints": []}
    assert fake_checker.calls == ["x^2"]


def test_rule_bug_is_a_server_error(settings):
    class Broken:
        name = "broken"
        examples = ()

        def run(self, tree, settings, context):
            raise RuntimeError("rule bug")

    app = create_app(settings, rules=[Broken()])
    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.post("/", content="text")

    assert response.status_code == 500


def test_unserializable_payload_is_500():
    response = json_response({"value": float("nan")})

    assert response.status_code == 500
    assert response.body == b""


def test_json_response_sets_cors_header():
    response = json_response({"Lints": []})
    assert response.headers["access-control-allow-origin"] == "*"


def test_deeply_nested_templates_are_a_parse_error(client):
    response = client.post("/", content="{{a|" * 100 + "}}" * 100)

    assert response.status_code == 200
    assert response.json()["Error"]["ParseError"]["message"] == "nesting too deep"


def test_moderately_nested_templates_are_linted(client):
    response = client.post("/", content="{{a|x" * 30 + "}}" * 30)

    assert response.status_code == 200
    assert response.json() == {"Lints": []}
