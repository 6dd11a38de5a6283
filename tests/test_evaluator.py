from __future__ import annotations

import pytest

from stencil.errors import EvaluationError
from stencil.render import Evaluator
from stencil.render.filters import slugify, snake_case


def test_slugify() -> None:
    assert slugify("My Cool Project") == "my-cool-project"
    assert slugify("  Héllo, Wörld!  ") == "hello-world"
    assert snake_case("My Cool Project") == "my_cool_project"


def test_evaluate_renders_with_filters() -> None:
    ev = Evaluator()
    assert ev.evaluate("slug", "{{ name | slugify }}", {"name": "My App"}) == "my-app"


def test_evaluate_keeps_trailing_newline() -> None:
    assert Evaluator().evaluate("f", "x = {{ n }}\n", {"n": 1}) == "x = 1\n"


def test_undefined_reference_is_an_error_tagged_with_name() -> None:
    with pytest.raises(EvaluationError) as exc:
        Evaluator().evaluate("project_slug", "{{ missing }}", {})
    assert exc.value.name == "project_slug"
    assert "missing" in exc.value.message


def test_syntax_error_on_register() -> None:
    ev = Evaluator()
    with pytest.raises(EvaluationError, match="syntax error"):
        ev.register("broken.txt", "{% if %}")


def test_render_unregistered_name() -> None:
    with pytest.raises(EvaluationError):
        Evaluator().render("nope", {})


def test_predicate_treats_undefined_as_false() -> None:
    ev = Evaluator()
    assert ev.predicate("p", "use_docker", {"use_docker": True}) is True
    assert ev.predicate("p", "use_docker and ci != 'none'", {}) is False
    assert ev.predicate("p", "ci == 'github'", {"ci": "github"}) is True


def test_predicate_syntax_error() -> None:
    with pytest.raises(EvaluationError):
        Evaluator().predicate("p", "use_docker and", {})


def test_check_syntax_does_not_render() -> None:
    ev = Evaluator()
    ev.check_syntax("ok", "{{ anything_undefined }}")
    with pytest.raises(EvaluationError):
        ev.check_syntax("bad", "{{ unclosed")
