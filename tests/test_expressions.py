"""Unit tests for expression parsing, evaluation and scoped resolution."""

import pytest

from adaptive.config import EvaluationLimits
from adaptive.template import EvaluationContext, ExpressionEvaluator, parse_expression
from adaptive.template.expressions import is_pure_expression, split_pipes


@pytest.fixture
def evaluator():
    return ExpressionEvaluator()


def make_ctx(data, **limits):
    return EvaluationContext(data, EvaluationLimits(**limits))


class TestParseExpression:
    """Test splitting expressions into a path and a filter chain."""

    def test_path_only(self):
        assert parse_expression("user.name") == ("user.name", [])

    def test_filter_chain(self):
        path, filters = parse_expression("title | upcase | truncate: 3")
        assert path == "title"
        assert filters == [("upcase", None), ("truncate", "3")]

    def test_argument_keeps_text_after_first_colon(self):
        _, filters = parse_expression("ts | date: %H:%M")
        assert filters == [("date", "%H:%M")]

    def test_quoted_argument(self):
        """Quotes are stripped and protect pipes and spaces inside them."""
        _, filters = parse_expression("tags | join: ' | ' | upcase")
        assert filters == [("join", " | "), ("upcase", None)]

        _, filters = parse_expression('tags | join: ", "')
        assert filters == [("join", ", ")]

    def test_apostrophe_in_unquoted_argument(self):
        _, filters = parse_expression("x | default: Don't know | upcase")
        assert filters == [("default", "Don't know"), ("upcase", None)]

    def test_argument_is_not_evaluated(self):
        _, filters = parse_expression("x | default: {{other}}")
        assert filters == [("default", "{{other}}")]

    def test_split_pipes(self):
        assert split_pipes("a|b |  c") == ["a", "b", "c"]


class TestPureExpression:
    """Test detection of single-placeholder strings."""

    def test_pure(self):
        assert is_pure_expression("{{items}}")
        assert is_pure_expression("  {{ items | size }}  ")

    def test_mixed(self):
        assert not is_pure_expression("Hi {{name}}")
        assert not is_pure_expression("{{first}} {{last}}")
        assert not is_pure_expression("{{name}}!")


class TestEvaluationContext:
    """Test scoped dot-path resolution."""

    def test_root_lookup(self):
        ctx = make_ctx({"feed": {"title": "News"}})
        assert ctx.resolve("feed.title") == "News"
        assert ctx.resolve("feed") == {"title": "News"}

    def test_array_index(self):
        ctx = make_ctx({"items": ["a", "b", "c"]})
        assert ctx.resolve("items.0") == "a"
        assert ctx.resolve("items.2") == "c"

    def test_unresolvable_paths_are_none(self):
        ctx = make_ctx({"items": ["a"], "name": "Ann", "user": {"age": 3}})
        assert ctx.resolve("missing") is None
        assert ctx.resolve("items.5") is None
        assert ctx.resolve("items.-1") is None
        assert ctx.resolve("items.first") is None
        assert ctx.resolve("name.0") is None
        assert ctx.resolve("user.age.years") is None
        assert ctx.resolve("") is None

    def test_scope_shadows_root(self):
        ctx = make_ctx({"item": "root", "other": 1})
        with ctx.scope({"item": "inner"}):
            assert ctx.resolve("item") == "inner"
            assert ctx.resolve("other") == 1
        assert ctx.resolve("item") == "root"

    def test_innermost_scope_wins(self):
        ctx = make_ctx({})
        ctx.push_scope({"x": 1, "y": "outer"})
        ctx.push_scope({"x": 2})
        assert ctx.resolve("x") == 2
        assert ctx.resolve("y") == "outer"
        ctx.pop_scope()
        assert ctx.resolve("x") == 1

    def test_scope_binding_to_null_hides_root(self):
        ctx = make_ctx({"item": "root"})
        with ctx.scope({"item": None}):
            assert ctx.resolve("item") is None

    def test_scope_popped_on_error(self):
        ctx = make_ctx({})
        with pytest.raises(RuntimeError):
            with ctx.scope({"x": 1}):
                raise RuntimeError("boom")
        assert ctx.scope_depth == 0
        assert ctx.resolve("x") is None

    def test_iteration_budget(self):
        ctx = make_ctx({}, max_loop_iterations=2)
        assert ctx.consume_iteration()
        assert ctx.consume_iteration()
        assert not ctx.consume_iteration()


class TestExpressionEvaluator:
    """Test template string evaluation."""

    def test_plain_text_is_unchanged(self, evaluator):
        assert evaluator.evaluate_string("no placeholders", make_ctx({})) == "no placeholders"

    def test_pure_expression_keeps_native_type(self, evaluator):
        ctx = make_ctx({"items": [1, 2, 3], "flag": False, "count": 7, "user": {"a": 1}})
        assert evaluator.evaluate_string("{{items}}", ctx) == [1, 2, 3]
        assert evaluator.evaluate_string("{{flag}}", ctx) is False
        assert evaluator.evaluate_string("{{count}}", ctx) == 7
        assert evaluator.evaluate_string(" {{user}} ", ctx) == {"a": 1}

    def test_pure_expression_result_is_detached(self, evaluator):
        data = {"items": [{"n": 1}]}
        result = evaluator.evaluate_string("{{items}}", make_ctx(data))
        result[0]["n"] = 99
        assert data == {"items": [{"n": 1}]}

    def test_interpolation(self, evaluator):
        ctx = make_ctx({"name": "Ann", "count": 3, "ok": True})
        assert evaluator.evaluate_string("Hi {{name}}!", ctx) == "Hi Ann!"
        assert evaluator.evaluate_string("{{count}} items, ok={{ok}}", ctx) == "3 items, ok=true"

    def test_interpolation_of_containers(self, evaluator):
        ctx = make_ctx({"tags": ["a", "b"]})
        assert evaluator.evaluate_string("tags: {{tags}}", ctx) == 'tags: ["a","b"]'

    def test_missing_path(self, evaluator):
        ctx = make_ctx({})
        assert evaluator.evaluate_string("{{a.b}}", ctx) is None
        assert evaluator.evaluate_string("[{{a.b}}]", ctx) == "[]"

    def test_unterminated_placeholder_is_literal(self, evaluator):
        ctx = make_ctx({"name": "Ann"})
        assert evaluator.evaluate_string("{{name}} and {{oops", ctx) == "Ann and {{oops"

    def test_filters_apply_left_to_right(self, evaluator):
        ctx = make_ctx({"x": "hello"})
        assert evaluator.evaluate_string("{{x | upcase | truncate: 3}}", ctx) == "HEL..."
        assert evaluator.evaluate_string("{{x | truncate: 3 | upcase}}", ctx) == "HEL..."
        assert evaluator.evaluate_string("{{x | size | prepend: n=}}", ctx) == "n=5"

    def test_filter_in_interpolation(self, evaluator):
        ctx = make_ctx({"tags": ["a", "b"]})
        assert evaluator.evaluate_string("Tags: {{tags | join: \" & \"}}.", ctx) == "Tags: a & b."

    def test_if_true_default_chain(self, evaluator):
        template = "{{x | if_true: X | default: Y}}"
        assert evaluator.evaluate_string(template, make_ctx({"x": True})) == "X"
        assert evaluator.evaluate_string(template, make_ctx({"x": "yes"})) == "X"
        assert evaluator.evaluate_string(template, make_ctx({"x": False})) == "Y"
        assert evaluator.evaluate_string(template, make_ctx({})) == "Y"
