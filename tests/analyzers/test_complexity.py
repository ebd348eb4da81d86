"""Tests for the lexical complexity estimator."""

import pytest
from helpers import make_source, record

from codehealth.analyzers.complexity import (
    ComplexityEstimator,
    complexity_component,
    complexity_score,
)
from codehealth.config import ThresholdConfig
from codehealth.scanning.models import FileRecord


class TestComplexityScore:
    """Test normalization of the raw dimensions."""

    def test_zero(self):
        assert complexity_score(0, 0, 0, 0) == 0.0

    def test_all_caps_reached(self):
        assert complexity_score(1000, 40, 8, 150) == 100.0
        assert complexity_score(5000, 400, 80, 1500) == 100.0

    def test_lines_weight(self):
        assert complexity_score(500, 0, 0, 0) == pytest.approx(20.0)

    @pytest.mark.parametrize("dim", range(4))
    def test_monotonic_in_each_dimension(self, dim):
        base = [200, 10, 2, 30]
        previous = -1.0
        for step in range(0, 50):
            values = list(base)
            values[dim] += step * 5
            score = complexity_score(*values)
            assert score >= previous
            previous = score

    def test_custom_caps(self):
        thresholds = ThresholdConfig(complexity_line_cap=100)
        assert complexity_score(100, 0, 0, 0, thresholds) == pytest.approx(40.0)


class TestComplexityEstimator:
    def test_unreadable_file(self):
        blob = FileRecord(path="x.c", language="c", line_count=0, size_bytes=1, mtime=0.0)
        assert ComplexityEstimator().estimate(blob) is None

    def test_python_functions_and_nesting(self):
        content = make_source(functions=3, body_lines=4, depth=2)
        metric = ComplexityEstimator().estimate(record("m.py", content))

        assert metric.function_count == 3
        assert metric.max_nesting == 3
        # def + 2 if-lines + 4 body + return
        assert metric.max_function_length == 8
        assert metric.line_count == len(content.splitlines())

    def test_brace_language(self):
        content = (
            "package main\n"
            "\n"
            "func a() {\n"
            "\tif x {\n"
            "\t\tfor {\n"
            "\t\t}\n"
            "\t}\n"
            "}\n"
            "\n"
            "func b() int {\n"
            "\treturn 1\n"
            "}\n"
        )
        metric = ComplexityEstimator().estimate(record("main.go", content))
        assert metric.function_count == 2
        assert metric.max_nesting == 3
        assert metric.max_function_length == 6
        assert metric.avg_function_length == 4.5

    def test_ruby_blocks(self):
        content = "class A\n  def run\n    items.each do |i|\n      puts i\n    end\n  end\nend\n"
        metric = ComplexityEstimator().estimate(record("a.rb", content))
        assert metric.function_count == 1
        assert metric.max_nesting == 3
        assert metric.max_function_length == 5

    def test_ruby_modifier_conditionals_open_no_block(self):
        content = (
            "def a(x)\n"
            "  return 1 if x\n"
            "  2\n"
            "end\n"
            "def b\n"
            '  puts "b" unless quiet\n'
            "  3\n"
            "end\n"
        )
        metric = ComplexityEstimator().estimate(record("mod.rb", content))
        assert metric.function_count == 2
        assert metric.max_function_length == 4
        assert metric.max_nesting == 1

    def test_ruby_assigned_conditional_and_loop(self):
        content = (
            "def pick(x)\n"
            "  y = if x\n"
            "    1\n"
            "  else\n"
            "    2\n"
            "  end\n"
            "  while y > 0 do\n"
            "    y -= 1\n"
            "  end\n"
            "  y\n"
            "end\n"
        )
        metric = ComplexityEstimator().estimate(record("pick.rb", content))
        assert metric.function_count == 1
        assert metric.max_function_length == 11
        assert metric.max_nesting == 2

    @pytest.mark.parametrize(
        "path, content",
        [
            ("open.rb", "def a\n  1\n"),
            ("open.go", "func a() {\n\tx()\n"),
        ],
    )
    def test_unterminated_function_bounded_by_file(self, path, content):
        metric = ComplexityEstimator().estimate(record(path, content))
        assert metric.max_function_length == metric.line_count == 2

    def test_javascript_control_flow_is_not_a_function(self):
        content = (
            "function main(items) {\n"
            "  if (items) {\n"
            "    while (items.length) {\n"
            "      items.pop();\n"
            "    }\n"
            "  }\n"
            "  for (let i = 0; i < 3; i++) {\n"
            "    log(i);\n"
            "  }\n"
            "}\n"
        )
        metric = ComplexityEstimator().estimate(record("main.js", content))
        assert metric.function_count == 1
        assert metric.max_function_length == 10
        assert metric.max_nesting == 3

    def test_typescript_control_flow_is_not_a_function(self):
        content = (
            "export class Store {\n"
            "  load(id: string): Item {\n"
            "    if (id) {\n"
            "      return cache(id);\n"
            "    }\n"
            "    switch (id) {\n"
            "      default:\n"
            "        return fetch(id);\n"
            "    }\n"
            "  }\n"
            "}\n"
        )
        metric = ComplexityEstimator().estimate(record("store.ts", content))
        assert metric.function_count == 1
        assert metric.max_function_length == 9

    def test_java_control_flow_is_not_a_method(self):
        content = (
            "class App {\n"
            "    public int run(int x) {\n"
            "        if (x > 0) {\n"
            "            return x;\n"
            "        } else if (x < 0) {\n"
            "            return -x;\n"
            "        }\n"
            "        for (int i = 0; i < x; i++) {\n"
            "            x++;\n"
            "        }\n"
            "        return 0;\n"
            "    }\n"
            "}\n"
        )
        metric = ComplexityEstimator().estimate(record("App.java", content))
        assert metric.function_count == 1
        assert metric.max_function_length == 11

    def test_c_control_flow_is_not_a_function(self):
        content = (
            "int main(void) {\n"
            "    if (argc > 1) {\n"
            "        return 1;\n"
            "    }\n"
            "    while (running) {\n"
            "        step();\n"
            "    }\n"
            "    return 0;\n"
            "}\n"
        )
        metric = ComplexityEstimator().estimate(record("main.c", content))
        assert metric.function_count == 1
        assert metric.max_function_length == 9

    def test_bigger_file_scores_higher(self):
        small = ComplexityEstimator().estimate(record("s.py", make_source(functions=2)))
        big = ComplexityEstimator().estimate(record("b.py", make_source(functions=30, depth=6)))
        assert big.score > small.score

    def test_deterministic(self):
        rec = record("m.py", make_source(functions=12, depth=3))
        assert ComplexityEstimator().estimate(rec) == ComplexityEstimator().estimate(rec)

    def test_unknown_language_uses_brace_nesting(self):
        metric = ComplexityEstimator().estimate(record("x.txt", "{ { } }\n", language="unknown"))
        assert metric.function_count == 0
        assert metric.max_nesting == 2


class TestComplexityComponent:
    def test_empty_is_healthy(self):
        assert complexity_component({}) == 100.0

    def test_inverted_mean(self):
        est = ComplexityEstimator()
        metrics = {
            m.path: m
            for m in (
                est.estimate(record("a.py", make_source(functions=40, depth=8))),
                est.estimate(record("b.py", "")),
            )
        }
        expected = 100.0 - (metrics["a.py"].score + metrics["b.py"].score) / 2
        assert complexity_component(metrics) == pytest.approx(expected)
