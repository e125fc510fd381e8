"""Tests for the token budget selector."""

from __future__ import annotations

from changebot.context.selector import TokenBudgetSelector


def test_estimate_tokens_rounds_path_length_up() -> None:
    assert TokenBudgetSelector.estimate_tokens("a.js") == 1
    assert TokenBudgetSelector.estimate_tokens("bb.js") == 2
    assert TokenBudgetSelector.estimate_tokens("x" * 24) == 6
    assert TokenBudgetSelector.estimate_tokens("") == 0


def test_rank_orders_root_then_priority_then_rest() -> None:
    selector = TokenBudgetSelector()
    paths = [
        "lib/util.js",
        "src/app.js",
        "package.json",
        "docs/guide.md",
        "test/app.test.js",
        "README.md",
        "app/models/user.js",
    ]

    assert selector.rank(paths) == [
        "package.json",
        "README.md",
        "src/app.js",
        "docs/guide.md",
        "app/models/user.js",
        "lib/util.js",
        "test/app.test.js",
    ]


def test_select_keeps_everything_that_fits() -> None:
    selector = TokenBudgetSelector(max_tokens=10)
    paths = ["a.js", "bb.js", "ccccccccccccccccccccc.js"]

    # 1 + 2 + 6 = 9 tokens.
    assert selector.select(paths) == paths


def test_select_stops_at_first_overflow_without_skipping_ahead() -> None:
    selector = TokenBudgetSelector(max_tokens=8)
    paths = ["a.js", "bb.js", "ccccccccccccccccccccc.js", "d.js"]

    # The long path would overflow; "d.js" would fit but is never reached.
    assert selector.select(paths) == ["a.js", "bb.js"]


def test_select_budget_is_inclusive() -> None:
    selector = TokenBudgetSelector(max_tokens=3)

    assert selector.select(["a.js", "bb.js", "c.js"]) == ["a.js", "bb.js"]


def test_select_applies_budget_after_ranking() -> None:
    selector = TokenBudgetSelector(max_tokens=3)
    paths = ["deep/nested/file.js", "src/a.js", "x.js"]

    # Root "x.js" (1) then "src/a.js" (2) use the whole budget.
    assert selector.select(paths) == ["x.js", "src/a.js"]


def test_render_joins_selection_with_newlines() -> None:
    selector = TokenBudgetSelector(max_tokens=100)

    assert selector.render(["src/b.js", "a.js"]) == "a.js\nsrc/b.js"


def test_custom_priority_patterns() -> None:
    selector = TokenBudgetSelector(priority_patterns=("lib/*",))

    assert selector.rank(["src/a.js", "lib/b.js"]) == ["lib/b.js", "src/a.js"]
