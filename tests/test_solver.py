"""
Test script for the constraint engine

Covers:
1. DomainStore narrowing and snapshot/restore
2. AllDistinct and WeightedSumEqual checks and pruning
3. Problem setup validation
4. Search modes, orderings, idempotence and search limits

Usage:
    python tests/test_solver.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.solver import (
    AllDistinct,
    DomainStore,
    DomainWipeout,
    Problem,
    SearchContext,
    SearchLimitExceeded,
    SetupError,
    WeightedSumEqual,
    create_strategy,
    get_strategy_names,
    group_value,
)


def banner(title: str) -> None:
    print("\n" + "=" * 60)
    print(f"TEST: {title}")
    print("=" * 60)


def pigeonhole_problem(**kwargs) -> Problem:
    """
    Three variables over {0, 1}, pairwise different: unsatisfiable.

    Each pair gets its own constraint, so only search can prove it.
    """
    problem = Problem(**kwargs)
    x, y, z = (problem.new_variable(name) for name in "xyz")
    for var in (x, y, z):
        problem.set_domain(var, {0, 1})
    for pair in ((x, y), (y, z), (x, z)):
        problem.add_all_distinct(pair)
    return problem


def permutation_problem(**kwargs) -> Problem:
    """Three variables over {1, 2, 3}, all different: 6 solutions."""
    problem = Problem(**kwargs)
    variables = [problem.new_variable(name) for name in "abc"]
    for var in variables:
        problem.set_domain(var, {1, 2, 3})
    problem.add_all_distinct(variables)
    return problem


def test_domain_store():
    """Test narrowing, wipeout and nested snapshots."""
    banner("DomainStore")

    store = DomainStore()
    store.initialize([0, 1], range(3))
    mark = store.snapshot()

    store.exclude(0, 1)
    store.exclude(0, 1)  # already gone: no-op
    store.restrict(1, 2)
    print(f"  After pruning: {store.values(0)}, {store.values(1)}")
    assert store.values(0) == [0, 2]
    assert store.values(1) == [2]
    assert store.is_fixed(1)
    assert store.contains(0, 2) and not store.contains(0, 1)
    assert 1 in store and 7 not in store

    inner = store.snapshot()
    store.exclude(0, 0)
    assert store.values(0) == [2]
    store.restore(inner)
    assert store.values(0) == [0, 2]

    store.restore(mark)
    print(f"  After restore: {store.values(0)}, {store.values(1)}")
    assert store.values(0) == [0, 1, 2]
    assert store.values(1) == [0, 1, 2]
    assert store.bounds(1) == (0, 2)

    try:
        store.restrict(0, 5)
    except DomainWipeout:
        pass
    else:
        assert False, "restrict to a missing value must fail"

    store.set(0, {4})
    try:
        store.exclude(0, 4)
    except DomainWipeout as e:
        assert e.variable == 0
    else:
        assert False, "excluding the last value must fail"

    try:
        DomainStore().initialize([0], [])
    except SetupError:
        pass
    else:
        assert False, "empty range must be a setup error"

    print("  [PASS] DomainStore tests")


def test_all_distinct():
    """Test AllDistinct consistency and forward checking."""
    banner("AllDistinct")

    constraint = AllDistinct([0, 1, 2])
    assert not constraint.is_consistent({0: 1, 1: 1})
    assert constraint.is_consistent({0: 1, 1: 2})
    assert constraint.is_satisfied({0: 1, 1: 2, 2: 3})
    assert not constraint.is_satisfied({0: 1, 1: 2, 2: 1})

    store = DomainStore()
    store.initialize([0, 1, 2], range(3))
    assignment = {0: 1}
    store.restrict(0, 1)
    constraint.propagate(0, 1, store, assignment)
    print(f"  Peers after assigning 1: {store.values(1)}, {store.values(2)}")
    assert store.values(0) == [1]
    assert store.values(1) == [0, 2]
    assert store.values(2) == [0, 2]

    print("  [PASS] AllDistinct tests")


def test_weighted_sum():
    """Test digit-group arithmetic and the bounds check."""
    banner("WeightedSumEqual")

    a, b, c, d = 0, 1, 2, 3
    # a + b = cd, e.g. 5 + 7 = 12
    constraint = WeightedSumEqual([a], [b], [c, d], base=10)
    print(f"  Coefficients: {constraint.coefficients}")
    assert constraint.coefficients == {a: 1, b: 1, c: -10, d: -1}
    assert constraint.is_satisfied({a: 5, b: 7, c: 1, d: 2})
    assert not constraint.is_satisfied({a: 5, b: 7, c: 1, d: 3})
    assert constraint.is_consistent({a: 5, b: 7})
    assert not constraint.is_consistent({a: 5, b: 7, c: 1, d: 3})

    assert group_value([a, b, c], {a: 1, b: 0, c: 6}, 10) == 106
    assert group_value([a, b, c], {a: 1, b: 0, c: 1}, 2) == 5

    # 9 + b = c with b >= 5 cannot fit in a single digit
    single = WeightedSumEqual([a], [b], [c], base=10)
    store = DomainStore()
    store.initialize([a, b, c], range(10))
    store.set(b, range(5, 10))
    store.restrict(a, 9)
    try:
        single.propagate(a, 9, store, {a: 9})
    except DomainWipeout:
        pass
    else:
        assert False, "bounds check must fail the branch"

    for groups in (([], [b], [c]), ([a], [b], [])):
        try:
            WeightedSumEqual(*groups)
        except SetupError:
            pass
        else:
            assert False, "empty group must be a setup error"

    print("  [PASS] WeightedSumEqual tests")


def test_single_variable():
    """One variable, one value, no constraints: exactly one solution."""
    banner("Single Variable")

    problem = Problem()
    var = problem.new_variable("only")
    problem.set_domain(var, {5})

    result = problem.solve_all()
    print(f"  Solutions: {result.solutions}")
    assert result.count == 1
    assert result.solutions == [{var: 5}]
    assert problem.solve_first() == {var: 5}
    assert result.has_solution
    assert problem.name_assignment(result.first) == {"only": 5}

    print("  [PASS] Single variable tests")


def test_setup_errors():
    """Malformed models fail before search starts."""
    banner("Setup Errors")

    def expect_setup_error(action, label):
        try:
            action()
        except SetupError as e:
            print(f"  {label}: {e}")
        else:
            assert False, f"{label} should raise SetupError"

    expect_setup_error(lambda: Problem().solve_first(), "No variables")
    expect_setup_error(lambda: Problem(base=1), "Base 1")

    problem = Problem()
    var = problem.new_variable()
    expect_setup_error(lambda: problem.set_domain(var, []), "Empty domain")
    expect_setup_error(lambda: problem.add_all_distinct([var, 99]), "Unknown variable")
    expect_setup_error(lambda: problem.add_weighted_sum_equal([var], [], [var]), "Empty group")

    print("  [PASS] Setup error tests")


def test_unsatisfiable_setup():
    """Models that initial pruning refutes have no solution, not an error."""
    banner("Unsatisfiable Setup")

    zero_only = Problem()
    lead = zero_only.new_variable("lead")
    zero_only.set_domain(lead, {0})
    zero_only.forbid_leading_zero(lead)
    assert zero_only.solve_first() is None
    assert zero_only.solve_all().count == 0

    crowded = Problem()
    members = [crowded.new_variable() for _ in range(3)]
    for var in members:
        crowded.set_domain(var, {0, 1})
    crowded.add_all_distinct(members)
    result = crowded.solve_all()
    print(f"  Three members over two values: {result.count} solutions, "
          f"{result.metrics.nodes_explored} nodes")
    assert result.count == 0
    assert result.metrics.nodes_explored == 0

    print("  [PASS] Unsatisfiable setup tests")


def test_first_and_all_agree():
    """solve_first is None exactly when solve_all is empty."""
    banner("First vs All")

    problem = permutation_problem()
    result = problem.solve_all()
    ordered = [tuple(s[v] for v in problem.variables) for s in result.solutions]
    print(f"  Permutations: {ordered}")
    assert result.count == 6
    assert ordered == sorted(ordered)
    assert problem.solve_first() == result.first
    for solution in result:
        assert len(set(solution.values())) == 3

    unsat = pigeonhole_problem()
    assert unsat.solve_first() is None
    assert unsat.solve_all().count == 0

    print("  [PASS] First vs all tests")


def test_idempotence():
    """Solving the same model twice yields the same solutions."""
    banner("Idempotence")

    problem = permutation_problem()
    first = problem.solve_all().solutions
    second = problem.solve_all().solutions
    assert first == second
    print(f"  Both runs found {len(first)} solutions")

    print("  [PASS] Idempotence tests")


def test_orderings():
    """Static and MRV orderings find the same solution set."""
    banner("Orderings")

    names = get_strategy_names()
    print(f"  Registered: {names}")
    assert "static" in names and "mrv" in names

    static = permutation_problem(ordering="static").solve_all()
    mrv = permutation_problem(ordering="mrv").solve_all()
    as_set = lambda result: {tuple(sorted(s.items())) for s in result}
    assert as_set(static) == as_set(mrv)
    assert mrv.metrics.ordering_name == "mrv"

    # Uneven domains: the default lists solutions in creation order
    def uneven(ordering=None):
        problem = Problem(ordering=ordering)
        a, b = problem.new_variable("a"), problem.new_variable("b")
        problem.set_domain(a, {1, 2, 3})
        problem.set_domain(b, {2, 3})
        problem.add_all_distinct([a, b])
        pairs = lambda result: [(s[a], s[b]) for s in result]
        return problem, pairs

    problem, pairs = uneven()
    default_order = pairs(problem.solve_all())
    print(f"  Default order: {default_order}")
    assert default_order == [(1, 2), (1, 3), (2, 3), (3, 2)]
    assert problem.solve_first() == {0: 1, 1: 2}

    problem, pairs = uneven("mrv")
    assert sorted(pairs(problem.solve_all())) == default_order

    try:
        create_strategy("nope")
    except ValueError:
        pass
    else:
        assert False, "unknown ordering must raise ValueError"

    print("  [PASS] Ordering tests")


def test_search_limit():
    """A tiny budget on an unsatisfiable model is not 'no solution'."""
    banner("Search Limit")

    problem = pigeonhole_problem()
    try:
        problem.solve_all(SearchContext(max_steps=1))
    except SearchLimitExceeded as e:
        print(f"  Raised: {e}")
        assert e.reason == "steps"
        assert e.metrics is not None
    else:
        assert False, "step budget must raise SearchLimitExceeded"

    cancelled = SearchContext()
    cancelled.cancel_flag.set()
    try:
        permutation_problem().solve_first(cancelled)
    except SearchLimitExceeded as e:
        assert e.reason == "cancelled"
    else:
        assert False, "cancelled context must raise SearchLimitExceeded"

    # A generous budget behaves like no budget
    assert problem.solve_all(SearchContext(max_steps=1000)).count == 0

    print("  [PASS] Search limit tests")


def test_timeout_and_progress():
    """Wall-clock budget and progress reporting."""
    banner("Timeout and Progress")

    try:
        pigeonhole_problem().solve_all(SearchContext(timeout_sec=0))
    except SearchLimitExceeded as e:
        print(f"  Raised: {e}")
        assert e.reason == "timeout"
    else:
        assert False, "zero timeout must raise SearchLimitExceeded"

    reports = []
    context = SearchContext(
        progress_callback=lambda steps, message: reports.append(steps),
        progress_interval=1,
    )
    result = permutation_problem().solve_all(context)
    print(f"  Progress reports: {reports}")
    assert reports[0] == 1
    assert reports == sorted(set(reports))
    assert reports[-1] == result.metrics.nodes_explored

    print("  [PASS] Timeout and progress tests")


def test_metrics():
    """Metrics are recorded for every search."""
    banner("Metrics")

    problem = permutation_problem()
    result = problem.solve_all()
    metrics = result.metrics
    print(f"  Nodes: {metrics.nodes_explored}, pruned: {metrics.pruned_branches}, "
          f"backtracks: {metrics.backtracks}, time: {metrics.computation_time_ms:.2f}ms")
    assert metrics.nodes_explored > 0
    assert metrics.ordering_name == "static"
    assert problem.last_metrics is metrics

    print("  [PASS] Metrics tests")


def main():
    """Run all tests."""
    print("\n" + "#" * 60)
    print("# ENGINE TESTS")
    print("#" * 60)

    tests = [
        ("DomainStore", test_domain_store),
        ("AllDistinct", test_all_distinct),
        ("WeightedSumEqual", test_weighted_sum),
        ("Single Variable", test_single_variable),
        ("Setup Errors", test_setup_errors),
        ("Unsatisfiable Setup", test_unsatisfiable_setup),
        ("First vs All", test_first_and_all_agree),
        ("Idempotence", test_idempotence),
        ("Orderings", test_orderings),
        ("Search Limit", test_search_limit),
        ("Timeout and Progress", test_timeout_and_progress),
        ("Metrics", test_metrics),
    ]

    results = []
    for name, test in tests:
        try:
            test()
            results.append((name, True))
        except AssertionError as e:
            print(f"  [FAIL] {e}")
            results.append((name, False))

    print("\n" + "=" * 60)
    print("SUMMARY")
    print("=" * 60)

    all_passed = True
    for name, passed in results:
        status = "PASS" if passed else "FAIL"
        print(f"  {name}: [{status}]")
        if not passed:
            all_passed = False

    print()
    if all_passed:
        print("All tests PASSED!")
        return 0
    else:
        print("Some tests FAILED!")
        return 1


if __name__ == "__main__":
    sys.exit(main())
