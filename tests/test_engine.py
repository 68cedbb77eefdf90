"""
Testy solvera: kolejność odpalania, przebiegi, sukces, zakleszczenie,
migawki i przewijanie.
"""

import pathlib

import pytest

from production_model import (
    ErrorCode,
    FactTypeError,
    Outcome,
    ReentrantStepError,
    Solver,
    SolverState,
    Step,
    load_model,
    perform,
    production_model,
    register,
)

MODELS = pathlib.Path(__file__).resolve().parent.parent / "models"


def _drain(solver):
    results = []
    while True:
        result = solver.step()
        results.append(result)
        if isinstance(result, Outcome):
            return results


# =============================================================================
# SCENARIUSZE
# =============================================================================

class TestChaining:

    def test_two_rule_chain_succeeds(self):
        facts = register("A", "B", "C")
        r1 = perform(facts("B")).when(facts("A"))
        r2 = perform(facts("C")).when(facts("B"))
        solver = production_model([facts("A")], [r1, r2])

        results = _drain(solver)

        assert results[:-1] == [
            Step(0, True, (facts("B"),)),
            Step(1, True, (facts("C"),)),
        ]
        assert results[-1] == Outcome(succeeded=True)
        assert results[-1]
        assert solver.state is SolverState.SUCCEEDED
        assert solver.memory.names() == ["A", "B", "C"]
        assert solver.fired == (0, 1)
        assert solver.pending == ()

    def test_rules_fire_in_later_pass_when_order_is_reversed(self):
        facts = register("A", "B", "C")
        r1 = perform(facts("C")).when(facts("B"))
        r2 = perform(facts("B")).when(facts("A"))
        solver = Solver(facts("A"), [r1, r2])

        first_pass = solver.iterate()
        assert first_pass == [Step(0, False), Step(1, True, (facts("B"),))]
        assert solver.iteration == 1

        second_pass = solver.iterate()
        assert second_pass == [Step(0, True, (facts("C"),))]
        assert solver.iteration == 2
        assert solver.run_to_completion()

    def test_unreachable_condition_fails_and_names_rule(self):
        facts = register("A", "X", "Y")
        solver = Solver([facts("A")], [perform(facts("Y")).when(facts("X"))])

        assert solver.step() == Step(0, False)
        assert solver.state is SolverState.FAILED

        outcome = solver.run_to_completion()
        assert not outcome
        assert outcome.unsatisfied == (0,)
        assert solver.memory.names() == ["A"]

    def test_deadlock_after_partial_progress(self):
        facts = register("A", "B", "X", "Y")
        rules = [
            perform(facts("B")).when(facts("A")),
            perform(facts("Y")).when(facts("X")),
        ]
        solver = Solver([facts("A")], rules)
        outcome = solver.run_to_completion()
        assert outcome == Outcome(succeeded=False, unsatisfied=(1,))
        assert solver.iteration == 2

    def test_no_rules_succeeds_immediately(self):
        solver = Solver(register("A")("A"), [])
        assert solver.step() == Outcome(succeeded=True)
        assert solver.iteration == 0

    def test_terminal_step_is_idempotent(self):
        facts = register("A", "B")
        solver = Solver([facts("A")], [perform(facts("B")).when(facts("A"))])
        outcome = solver.run_to_completion()
        assert solver.step() is outcome
        assert solver.iterate() == [outcome]

    def test_concert_model_fires_in_three_passes(self):
        solver = load_model(MODELS / "koncert.json").solver()

        for expected in (1, 2, 3):
            solver.iterate()
            assert solver.iteration == expected

        assert solver.run_to_completion()
        assert solver.fired == (0, 2, 4, 1, 3, 6, 5)
        assert solver.memory.names() == [
            "iść na koncert",
            "zaprosić przyjaciółkę",
            "kupić bilety",
            "zwolnić wieczór",
            "przygotować strój",
            "dobrać buty",
            "zrobić makijaż",
            "nastrój świetny",
        ]


# =============================================================================
# WŁASNOŚCI
# =============================================================================

class TestProperties:

    def test_each_rule_fires_at_most_once(self):
        calls = []
        facts = register("A", "B")
        facts("B").with_effect(lambda name, names: calls.append(name))
        rules = [perform(facts("B")).when(facts("A")), perform(facts("A")).when(facts("B"))]
        solver = Solver([facts("A")], rules)
        solver.run_to_completion()
        solver.step()
        assert calls == ["B"]

    def test_repeat_count_applies_when_fired(self):
        calls = []
        facts = register("A", "B")
        facts("B").with_effect(lambda name, names: calls.append(name)).with_repeat(4)
        Solver([facts("A")], [perform(facts("B")).when(facts("A"))]).run_to_completion()
        assert calls == ["B"] * 4

    def test_acyclic_graph_reaches_fixpoint(self):
        names = [f"F{i}" for i in range(10)]
        facts = register(names)
        # reguły w odwrotnej kolejności łańcucha — każdy przebieg odpala jedną
        rules = [perform(facts(names[i + 1])).when(facts(names[i])) for i in reversed(range(9))]
        solver = Solver([facts("F0")], rules)
        assert solver.run_to_completion()
        assert sorted(solver.fired) == list(range(9))
        assert solver.memory.names() == names

    def test_reentrant_step_is_rejected(self):
        facts = register("A", "B")
        holder = {}
        facts("B").with_effect(lambda name, names: holder["solver"].step())
        solver = Solver([facts("A")], [perform(facts("B")).when(facts("A"))])
        holder["solver"] = solver
        with pytest.raises(ReentrantStepError) as exc:
            solver.step()
        assert exc.value.code == ErrorCode.REENTRANT_STEP

    def test_failing_effect_does_not_refire_rule(self):
        calls = []
        failures = iter([RuntimeError("efekt C")])
        facts = register("A", "B", "C")

        def effect_c(name, names):
            calls.append(name)
            error = next(failures, None)
            if error is not None:
                raise error

        facts("B").with_effect(lambda name, names: calls.append(name))
        facts("C").with_effect(effect_c)
        solver = Solver([facts("A")], [perform(facts("B"), facts("C")).when(facts("A"))])

        with pytest.raises(RuntimeError):
            solver.step()

        assert solver.fired == (0,)
        assert solver.pending == ()
        assert solver.memory.names() == ["A", "B", "C"]
        assert len(solver.history) == 1

        assert solver.step() == Outcome(succeeded=True)
        assert solver.run_to_completion()
        assert calls == ["B", "C"]

    def test_restore_from_effect_is_rejected(self):
        facts = register("A", "B", "C")
        holder = {}
        facts("C").with_effect(lambda name, names: holder["solver"].restore(holder["solver"].history[0]))
        rules = [perform(facts("B")).when(facts("A")), perform(facts("C")).when(facts("B"))]
        solver = holder["solver"] = Solver([facts("A")], rules)
        solver.step()

        with pytest.raises(ReentrantStepError):
            solver.step()
        assert solver.fired == (0, 1)
        assert solver.memory.names() == ["A", "B", "C"]

    def test_rules_must_be_rules(self):
        with pytest.raises(FactTypeError) as exc:
            Solver([], ["nie reguła"])
        assert exc.value.code == ErrorCode.NOT_A_RULE

    def test_inputs_must_be_facts(self):
        with pytest.raises(FactTypeError):
            Solver(["A"], [])

    def test_current_rule_tracks_cursor(self):
        facts = register("A", "B", "X")
        rules = [perform(facts("B")).when(facts("X")), perform(facts("B")).when(facts("A"))]
        solver = Solver([facts("A")], rules)
        assert solver.current_rule == 0
        solver.step()
        assert solver.current_rule == 1


# =============================================================================
# MIGAWKI
# =============================================================================

class TestSnapshots:

    def test_snapshot_taken_after_each_firing(self):
        facts = register("A", "B", "C", "X")
        rules = [
            perform(facts("B")).when(facts("A")),
            perform(facts("C")).when(facts("X")),
        ]
        solver = Solver([facts("A")], rules)
        solver.run_to_completion()

        assert len(solver.history) == 1
        snap = solver.history[0]
        assert snap.memory == (facts("A"), facts("B"))
        assert snap.pending == (1,)
        assert snap.fired == (0,)

    def test_snapshots_are_not_mutated_by_later_steps(self):
        facts = register("A", "B", "C")
        rules = [perform(facts("B")).when(facts("A")), perform(facts("C")).when(facts("B"))]
        solver = Solver([facts("A")], rules)
        solver.step()
        first = solver.history[0]
        solver.run_to_completion()
        assert first.memory == (facts("A"), facts("B"))
        assert len(solver.history) == 2

    def test_restore_rewinds_state(self):
        facts = register("A", "B", "C")
        rules = [perform(facts("B")).when(facts("A")), perform(facts("C")).when(facts("B"))]
        solver = Solver([facts("A")], rules)
        solver.run_to_completion()

        solver.restore(solver.history[0])
        assert solver.state is SolverState.RUNNING
        assert solver.outcome is None
        assert solver.memory.names() == ["A", "B"]
        assert solver.pending == (1,)
        assert len(solver.history) == 1

        assert solver.run_to_completion()
        assert solver.memory.names() == ["A", "B", "C"]

    def test_restore_rejects_foreign_snapshot(self):
        facts = register("A", "B")
        rules = [perform(facts("B")).when(facts("A"))]
        other = Solver([facts("A")], rules)
        other.run_to_completion()
        solver = Solver([facts("A")], rules)
        with pytest.raises(ValueError):
            solver.restore(other.history[0])
