import pytest

from core import Notation, Task, ErrorKind, BracketIssue, tokenize, tokenize_characters
from simulation import (
    StackSimulation, SimulationStatus, EventKind, create_simulation, advance, peek_next, reset
)
from conftest import values


def simulation(text, source, target):
    return StackSimulation(tokenize(text, source), source, target)


def kinds(events):
    return [e.kind for e in events]


# ================== conversions ==================

def test_prefix_to_postfix_steps():
    sim = simulation("+AB", Notation.PREFIX, Notation.POSTFIX)
    assert sim.status == SimulationStatus.READY

    events = sim.run()
    assert kinds(events) == [
        EventKind.PUSHED, EventKind.PUSHED, EventKind.POPPED_PAIR, EventKind.COMBINED, EventKind.DONE
    ]
    assert [e.token.value for e in events[:2]] == ["B", "A"]
    assert events[2].payload == {'operator': '+', 'operand1': 'A', 'operand2': 'B'}
    assert events[3].stack == ["AB+"]
    assert sim.status == SimulationStatus.DONE
    assert sim.result == "AB+"


def test_prefix_to_infix():
    sim = simulation("+AB", Notation.PREFIX, Notation.INFIX)
    sim.run()
    assert sim.result == "(A+B)"


def test_postfix_to_prefix():
    sim = simulation("AB+CD-*", Notation.POSTFIX, Notation.PREFIX)
    sim.run()
    assert sim.result == "*+AB-CD"
    assert values(sim.result_tokens) == ["*", "+", "A", "B", "-", "C", "D"]


def test_postfix_to_infix():
    sim = simulation("AB+CD-*", Notation.POSTFIX, Notation.INFIX)
    sim.run()
    assert sim.result == "((A+B)*(C-D))"


def test_spaced_operands_are_rendered_with_spaces():
    sim = simulation("ab c +", Notation.POSTFIX, Notation.INFIX)
    sim.run()
    assert sim.result == "(ab + c)"


def test_operator_step_is_split_into_pop_and_combine():
    sim = simulation("AB+", Notation.POSTFIX, Notation.PREFIX)
    sim.advance()
    sim.advance()
    popped = sim.advance()
    assert popped.kind == EventKind.POPPED_PAIR
    assert sim.status == SimulationStatus.COMBINING
    assert popped.stack == []
    assert popped.messages[1:] == ["Popping first operand: B", "Popping second operand: A"]

    combined = sim.advance()
    assert combined.kind == EventKind.COMBINED
    assert sim.status == SimulationStatus.STEPPING
    assert combined.payload['result'] == "+AB"
    assert "Pushed '+AB' onto stack" in combined.messages


def test_not_enough_operands_fails():
    sim = simulation("A+", Notation.POSTFIX, Notation.PREFIX)
    events = sim.run()
    assert events[-1].kind == EventKind.FAILED
    assert events[-1].error.kind == ErrorKind.INSUFFICIENT_OPERANDS
    assert sim.status == SimulationStatus.FAILED


def test_leftover_operands_fail_at_the_end():
    sim = simulation("AB", Notation.POSTFIX, Notation.PREFIX)
    events = sim.run()
    assert kinds(events) == [EventKind.PUSHED, EventKind.PUSHED, EventKind.FAILED]
    assert sim.error.kind == ErrorKind.UNEXPECTED_FINAL_STACK_SIZE
    assert sim.stack == ["A", "B"]


def test_terminal_state_is_sticky():
    sim = simulation("AB+", Notation.POSTFIX, Notation.INFIX)
    done = sim.run()[-1]
    assert sim.advance() is done
    assert sim.advance() is done
    assert sim.result == "(A+B)"


def test_peek_next_and_remaining():
    sim = simulation("AB+", Notation.POSTFIX, Notation.PREFIX)
    nxt = sim.peek_next()
    assert nxt.token.value == "A"
    assert not nxt.will_process_as_operator
    assert nxt.description == "Will push 'A' to stack"

    sim.advance()
    sim.advance()
    assert values(sim.remaining()) == ["+"]
    assert sim.peek_next().will_process_as_operator
    sim.advance()
    # still combining the same operator
    assert sim.peek_next().token.value == "+"
    sim.run()
    assert sim.peek_next() is None
    assert sim.remaining() == []


def test_prefix_remaining_is_in_reading_order():
    sim = simulation("+AB", Notation.PREFIX, Notation.POSTFIX)
    assert values(sim.remaining()) == ["+", "A", "B"]
    sim.advance()
    assert values(sim.remaining()) == ["+", "A"]


def test_reset_returns_to_idle():
    sim = simulation("AB+", Notation.POSTFIX, Notation.PREFIX)
    sim.advance()
    sim.reset()
    assert sim.status == SimulationStatus.IDLE
    assert sim.stack == []
    assert sim.peek_next() is None

    event = sim.advance()
    assert event.kind == EventKind.FAILED
    assert event.error.kind == ErrorKind.EMPTY_INPUT
    assert sim.status == SimulationStatus.IDLE


def test_simulation_rejects_infix_source():
    with pytest.raises(ValueError):
        StackSimulation(tokenize("A+B", Notation.INFIX), Notation.INFIX, Notation.POSTFIX)


# ================== string reversal ==================

def test_string_reversal():
    sim = StackSimulation(tokenize_characters("abc"), task=Task.REVERSE)
    events = sim.run()
    assert kinds(events) == [EventKind.PUSHED] * 3 + [EventKind.POPPED] * 3 + [EventKind.DONE]
    assert [e.payload['reversed'] for e in events[3:6]] == ["c", "cb", "cba"]
    assert sim.result == "cba"


# ================== bracket balancing ==================

def test_balanced_brackets():
    sim = StackSimulation(tokenize_characters("({[]})"), task=Task.BALANCE)
    events = sim.run()
    assert kinds(events) == [EventKind.PUSHED] * 3 + [EventKind.MATCHED] * 3 + [EventKind.DONE]
    assert events[-1].payload['balanced'] is True
    assert sim.result == "balanced"


def test_mismatched_brackets():
    sim = StackSimulation(tokenize_characters("([)]"), task=Task.BALANCE)
    events = sim.run()
    assert kinds(events) == [EventKind.PUSHED, EventKind.PUSHED, EventKind.FAILED]
    assert events[-1].error.kind == ErrorKind.UNBALANCED_BRACKETS
    assert events[-1].error.issue == BracketIssue.MISMATCHED
    assert events[-1].payload['label'] == "unbalanced"


def test_extra_closing_bracket():
    sim = StackSimulation(tokenize_characters("())"), task=Task.BALANCE)
    events = sim.run()
    assert kinds(events) == [EventKind.PUSHED, EventKind.MATCHED, EventKind.FAILED]
    assert events[-1].error.issue == BracketIssue.EXTRA_CLOSER


def test_missing_closing_bracket_is_unbalanced():
    sim = StackSimulation(tokenize_characters("((a)"), task=Task.BALANCE)
    events = sim.run()
    assert kinds(events) == [
        EventKind.PUSHED, EventKind.PUSHED, EventKind.SKIPPED, EventKind.MATCHED, EventKind.FAILED
    ]
    assert events[-1].error.kind == ErrorKind.UNEXPECTED_FINAL_STACK_SIZE
    assert sim.result == "unbalanced"


# ================== api handles ==================

def test_create_simulation_from_infix_runs_converted_tokens():
    sim = create_simulation(tokenize("A + B * C", Notation.INFIX), Notation.INFIX, Notation.INFIX)
    assert sim.source == Notation.POSTFIX
    sim.run()
    assert sim.result == "(A+(B*C))"


def test_create_simulation_infix_to_prefix_reads_right_to_left():
    sim = create_simulation(tokenize("A * B + C / D", Notation.INFIX), Notation.INFIX, Notation.PREFIX)
    assert sim.source == Notation.PREFIX
    assert values(sim.remaining()) == ["+", "*", "A", "B", "/", "C", "D"]
    assert sim.peek_next().token.value == "D"
    sim.run()
    assert sim.result == "+*AB/CD"


def test_create_simulation_with_invalid_infix_is_failed():
    sim = create_simulation(tokenize("(A + B", Notation.INFIX), Notation.INFIX, Notation.POSTFIX)
    assert sim.status == SimulationStatus.FAILED
    assert sim.error.kind == ErrorKind.UNBALANCED_BRACKETS
    assert advance(sim).kind == EventKind.FAILED


def test_handle_functions_delegate():
    sim = create_simulation(tokenize("AB+", Notation.POSTFIX), Notation.POSTFIX, Notation.INFIX)
    assert peek_next(sim).token.value == "A"
    assert advance(sim).kind == EventKind.PUSHED
    reset(sim)
    assert sim.status == SimulationStatus.IDLE


# ================== long runs ==================

def long_postfix(n_operators):
    return tokenize("A" + "B+" * n_operators, Notation.POSTFIX)


def test_run_without_a_cap_finishes_long_expressions():
    sim = StackSimulation(long_postfix(4000), Notation.POSTFIX, Notation.PREFIX)
    events = sim.run()
    assert events[-1].kind == EventKind.DONE
    assert len(events) == 1 + 3 * 4000 + 1
    assert sim.result == "+" * 4000 + "A" + "B" * 4000


def test_capped_run_pauses_and_can_resume():
    sim = simulation("AB+CD-*", Notation.POSTFIX, Notation.INFIX)
    first = sim.run(max_steps=4)
    assert len(first) == 4
    assert not sim.is_finished
    assert sim.status == SimulationStatus.STEPPING

    rest = sim.run(max_steps=3)
    assert len(rest) == 3
    assert sim.advance().kind == EventKind.COMBINED

    remaining = sim.run()
    assert remaining[-1].kind == EventKind.DONE
    assert sim.result == "((A+B)*(C-D))"


def test_reversal_peek_reports_pending_pops():
    sim = StackSimulation(tokenize_characters("ab"), task=Task.REVERSE)
    sim.advance()
    sim.advance()
    upcoming = sim.peek_next()
    assert upcoming.token.value == "b"
    assert upcoming.will_pop
    assert upcoming.description == "Will pop 'b' from stack"

    sim.advance()
    assert sim.peek_next().token.value == "a"
    sim.advance()
    assert sim.peek_next() is None
    assert sim.advance().kind == EventKind.DONE
