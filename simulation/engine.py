"""栈模拟引擎 - 每次 advance 只执行一个可观察的步骤"""
import logging

from core import (
    Notation, Task, Operand, Bracket, BRACKET_PAIRS, combine, is_compact,
    ErrorKind, BracketIssue, ExpressionError
)
from config.config import SIMULATION_CONFIG
from simulation.state import SimulationState, SimulationStatus, StepEvent, EventKind, NextToken
from utils.formatting import describe_push, describe_pop_pair, describe_combine

logger = logging.getLogger(__name__)


class StackSimulation:
    """
    可恢复的状态机：Idle -> Ready -> Stepping -> (Combining) -> Done | Failed

    同一个类处理前缀/后缀转换、字符串反转和括号匹配。
    引擎本身不计时，自动播放由调用方按自己的节奏反复调用 advance。
    """

    def __init__(self, tokens, source=None, target=None, task=Task.CONVERT):
        if task == Task.CONVERT:
            if source not in (Notation.PREFIX, Notation.POSTFIX):
                raise ValueError(f"Simulation reads prefix or postfix tokens, got {source!r}")
            if target is None:
                raise ValueError("A conversion simulation needs a target notation")
        else:
            source = target = None

        self.task = task
        self.source = source
        self.target = target
        self.state = self._new_state(tokens)

    def _new_state(self, tokens):
        tokens = tuple(tokens)
        if is_compact(tokens):
            separator = SIMULATION_CONFIG["compact_separator"]
        else:
            separator = SIMULATION_CONFIG["spaced_separator"]
        return SimulationState(tokens, self.task, self.source, self.target, separator)

    @classmethod
    def failed(cls, error, source=None, target=None, task=Task.CONVERT):
        """创建一个已处于 FAILED 的模拟（例如预处理阶段就出错）"""
        sim = cls((), source=source or Notation.POSTFIX, target=target or Notation.POSTFIX, task=task)
        sim._fail(error)
        return sim

    # ================== 对外属性 ==================

    @property
    def status(self):
        return self.state.status

    @property
    def error(self):
        return self.state.error

    @property
    def result(self):
        return self.state.result

    @property
    def result_tokens(self):
        """DONE 时栈中唯一元素对应的Token序列"""
        if self.state.status != SimulationStatus.DONE or self.task != Task.CONVERT:
            return None
        return list(self.state.stack.peek().tokens)

    @property
    def stack(self):
        return self.state.stack.snapshot()

    @property
    def is_finished(self):
        return self.state.status.is_terminal

    def remaining(self):
        return self.state.remaining()

    # ================== 控制 ==================

    def advance(self):
        """执行一步；终止状态下重复返回最后的终止事件"""
        state = self.state
        if state.status == SimulationStatus.IDLE:
            return StepEvent(
                EventKind.FAILED,
                messages=["No active tokens; start a new conversion"],
                error=ExpressionError(ErrorKind.EMPTY_INPUT, "No active tokens; start a new conversion"))
        if state.status.is_terminal:
            return state.last_event

        if state.status == SimulationStatus.READY:
            state.status = SimulationStatus.STEPPING

        try:
            if self.task == Task.REVERSE:
                event = self._step_reversal()
            elif self.task == Task.BALANCE:
                event = self._step_balance()
            else:
                event = self._step_conversion()
        except ExpressionError as e:
            event = self._fail(e, state.current_token)

        state.step_count += 1
        state.last_event = event
        return event

    def peek_next(self):
        """下一个要处理的Token，以及它会被当作操作符处理还是直接入栈"""
        state = self.state
        if state.status == SimulationStatus.IDLE or state.status.is_terminal:
            return None
        if state.status == SimulationStatus.COMBINING:
            return NextToken(state.pending[0], True)
        tk = state.current_token
        if tk is None:
            # 反转的弹出阶段：输入已读完，下一步弹出栈顶
            if self.task == Task.REVERSE and state.stack:
                return NextToken(state.stack.peek().tokens[0], False, will_pop=True)
            return None
        if self.task == Task.REVERSE:
            return NextToken(tk, False)
        if self.task == Task.BALANCE:
            return NextToken(tk, tk.is_close_bracket)
        return NextToken(tk, tk.is_operator)

    def run(self, max_steps=None):
        """
        一直执行到终止状态，返回全部事件（无计时的自动播放）

        Args:
            max_steps: 可选的步数上限；达到上限时暂停，之后可继续 advance / run
        """
        if self.state.status == SimulationStatus.IDLE:
            return [self.advance()]

        events = []
        while not self.is_finished:
            if max_steps is not None and len(events) >= max_steps:
                logger.debug(f"Simulation paused after {max_steps} steps")
                break
            events.append(self.advance())
        return events

    def reset(self):
        """丢弃当前状态，回到 IDLE"""
        self.state = SimulationState((), self.task, self.source, self.target)

    # ================== 前缀/后缀转换 ==================

    def _step_conversion(self):
        state = self.state
        if state.status == SimulationStatus.COMBINING:
            return self._combine()
        if not state.has_next:
            return self._finish_conversion()

        tk = state.current_token
        if tk.is_bracket:
            raise ExpressionError(
                ErrorKind.MALFORMED_SEQUENCE,
                f"Unexpected bracket '{tk.value}' in {self.source.value} expression",
                position=state.cursor)

        if not tk.is_operator:
            state.stack.push(Operand(tk.value))
            state.move()
            return StepEvent(
                EventKind.PUSHED, tk,
                payload={'value': tk.value},
                messages=[describe_push(tk.value)],
                stack=state.stack.snapshot())

        if len(state.stack) < 2:
            raise ExpressionError(
                ErrorKind.INSUFFICIENT_OPERANDS,
                f"Invalid Expression! Not enough operands for operator '{tk.value}'",
                position=state.cursor)

        # op1 为最近入栈的元素
        operand1 = state.stack.pop()
        operand2 = state.stack.pop()
        state.pending = (tk, operand1, operand2)
        state.status = SimulationStatus.COMBINING
        return StepEvent(
            EventKind.POPPED_PAIR, tk,
            payload={'operator': tk.value, 'operand1': operand1.text, 'operand2': operand2.text},
            messages=describe_pop_pair(tk.value, operand1.text, operand2.text),
            stack=state.stack.snapshot())

    def _combine(self):
        state = self.state
        tk, operand1, operand2 = state.pending

        # 前缀源从右向左扫描，栈顶是左操作数；后缀源则相反
        if self.source == Notation.PREFIX:
            left, right = operand1, operand2
        else:
            left, right = operand2, operand1
        item = combine(tk, left, right, self.target, state.separator)

        state.stack.push(item)
        state.pending = None
        state.status = SimulationStatus.STEPPING
        state.move()
        return StepEvent(
            EventKind.COMBINED, tk,
            payload={'operator': tk.value, 'operand1': operand1.text,
                     'operand2': operand2.text, 'result': item.text},
            messages=describe_combine(tk.value, item.text),
            stack=state.stack.snapshot())

    def _finish_conversion(self):
        state = self.state
        if len(state.stack) != 1:
            raise ExpressionError(
                ErrorKind.UNEXPECTED_FINAL_STACK_SIZE,
                f"Invalid Expression! {len(state.stack)} values remain on the stack")

        item = state.stack.peek()
        return self._done(item.text, {'tokens': [t.value for t in item.tokens]}, "Conversion Complete!")

    # ================== 字符串反转 ==================

    def _step_reversal(self):
        state = self.state
        if state.has_next:
            tk = state.current_token
            state.stack.push(Operand(tk.value))
            state.move()
            return StepEvent(
                EventKind.PUSHED, tk,
                payload={'value': tk.value},
                messages=[describe_push(tk.value, "character")],
                stack=state.stack.snapshot())

        if state.stack:
            item = state.stack.pop()
            state.output.append(item.text)
            reversed_text = ''.join(state.output)
            return StepEvent(
                EventKind.POPPED, item.tokens[0],
                payload={'value': item.text, 'reversed': reversed_text},
                messages=[f"Popped character: {item.text}", f"Reversed String: {reversed_text}"],
                stack=state.stack.snapshot())

        return self._done(''.join(state.output), {}, "String Reversal Complete!")

    # ================== 括号匹配 ==================

    def _step_balance(self):
        state = self.state
        if not state.has_next:
            if state.stack:
                raise ExpressionError(
                    ErrorKind.UNEXPECTED_FINAL_STACK_SIZE,
                    f"Expression has unbalanced brackets! Missing closing bracket for '{state.stack.peek().text}'",
                    issue=BracketIssue.MISSING_CLOSER)
            return self._done("balanced", {'balanced': True}, "Expression has balanced brackets!")

        tk = state.current_token
        if tk.is_open_bracket:
            state.stack.push(Bracket(tk.value))
            state.move()
            return StepEvent(
                EventKind.PUSHED, tk,
                payload={'value': tk.value},
                messages=[describe_push(tk.value, "opening bracket")],
                stack=state.stack.snapshot())

        if tk.is_close_bracket:
            if not state.stack:
                raise ExpressionError(
                    ErrorKind.UNBALANCED_BRACKETS,
                    f"Unbalanced: Extra closing bracket '{tk.value}'",
                    position=state.cursor, issue=BracketIssue.EXTRA_CLOSER)
            top = state.stack.peek()
            if top.text != BRACKET_PAIRS[tk.value]:
                raise ExpressionError(
                    ErrorKind.UNBALANCED_BRACKETS,
                    f"Unbalanced: Mismatched brackets '{top.text}' and '{tk.value}'",
                    position=state.cursor, issue=BracketIssue.MISMATCHED)
            # 匹配成功：两个括号一起丢弃
            state.stack.pop()
            state.move()
            return StepEvent(
                EventKind.MATCHED, tk,
                payload={'open': top.text, 'close': tk.value},
                messages=[f"Comparing brackets '{top.text}' and '{tk.value}'", "Brackets match!"],
                stack=state.stack.snapshot())

        state.move()
        return StepEvent(
            EventKind.SKIPPED, tk,
            payload={'value': tk.value},
            messages=[f"Skipped character: {tk.value}"],
            stack=state.stack.snapshot())

    # ================== 终止 ==================

    def _done(self, result, payload, message):
        state = self.state
        state.status = SimulationStatus.DONE
        state.result = result
        payload = dict(payload, result=result)
        logger.debug(f"Simulation done: {result}")
        return StepEvent(
            EventKind.DONE,
            payload=payload,
            messages=[message, f"Final Result: {result}"],
            stack=state.stack.snapshot())

    def _fail(self, error, token=None):
        """任何错误之后状态都保持一致（FAILED），调用方可以安全地停止或重置"""
        state = self.state
        state.status = SimulationStatus.FAILED
        state.error = error
        state.pending = None
        label = "unbalanced" if self.task == Task.BALANCE else "invalid"
        if self.task == Task.BALANCE:
            state.result = "unbalanced"
        event = StepEvent(
            EventKind.FAILED, token,
            payload={'label': label, 'kind': error.kind.value},
            messages=[error.reason],
            stack=state.stack.snapshot(),
            error=error)
        state.last_event = event
        logger.debug(f"Simulation failed: {error.reason}")
        return event
