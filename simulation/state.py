"""模拟状态与步骤事件"""
from enum import Enum

from core import ConversionStack, Notation, Task


class SimulationStatus(Enum):
    IDLE = "idle"  # 没有活动的Token
    READY = "ready"  # Token已加载，游标在起点
    STEPPING = "stepping"
    COMBINING = "combining"  # 已弹出一对操作数，等待组合
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self):
        return self in (SimulationStatus.DONE, SimulationStatus.FAILED)


class EventKind(Enum):
    PUSHED = "pushed"
    POPPED_PAIR = "popped_pair"
    COMBINED = "combined"
    MATCHED = "matched"
    POPPED = "popped"  # 字符串反转的出栈
    SKIPPED = "skipped"  # 括号匹配时的非括号字符
    FAILED = "failed"
    DONE = "done"


class StepEvent:
    """一次 advance 的可观察结果，供渲染层使用"""

    def __init__(self, kind, token=None, payload=None, messages=None, stack=None, error=None):
        self.kind = kind
        self.token = token
        self.payload = payload or {}
        self.messages = list(messages or [])
        self.stack = list(stack or [])  # 栈快照（底 -> 顶）
        self.error = error

    @property
    def is_terminal(self):
        return self.kind in (EventKind.DONE, EventKind.FAILED)

    @property
    def result(self):
        return self.payload.get('result')

    @property
    def reason(self):
        return self.error.reason if self.error else None

    def __repr__(self):
        token = self.token.value if self.token is not None else None
        return f"StepEvent({self.kind.value}, token={token!r}, stack={self.stack})"


class NextToken:
    """peek_next 的返回值"""

    __slots__ = ('token', 'will_process_as_operator', 'will_pop')

    def __init__(self, token, will_process_as_operator, will_pop=False):
        self.token = token
        self.will_process_as_operator = will_process_as_operator
        self.will_pop = will_pop

    @property
    def description(self):
        if self.will_process_as_operator:
            return f"Will process operator '{self.token.value}'"
        if self.will_pop:
            return f"Will pop '{self.token.value}' from stack"
        return f"Will push '{self.token.value}' to stack"

    def __repr__(self):
        return f"NextToken({self.token.value!r}, operator={self.will_process_as_operator})"


class SimulationState:
    """一次转换的全部可变状态；丢弃该对象即取消"""

    def __init__(self, tokens, task=Task.CONVERT, source=None, target=None, separator=''):
        self.tokens = tuple(tokens)
        self.task = task
        self.source = source
        self.target = target
        self.separator = separator

        self.step = -1 if source == Notation.PREFIX else 1
        self.cursor = len(self.tokens) - 1 if source == Notation.PREFIX else 0
        self.stack = ConversionStack()
        self.pending = None  # COMBINING 状态下的 (operator, op1, op2)
        self.output = []  # 字符串反转的输出
        self.status = SimulationStatus.READY if self.tokens else SimulationStatus.IDLE
        self.error = None
        self.result = None
        self.last_event = None
        self.step_count = 0

    @property
    def has_next(self):
        return 0 <= self.cursor < len(self.tokens)

    @property
    def current_token(self):
        return self.tokens[self.cursor] if self.has_next else None

    def move(self):
        self.cursor += self.step

    def remaining(self):
        """按阅读顺序返回尚未处理的Token"""
        if not self.has_next:
            return []
        if self.step < 0:
            return list(self.tokens[:self.cursor + 1])
        return list(self.tokens[self.cursor:])

    def copy(self):
        """复制状态（栈元素本身不可变，浅拷贝即可）"""
        new_state = SimulationState(self.tokens, self.task, self.source, self.target, self.separator)
        new_state.cursor = self.cursor
        new_state.stack = ConversionStack(self.stack)
        new_state.pending = self.pending
        new_state.output = self.output.copy()
        new_state.status = self.status
        new_state.error = self.error
        new_state.result = self.result
        new_state.last_event = self.last_event
        new_state.step_count = self.step_count
        return new_state
