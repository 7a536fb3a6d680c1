"""core/token_system.py"""
from enum import Enum

from config.config import TOKEN_CONFIG


class TokenType(Enum):
    OPERAND = "operand"  # 操作数（不求值的符号）
    OPERATOR = "operator"  # 操作符
    BRACKET = "bracket"  # 括号


class Notation(Enum):
    PREFIX = "prefix"
    INFIX = "infix"
    POSTFIX = "postfix"

    @property
    def reads_right_to_left(self):
        """前缀表达式从右向左扫描，其余从左向右"""
        return self is Notation.PREFIX


class Task(Enum):
    CONVERT = "convert"  # 表达式转换
    REVERSE = "reverse"  # 字符串反转
    BALANCE = "balance"  # 括号匹配


# 操作符优先级（左结合），整个生命周期内不变
PRECEDENCE = dict(TOKEN_CONFIG["precedence"])

OPERATORS = frozenset(TOKEN_CONFIG["operators"])
BRACKETS = frozenset(TOKEN_CONFIG["brackets"])
OPEN_BRACKETS = frozenset("([{") & BRACKETS
CLOSE_BRACKETS = BRACKETS - OPEN_BRACKETS

# 闭括号 -> 对应的开括号
BRACKET_PAIRS = {
    ')': '(',
    ']': '[',
    '}': '{',
}


def classify(value):
    """按字符串值判断Token类别"""
    if value in OPERATORS:
        return TokenType.OPERATOR
    if value in BRACKETS:
        return TokenType.BRACKET
    return TokenType.OPERAND


class Token:
    """不可变的符号单元，身份只由字符串值决定"""

    __slots__ = ('value', 'type')

    def __init__(self, value):
        object.__setattr__(self, 'value', value)
        object.__setattr__(self, 'type', classify(value))

    def __setattr__(self, name, value):
        raise AttributeError("Token is immutable")

    @property
    def is_operator(self):
        return self.type == TokenType.OPERATOR

    @property
    def is_operand(self):
        return self.type == TokenType.OPERAND

    @property
    def is_bracket(self):
        return self.type == TokenType.BRACKET

    @property
    def is_open_bracket(self):
        return self.value in OPEN_BRACKETS

    @property
    def is_close_bracket(self):
        return self.value in CLOSE_BRACKETS

    @property
    def precedence(self):
        return PRECEDENCE.get(self.value, 0)

    def __eq__(self, other):
        if isinstance(other, Token):
            return self.value == other.value
        if isinstance(other, str):
            return self.value == other
        return NotImplemented

    def __hash__(self):
        return hash(self.value)

    def __repr__(self):
        return f"Token({self.value!r})"

    def __str__(self):
        return self.value


class ConversionPlan:
    """一次转换/模拟的不可变计划：任务 + 源记法 + 目标记法"""

    __slots__ = ('task', 'source', 'target')

    def __init__(self, task, source=None, target=None):
        if task == Task.CONVERT and (source is None or target is None):
            raise ValueError("A conversion plan needs both a source and a target notation")
        object.__setattr__(self, 'task', task)
        object.__setattr__(self, 'source', source)
        object.__setattr__(self, 'target', target)

    def __setattr__(self, name, value):
        raise AttributeError("ConversionPlan is immutable")

    @property
    def needs_conversion(self):
        """中缀输入需要先经过转换器"""
        return self.task == Task.CONVERT and self.source == Notation.INFIX

    def __eq__(self, other):
        if not isinstance(other, ConversionPlan):
            return NotImplemented
        return (self.task, self.source, self.target) == (other.task, other.source, other.target)

    def __hash__(self):
        return hash((self.task, self.source, self.target))

    def __repr__(self):
        source = self.source.value if self.source else None
        target = self.target.value if self.target else None
        return f"ConversionPlan(task={self.task.value}, source={source}, target={target})"


class Mode(Enum):
    """界面上的模式选择，顺序即规范索引"""
    PREFIX_TO_POSTFIX = "Prefix to Postfix"
    PREFIX_TO_INFIX = "Prefix to Infix"
    POSTFIX_TO_PREFIX = "Postfix to Prefix"
    POSTFIX_TO_INFIX = "Postfix to Infix"
    INFIX_TO_PREFIX = "Infix to Prefix"
    INFIX_TO_POSTFIX = "Infix to Postfix"
    STRING_REVERSAL = "String Reversal"
    BRACKET_BALANCING = "Bracket Balancing"

    @property
    def label(self):
        return self.value

    @property
    def index(self):
        return list(Mode).index(self)

    @property
    def plan(self):
        return MODE_PLANS[self]

    @classmethod
    def from_index(cls, index):
        modes = list(cls)
        if not 0 <= index < len(modes):
            raise ValueError(f"Unknown mode index: {index}")
        return modes[index]

    @classmethod
    def from_label(cls, text):
        """接受标签（"Infix to Postfix"）、枚举名（infix_to_postfix）或索引字符串"""
        key = text.strip()
        if key.isdigit():
            return cls.from_index(int(key))
        for mode in cls:
            if key.lower() in (mode.value.lower(), mode.name.lower()):
                return mode
        raise ValueError(f"Unknown mode: {text!r}")


MODE_PLANS = {
    Mode.PREFIX_TO_POSTFIX: ConversionPlan(Task.CONVERT, Notation.PREFIX, Notation.POSTFIX),
    Mode.PREFIX_TO_INFIX: ConversionPlan(Task.CONVERT, Notation.PREFIX, Notation.INFIX),
    Mode.POSTFIX_TO_PREFIX: ConversionPlan(Task.CONVERT, Notation.POSTFIX, Notation.PREFIX),
    Mode.POSTFIX_TO_INFIX: ConversionPlan(Task.CONVERT, Notation.POSTFIX, Notation.INFIX),
    Mode.INFIX_TO_PREFIX: ConversionPlan(Task.CONVERT, Notation.INFIX, Notation.PREFIX),
    Mode.INFIX_TO_POSTFIX: ConversionPlan(Task.CONVERT, Notation.INFIX, Notation.POSTFIX),
    Mode.STRING_REVERSAL: ConversionPlan(Task.REVERSE),
    Mode.BRACKET_BALANCING: ConversionPlan(Task.BALANCE),
}


# ================== 栈元素（带标签的联合类型） ==================

class StackItem:
    """栈元素基类：Operand | CombinedResult | Bracket"""

    __slots__ = ('text',)

    def __init__(self, text):
        self.text = text

    @property
    def tokens(self):
        return (Token(self.text),)

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.text == other.text

    def __hash__(self):
        return hash((type(self).__name__, self.text))

    def __repr__(self):
        return f"{type(self).__name__}({self.text!r})"

    def __str__(self):
        return self.text


class Operand(StackItem):
    """原样入栈的操作数"""
    __slots__ = ()


class Bracket(StackItem):
    """括号匹配时入栈的开括号"""
    __slots__ = ()


class CombinedResult(StackItem):
    """由两个栈元素与一个操作符组合而成的子表达式"""

    __slots__ = ('_tokens',)

    def __init__(self, text, tokens):
        super().__init__(text)
        self._tokens = tuple(tokens)

    @property
    def tokens(self):
        return self._tokens


class ConversionStack:
    """LIFO栈，只属于一次转换/模拟，不跨实例共享"""

    def __init__(self, items=None):
        self._items = list(items) if items else []

    def push(self, item):
        if not isinstance(item, StackItem):
            raise ValueError(f"Stack only holds StackItem values, got {type(item).__name__}")
        self._items.append(item)

    def pop(self):
        if not self._items:
            raise IndexError("pop from empty ConversionStack")
        return self._items.pop()

    def peek(self):
        return self._items[-1] if self._items else None

    def clear(self):
        self._items.clear()

    def snapshot(self):
        """栈内容快照（底 -> 顶）"""
        return [item.text for item in self._items]

    def __len__(self):
        return len(self._items)

    def __bool__(self):
        return bool(self._items)

    def __iter__(self):
        return iter(self._items)

    def __repr__(self):
        return f"ConversionStack({self.snapshot()!r})"


# ================== 组合与渲染 ==================

def is_compact(tokens):
    """所有操作数都是单字符时使用无分隔符的紧凑写法"""
    return all(len(t.value) == 1 for t in tokens if t.is_operand)


def render_tokens(tokens, separator=''):
    return separator.join(t.value for t in tokens)


def combine(operator, left, right, target, separator=''):
    """
    把两个栈元素与操作符组合成目标记法的子表达式

    left/right 指语义上的左右操作数（由源记法的扫描方向决定）
    """
    if target == Notation.POSTFIX:
        parts = left.tokens + right.tokens + (operator,)
    elif target == Notation.PREFIX:
        parts = (operator,) + left.tokens + right.tokens
    else:
        parts = (Token('('),) + left.tokens + (operator,) + right.tokens + (Token(')'),)
    return CombinedResult(_render_combined(operator, left, right, target, separator), parts)


def _render_combined(operator, left, right, target, separator):
    # 文本由子元素文本拼接，保持子表达式内部已有的写法
    op = operator.value
    if target == Notation.POSTFIX:
        return separator.join((left.text, right.text, op))
    if target == Notation.PREFIX:
        return separator.join((op, left.text, right.text))
    return '(' + separator.join((left.text, op, right.text)) + ')'
