"""表达式错误类型与带标签的校验结果"""
from enum import Enum


class ErrorKind(Enum):
    EMPTY_INPUT = "empty_input"
    UNBALANCED_BRACKETS = "unbalanced_brackets"
    MALFORMED_SEQUENCE = "malformed_sequence"
    INSUFFICIENT_OPERANDS = "insufficient_operands"
    UNEXPECTED_FINAL_STACK_SIZE = "unexpected_final_stack_size"


class BracketIssue(Enum):
    """UNBALANCED_BRACKETS 的三种情形"""
    EXTRA_CLOSER = "extra closing bracket"
    MISMATCHED = "mismatched brackets"
    MISSING_CLOSER = "missing closing bracket"


class ExpressionError(Exception):
    """
    核心内部抛出的错误；对外接口统一捕获并转换为结果对象

    Args:
        kind: ErrorKind
        reason: 可读的原因
        position: 出错Token的下标（可选）
        issue: BracketIssue（仅括号错误）
    """

    def __init__(self, kind, reason, position=None, issue=None):
        super().__init__(reason)
        self.kind = kind
        self.reason = reason
        self.position = position
        self.issue = issue

    def __eq__(self, other):
        if not isinstance(other, ExpressionError):
            return NotImplemented
        return (self.kind, self.reason, self.position, self.issue) == \
            (other.kind, other.reason, other.position, other.issue)

    def __hash__(self):
        return hash((self.kind, self.reason, self.position, self.issue))

    def __repr__(self):
        return f"ExpressionError({self.kind.value}, {self.reason!r})"


class ValidationResult:
    """valid | invalid(reason)"""

    __slots__ = ('error',)

    def __init__(self, error=None):
        self.error = error

    @classmethod
    def ok(cls):
        return cls()

    @classmethod
    def fail(cls, kind, reason, position=None, issue=None):
        return cls(ExpressionError(kind, reason, position=position, issue=issue))

    @property
    def valid(self):
        return self.error is None

    @property
    def kind(self):
        return self.error.kind if self.error else None

    @property
    def reason(self):
        return self.error.reason if self.error else None

    def __bool__(self):
        return self.valid

    def __eq__(self, other):
        if not isinstance(other, ValidationResult):
            return NotImplemented
        return self.error == other.error

    def __repr__(self):
        if self.valid:
            return "ValidationResult(valid)"
        return f"ValidationResult(invalid: {self.error.reason})"
