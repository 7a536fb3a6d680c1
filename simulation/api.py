"""
面向外部（可视化层）的核心接口

tokenize / validate / convert / create_simulation / advance / peek_next / reset
所有错误都以带标签的结果返回，不向调用方抛出
"""
import logging

from core import (
    Notation, Task, Token, ExpressionValidator, NotationConverter, ExpressionError,
    ValidationResult, render_tokens, is_compact
)
from core import tokenize as _tokenize
from config.config import SIMULATION_CONFIG
from simulation.engine import StackSimulation

logger = logging.getLogger(__name__)


class ConversionResult:
    """Token[] | error"""

    __slots__ = ('tokens', 'error')

    def __init__(self, tokens=None, error=None):
        self.tokens = list(tokens) if tokens is not None else None
        self.error = error

    @property
    def ok(self):
        return self.error is None

    @property
    def text(self):
        """按紧凑/空格规则拼接结果"""
        if self.tokens is None:
            return None
        if is_compact(self.tokens):
            return render_tokens(self.tokens, SIMULATION_CONFIG["compact_separator"])
        return render_tokens(self.tokens, SIMULATION_CONFIG["spaced_separator"])

    def __bool__(self):
        return self.ok

    def __repr__(self):
        if self.ok:
            return f"ConversionResult({self.text!r})"
        return f"ConversionResult(error={self.error.reason!r})"


def _as_tokens(tokens):
    return [t if isinstance(t, Token) else Token(t) for t in tokens]


def tokenize(text, notation):
    return _tokenize(text, notation)


def validate(tokens, notation) -> ValidationResult:
    return ExpressionValidator.validate(_as_tokens(tokens), notation)


def convert(tokens, from_notation, to_notation) -> ConversionResult:
    """
    任意两种记法之间的转换

    中缀输入走转换器；前缀/后缀输入直接把模拟跑到结束，取栈中唯一元素的Token
    """
    tokens = _as_tokens(tokens)
    validation = ExpressionValidator.validate(tokens, from_notation)
    if not validation:
        return ConversionResult(error=validation.error)

    if from_notation == to_notation:
        return ConversionResult(tokens)

    try:
        if from_notation == Notation.INFIX:
            return ConversionResult(NotationConverter.convert(tokens, to_notation))
    except ExpressionError as e:
        logger.error(f"Conversion failed: {e.reason}")
        return ConversionResult(error=e)

    sim = StackSimulation(tokens, from_notation, to_notation)
    sim.run()
    if sim.error is not None:
        return ConversionResult(error=sim.error)
    return ConversionResult(sim.result_tokens)


def create_simulation(tokens, source_notation=None, target_notation=None, task=Task.CONVERT):
    """
    创建模拟句柄

    中缀源先转换为目标记法（目标为中缀时转换为后缀）再模拟；
    中缀校验或转换失败时返回一个已处于 FAILED 的句柄
    """
    tokens = _as_tokens(tokens)
    if task != Task.CONVERT:
        return StackSimulation(tokens, task=task)

    if source_notation != Notation.INFIX:
        return StackSimulation(tokens, source_notation, target_notation)

    read_as = Notation.PREFIX if target_notation == Notation.PREFIX else Notation.POSTFIX
    validation = ExpressionValidator.validate(tokens, Notation.INFIX)
    if not validation:
        return StackSimulation.failed(validation.error, read_as, target_notation)
    try:
        converted = NotationConverter.convert(tokens, read_as)
    except ExpressionError as e:
        logger.error(f"Conversion failed: {e.reason}")
        return StackSimulation.failed(e, read_as, target_notation)

    logger.debug(f"Simulating {read_as.value} tokens: {' '.join(t.value for t in converted)}")
    return StackSimulation(converted, read_as, target_notation)


def advance(handle):
    return handle.advance()


def peek_next(handle):
    return handle.peek_next()


def reset(handle):
    handle.reset()
