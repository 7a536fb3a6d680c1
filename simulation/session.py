"""会话：原始输入 + 模式 -> 分词 -> 校验 -> (转换) -> 模拟 -> 历史记录"""
import logging

from core import (
    Mode, Task, Notation, ErrorKind, ValidationResult,
    tokenize, tokenize_characters, ExpressionValidator, NotationConverter, render_tokens
)
from config.config import TOKEN_CONFIG, SIMULATION_CONFIG
from history import HistoryRepository, SampleLibrary
from simulation.engine import StackSimulation
from simulation.api import create_simulation
from simulation.state import SimulationStatus, EventKind

logger = logging.getLogger(__name__)


def _coerce_mode(mode):
    if isinstance(mode, Mode):
        return mode
    if isinstance(mode, int):
        return Mode.from_index(mode)
    return Mode.from_label(str(mode))


class ExpressionSession:
    """对应界面上的 开始 / 下一步 / 自动 / 重置 控制"""

    def __init__(self, history=None, samples=None):
        self.history = history if history is not None else HistoryRepository()
        self.samples = samples if samples is not None else SampleLibrary()
        self.mode = None
        self.input_text = None
        self.tokens = []
        self.simulation = None
        self._recorded = False

    @property
    def plan(self):
        return self.mode.plan if self.mode else None

    def sample_expressions(self, mode=None):
        """当前（或指定）模式的示例表达式"""
        mode = _coerce_mode(mode) if mode is not None else self.mode
        if mode is None:
            return []
        return self.samples.for_mode(mode)

    def practice_expression(self, mode=None, n_operators=None, seed=None):
        """
        生成一个适合该模式输入的随机练习表达式

        随机中缀表达式会先转换为模式的源记法，保证前缀/后缀模式也能直接使用
        """
        mode = _coerce_mode(mode) if mode is not None else self.mode
        text = SampleLibrary.random_infix(n_operators, seed=seed)
        plan = mode.plan if mode is not None else None
        if plan is None or plan.task != Task.CONVERT or plan.source == Notation.INFIX:
            return text

        tokens = NotationConverter.convert(tokenize(text, Notation.INFIX), plan.source)
        # 随机表达式的操作数都是单字符，使用紧凑形式
        return render_tokens(tokens, SIMULATION_CONFIG["compact_separator"])

    @property
    def status(self):
        if self.simulation is None:
            return SimulationStatus.IDLE
        return self.simulation.status

    def start(self, text, mode) -> ValidationResult:
        """
        准备一次新的转换；输入不合法时返回带原因的结果，且不加载模拟

        Args:
            text: 用户输入
            mode: Mode / 标签 / 索引
        """
        self.reset()
        self.mode = _coerce_mode(mode)
        plan = self.mode.plan
        text = (text or '').strip()

        if not text:
            logger.warning("Empty input")
            return ValidationResult.fail(ErrorKind.EMPTY_INPUT, "Please enter an expression!")

        self.input_text = text

        if plan.task != Task.CONVERT:
            # 字符串反转与括号匹配：每个字符一个Token
            self.tokens = tokenize_characters(text)
            self.simulation = StackSimulation(self.tokens, task=plan.task)
            logger.info(f"Ready: {self.mode.label} on {text!r}")
            return ValidationResult.ok()

        self.tokens = tokenize(text, plan.source)

        if plan.source != Notation.INFIX and len(self.tokens) < TOKEN_CONFIG["min_polish_tokens"]:
            logger.warning(f"Too few tokens for {plan.source.value} input: {text!r}")
            return ValidationResult.fail(
                ErrorKind.MALFORMED_SEQUENCE,
                "Expression must have at least one operator and one operand!")

        validation = ExpressionValidator.validate(self.tokens, plan.source)
        if not validation:
            return validation

        simulation = create_simulation(self.tokens, plan.source, plan.target)
        if simulation.status == SimulationStatus.FAILED:
            return ValidationResult(simulation.error)

        self.simulation = simulation
        logger.info(f"Ready: {self.mode.label} on {text!r}")
        return ValidationResult.ok()

    def advance(self):
        if self.simulation is None:
            # 空闲句柄：返回 EMPTY_INPUT 的失败事件
            return StackSimulation((), Notation.POSTFIX, Notation.POSTFIX).advance()
        event = self.simulation.advance()
        self._record(event)
        return event

    def run(self, max_steps=None):
        if self.simulation is None:
            return [self.advance()]
        events = self.simulation.run(max_steps)
        for event in events:
            self._record(event)
        return events

    def peek_next(self):
        return self.simulation.peek_next() if self.simulation else None

    def remaining(self):
        return self.simulation.remaining() if self.simulation else []

    @property
    def result(self):
        return self.simulation.result if self.simulation else None

    def reset(self):
        """丢弃当前模拟状态；历史记录不受影响"""
        if self.simulation is not None:
            self.simulation.reset()
        self.simulation = None
        self.input_text = None
        self.tokens = []
        self._recorded = False

    def _record(self, event):
        """每次成功完成只追加一条历史；括号匹配无论平衡与否都记录结论"""
        if self._recorded or not event.is_terminal:
            return
        balance = self.plan.task == Task.BALANCE
        if event.kind == EventKind.DONE or (balance and event.kind == EventKind.FAILED):
            self.history.add(self.input_text, self.simulation.result, self.mode)
            self._recorded = True
            logger.info(f"{self.mode.label}: {self.input_text} -> {self.simulation.result}")
        elif event.kind == EventKind.FAILED:
            logger.warning(f"{self.mode.label} failed for {self.input_text!r}: {event.reason}")
            self._recorded = True
