"""示例表达式与随机练习表达式"""
import logging

import numpy as np

from core import Mode, OPERATORS
from config.config import SAMPLE_EXPRESSIONS, PRACTICE_CONFIG

logger = logging.getLogger(__name__)

_BRACKET_FAMILIES = [('(', ')'), ('[', ']'), ('{', '}')]


class SampleLibrary:
    """按模式分组的静态示例（纯文本列表）"""

    def __init__(self, samples=None):
        source = samples if samples is not None else SAMPLE_EXPRESSIONS
        self._samples = {}
        for label, expressions in source.items():
            mode = label if isinstance(label, Mode) else Mode.from_label(label)
            self._samples[mode] = [str(e) for e in expressions]

    def for_mode(self, mode):
        if not isinstance(mode, Mode):
            mode = Mode.from_label(str(mode))
        return list(self._samples.get(mode, []))

    def all(self):
        return {mode: list(expressions) for mode, expressions in self._samples.items()}

    def __len__(self):
        return sum(len(v) for v in self._samples.values())

    @staticmethod
    def random_infix(n_operators=None, seed=None, rng=None, operand_pool=None,
                     bracket_probability=None):
        """
        生成一个合法的中缀练习表达式（单字母操作数，Token之间以空格分隔）

        Args:
            n_operators: 二元操作符个数
            seed: 随机种子（rng 为空时使用）
            rng: numpy Generator，可在多次调用间复用
            operand_pool: 可选的操作数字符
            bracket_probability: 子表达式被括号包裹的概率
        """
        if n_operators is None:
            n_operators = PRACTICE_CONFIG["default_operators"]
        if n_operators < 0:
            raise ValueError("n_operators must be non-negative")
        if rng is None:
            rng = np.random.default_rng(seed)
        pool = operand_pool or PRACTICE_CONFIG["operand_pool"]
        if bracket_probability is None:
            bracket_probability = PRACTICE_CONFIG["bracket_probability"]
        operators = sorted(OPERATORS)

        def build(n):
            if n == 0:
                return [pool[int(rng.integers(len(pool)))]]
            left_n = int(rng.integers(0, n))
            left = build(left_n)
            right = build(n - 1 - left_n)
            op = operators[int(rng.integers(len(operators)))]
            parts = left + [op] + right
            if rng.random() < bracket_probability:
                open_b, close_b = _BRACKET_FAMILIES[int(rng.integers(len(_BRACKET_FAMILIES)))]
                parts = [open_b] + parts + [close_b]
            return parts

        expression = ' '.join(build(n_operators))
        logger.debug(f"Random practice expression: {expression}")
        return expression
