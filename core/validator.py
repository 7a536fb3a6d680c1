"""语法校验器 - 判断Token序列在声明的记法下是否合法"""
import logging

from core.token_system import (
    Notation, Token, Operand, Bracket, ConversionStack, BRACKET_PAIRS, combine
)
from core.errors import ErrorKind, BracketIssue, ExpressionError, ValidationResult

logger = logging.getLogger(__name__)


class ExpressionValidator:
    """所有检查都是纯函数：对同一序列重复校验得到相同的原因"""

    @staticmethod
    def validate(tokens, notation):
        """
        Args:
            tokens: Token序列
            notation: 声明的输入记法
        Returns:
            ValidationResult
        """
        try:
            if not tokens:
                raise ExpressionError(ErrorKind.EMPTY_INPUT, "Please enter an expression!")
            tokens = [t if isinstance(t, Token) else Token(t) for t in tokens]

            if notation == Notation.INFIX:
                ExpressionValidator.check_brackets(tokens)
                ExpressionValidator.check_infix_sequence(tokens)
            elif notation == Notation.POSTFIX:
                ExpressionValidator.check_postfix(tokens)
            elif notation == Notation.PREFIX:
                ExpressionValidator.check_prefix(tokens)
            else:
                raise ValueError(f"Unknown notation: {notation!r}")
        except ExpressionError as e:
            logger.warning(f"Invalid {notation.value} expression: {e.reason}")
            return ValidationResult(e)

        return ValidationResult.ok()

    # ================== 中缀 ==================

    @staticmethod
    def check_brackets(tokens):
        """显式括号栈：开括号入栈，闭括号要求栈顶是同类开括号"""
        stack = ConversionStack()
        for i, tk in enumerate(tokens):
            if tk.is_open_bracket:
                stack.push(Bracket(tk.value))
            elif tk.is_close_bracket:
                if not stack:
                    raise ExpressionError(
                        ErrorKind.UNBALANCED_BRACKETS,
                        f"Unbalanced brackets: extra closing bracket '{tk.value}' at position {i}",
                        position=i, issue=BracketIssue.EXTRA_CLOSER)
                open_bracket = stack.pop()
                if open_bracket.text != BRACKET_PAIRS[tk.value]:
                    raise ExpressionError(
                        ErrorKind.UNBALANCED_BRACKETS,
                        f"Mismatched brackets '{open_bracket.text}' and '{tk.value}' at position {i}",
                        position=i, issue=BracketIssue.MISMATCHED)

        if stack:
            raise ExpressionError(
                ErrorKind.UNBALANCED_BRACKETS,
                f"Unbalanced brackets: missing closing bracket for '{stack.peek().text}'",
                issue=BracketIssue.MISSING_CLOSER)

    @staticmethod
    def check_infix_sequence(tokens):
        """expecting_operand 标志：操作数与操作符交替出现"""
        expecting_operand = True

        for i, tk in enumerate(tokens):
            if tk.is_open_bracket:
                # 不支持隐式乘法，如 A(B)
                if not expecting_operand:
                    raise ExpressionError(
                        ErrorKind.MALFORMED_SEQUENCE,
                        f"Invalid sequence: expected operator but got '{tk.value}' at position {i}",
                        position=i)
                expecting_operand = True
            elif tk.is_close_bracket:
                # 空括号 () 或 (A+) 这类闭括号前缺操作数
                if expecting_operand:
                    raise ExpressionError(
                        ErrorKind.MALFORMED_SEQUENCE,
                        f"Invalid sequence: expected operand but got '{tk.value}' at position {i}",
                        position=i)
                expecting_operand = False
            elif tk.is_operator:
                # 不处理一元操作符
                if expecting_operand:
                    raise ExpressionError(
                        ErrorKind.MALFORMED_SEQUENCE,
                        f"Invalid operator sequence: expected operand but got operator '{tk.value}' at position {i}",
                        position=i)
                expecting_operand = True
            else:
                if not expecting_operand and i > 0:
                    raise ExpressionError(
                        ErrorKind.MALFORMED_SEQUENCE,
                        f"Invalid operand sequence: expected operator but got operand '{tk.value}' at position {i}",
                        position=i)
                expecting_operand = False

        if expecting_operand:
            raise ExpressionError(
                ErrorKind.MALFORMED_SEQUENCE,
                "Expression ends with an operator",
                position=len(tokens) - 1)

    # ================== 后缀 / 前缀 ==================

    @staticmethod
    def count_balance(tokens, notation):
        """操作数个数必须等于操作符个数 + 1"""
        for i, tk in enumerate(tokens):
            if tk.is_bracket:
                raise ExpressionError(
                    ErrorKind.MALFORMED_SEQUENCE,
                    f"Brackets are not allowed in {notation.value} expressions (position {i})",
                    position=i)

        operator_count = sum(1 for tk in tokens if tk.is_operator)
        operand_count = len(tokens) - operator_count
        if operand_count != operator_count + 1:
            raise ExpressionError(
                ErrorKind.MALFORMED_SEQUENCE,
                f"Invalid: operands={operand_count}, operators={operator_count}")
        return operand_count, operator_count

    @staticmethod
    def check_postfix(tokens):
        # 快速通过：AB+
        if len(tokens) == 3 and tokens[0].is_operand and tokens[1].is_operand and tokens[2].is_operator:
            return

        ExpressionValidator.count_balance(tokens, Notation.POSTFIX)
        ExpressionValidator._simulate(tokens, Notation.POSTFIX)

    @staticmethod
    def check_prefix(tokens):
        # 快速通过：+AB
        if len(tokens) == 3 and tokens[0].is_operator and tokens[1].is_operand and tokens[2].is_operand:
            return

        ExpressionValidator.count_balance(tokens, Notation.PREFIX)
        ExpressionValidator._simulate(tokens, Notation.PREFIX)

    @staticmethod
    def _simulate(tokens, notation):
        """
        用与执行期相同的类型化栈做结构模拟：
        每个操作符至少需要两个可用元素，结束时栈中恰好剩一个元素
        """
        stack = ConversionStack()
        if notation == Notation.PREFIX:
            order = range(len(tokens) - 1, -1, -1)
        else:
            order = range(len(tokens))

        for i in order:
            tk = tokens[i]
            if not tk.is_operator:
                stack.push(Operand(tk.value))
                continue

            if len(stack) < 2:
                raise ExpressionError(
                    ErrorKind.INSUFFICIENT_OPERANDS,
                    f"Invalid structure: not enough operands for operator '{tk.value}' at position {i}",
                    position=i)
            first = stack.pop()
            second = stack.pop()
            if notation == Notation.PREFIX:
                stack.push(combine(tk, first, second, notation))
            else:
                stack.push(combine(tk, second, first, notation))

        if len(stack) != 1:
            raise ExpressionError(
                ErrorKind.MALFORMED_SEQUENCE,
                f"Invalid structure: {len(stack)} values remain instead of one")
