"""中缀 -> 后缀 / 前缀 转换器（模拟前的预处理）"""
import logging

from core.token_system import Token, Notation, Operand, ConversionStack, combine
from core.errors import ErrorKind, ExpressionError

logger = logging.getLogger(__name__)


class NotationConverter:
    """输入必须已经通过中缀校验；未匹配的闭括号属于校验期错误，这里不处理"""

    @staticmethod
    def to_postfix(tokens):
        """调度场算法：栈顶优先级 >= 当前操作符时先弹出（左结合）"""
        output = []
        operator_stack = []

        for tk in tokens:
            if tk.is_operator:
                while (operator_stack
                       and not operator_stack[-1].is_open_bracket
                       and operator_stack[-1].precedence >= tk.precedence):
                    output.append(operator_stack.pop())
                operator_stack.append(tk)
            elif tk.is_open_bracket:
                operator_stack.append(tk)
            elif tk.is_close_bracket:
                while operator_stack and not operator_stack[-1].is_open_bracket:
                    output.append(operator_stack.pop())
                if operator_stack:
                    operator_stack.pop()  # 丢弃开括号
            else:
                output.append(tk)

        # 剩余操作符全部输出，游离的开括号直接丢弃
        while operator_stack:
            tk = operator_stack.pop()
            if not tk.is_bracket:
                output.append(tk)

        logger.debug(f"Postfix tokens: {' '.join(t.value for t in output)}")
        return output

    @staticmethod
    def to_prefix(tokens):
        """
        先转成后缀，再用第二个栈把后缀流改写为前缀：
        操作数原样入栈；操作符弹出 v2、v1，组合为 operator v1 v2 后入栈
        """
        postfix = NotationConverter.to_postfix(tokens)
        stack = ConversionStack()

        for i, tk in enumerate(postfix):
            if not tk.is_operator:
                stack.push(Operand(tk.value))
                continue
            if len(stack) < 2:
                raise ExpressionError(
                    ErrorKind.INSUFFICIENT_OPERANDS,
                    f"Not enough operands for operator '{tk.value}' while building prefix",
                    position=i)
            v2 = stack.pop()
            v1 = stack.pop()
            stack.push(combine(tk, v1, v2, Notation.PREFIX))

        if not stack:
            raise ExpressionError(
                ErrorKind.UNEXPECTED_FINAL_STACK_SIZE,
                "Empty stack while building prefix expression")
        if len(stack) > 1:
            raise ExpressionError(
                ErrorKind.UNEXPECTED_FINAL_STACK_SIZE,
                f"{len(stack)} values remain while building prefix expression")

        prefix = list(stack.pop().tokens)
        logger.debug(f"Prefix tokens: {' '.join(t.value for t in prefix)}")
        return prefix

    @staticmethod
    def convert(tokens, target):
        """中缀 -> target；target 为 INFIX 时原样返回"""
        tokens = [t if isinstance(t, Token) else Token(t) for t in tokens]
        if target == Notation.POSTFIX:
            return NotationConverter.to_postfix(tokens)
        if target == Notation.PREFIX:
            return NotationConverter.to_prefix(tokens)
        return list(tokens)
