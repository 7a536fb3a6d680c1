"""核心模块 - Token系统、分词器、校验器和转换器"""
from .token_system import (
    TokenType, Token, Notation, Task, Mode, ConversionPlan, MODE_PLANS,
    PRECEDENCE, OPERATORS, BRACKETS, BRACKET_PAIRS,
    StackItem, Operand, CombinedResult, Bracket, ConversionStack,
    is_compact, render_tokens, combine
)
from .errors import ErrorKind, BracketIssue, ExpressionError, ValidationResult
from .tokenizer import tokenize, tokenize_infix, tokenize_characters
from .validator import ExpressionValidator
from .converter import NotationConverter

__all__ = [
    'TokenType', 'Token', 'Notation', 'Task', 'Mode', 'ConversionPlan', 'MODE_PLANS',
    'PRECEDENCE', 'OPERATORS', 'BRACKETS', 'BRACKET_PAIRS',
    'StackItem', 'Operand', 'CombinedResult', 'Bracket', 'ConversionStack',
    'is_compact', 'render_tokens', 'combine',
    'ErrorKind', 'BracketIssue', 'ExpressionError', 'ValidationResult',
    'tokenize', 'tokenize_infix', 'tokenize_characters',
    'ExpressionValidator', 'NotationConverter'
]
