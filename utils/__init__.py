"""工具模块"""
from .formatting import (
    describe_push, describe_pop_pair, describe_combine, format_stack,
    format_remaining, format_event
)

__all__ = [
    'describe_push', 'describe_pop_pair', 'describe_combine', 'format_stack',
    'format_remaining', 'format_event'
]
