"""模拟模块 - 栈模拟引擎、对外接口和会话"""
from .state import SimulationStatus, EventKind, StepEvent, NextToken, SimulationState
from .engine import StackSimulation
from .api import (
    ConversionResult, tokenize, validate, convert, create_simulation,
    advance, peek_next, reset
)
from .session import ExpressionSession

__all__ = [
    'SimulationStatus', 'EventKind', 'StepEvent', 'NextToken', 'SimulationState',
    'StackSimulation', 'ConversionResult', 'tokenize', 'validate', 'convert',
    'create_simulation', 'advance', 'peek_next', 'reset', 'ExpressionSession'
]
