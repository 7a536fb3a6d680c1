"""历史记录模块 - 转换历史和示例表达式"""
from .repository import HistoryRecord, HistoryRepository
from .samples import SampleLibrary

__all__ = ['HistoryRecord', 'HistoryRepository', 'SampleLibrary']
