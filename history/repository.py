"""history/repository.py - 已完成转换的内存历史记录"""
import logging
from datetime import datetime

import pandas as pd

from config.config import HISTORY_CONFIG

logger = logging.getLogger(__name__)


class HistoryRecord:
    """{input, result, mode}，创建后不再修改"""

    __slots__ = ('input', 'result', 'mode', 'created_at')

    def __init__(self, input_text, result, mode, created_at=None):
        self.input = input_text
        self.result = result
        self.mode = mode
        self.created_at = created_at or datetime.now()

    def as_dict(self):
        return {
            'input': self.input,
            'result': self.result,
            'mode': self.mode,
            'created_at': self.created_at,
        }

    def __repr__(self):
        return f"HistoryRecord({self.mode}: {self.input!r} -> {self.result!r})"


class HistoryRepository:
    """只追加的历史列表；设置 max_records 时最旧的记录被挤出"""

    def __init__(self, max_records=None):
        self.max_records = max_records if max_records is not None else HISTORY_CONFIG["max_records"]
        self._records = []

    def add(self, input_text, result, mode):
        """
        Args:
            input_text: 用户输入
            result: 最终结果
            mode: 模式（Mode 或标签字符串）
        Returns:
            新的 HistoryRecord
        """
        label = getattr(mode, 'label', mode)
        record = HistoryRecord(input_text, result, label)
        self._records.append(record)

        if self.max_records and len(self._records) > self.max_records:
            # 删除最旧的条目（FIFO）
            del self._records[:len(self._records) - self.max_records]

        logger.debug(f"History record added: {record}")
        return record

    @property
    def records(self):
        return list(self._records)

    def latest(self, n=1):
        if n <= 0:
            return []
        return self._records[-n:][::-1]

    def for_mode(self, mode):
        label = getattr(mode, 'label', mode)
        return [r for r in self._records if r.mode == label]

    def to_frame(self):
        """历史记录转为 DataFrame"""
        columns = HISTORY_CONFIG["columns"]
        if not self._records:
            return pd.DataFrame(columns=columns)
        return pd.DataFrame.from_records([r.as_dict() for r in self._records], columns=columns)

    def export_csv(self, path=None):
        path = path or HISTORY_CONFIG["export_path"]
        logger.info(f"Saving {len(self._records)} history records to {path}")
        self.to_frame().to_csv(path, index=False)
        return path

    def __len__(self):
        return len(self._records)

    def __iter__(self):
        return iter(list(self._records))
