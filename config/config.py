"""配置文件"""

# 分词参数
TOKEN_CONFIG = {
    "operators": ["+", "-", "*", "/", "^"],
    "brackets": ["(", ")", "[", "]", "{", "}"],
    "precedence": {"+": 1, "-": 1, "*": 2, "/": 2, "^": 3},
    "min_polish_tokens": 2,  # 前缀/后缀输入至少一个操作符和一个操作数
}

# 模拟参数
SIMULATION_CONFIG = {
    "compact_separator": "",  # 单字符操作数时的拼接方式
    "spaced_separator": " ",  # 多字符操作数时的拼接方式
    "auto_play_interval": 2.0,  # 仅供外部调用方参考（秒），引擎不计时
}

# 历史记录
HISTORY_CONFIG = {
    "max_records": None,  # None 表示不限
    "export_path": "history.csv",
    "columns": ["input", "result", "mode", "created_at"],
}

# 日志
LOGGING_CONFIG = {
    "level": "INFO",
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}

# 随机练习表达式
PRACTICE_CONFIG = {
    "operand_pool": "ABCDEFGH",
    "default_operators": 3,
    "bracket_probability": 0.3,
    "random_seed": 42,
}

# 示例表达式（按模式标签）
SAMPLE_EXPRESSIONS = {
    "Prefix to Postfix": ["+AB", "*+AB-CD", "-+A*BCD", "^A+BC"],
    "Prefix to Infix": ["+AB", "*+AB-CD", "/-AB*CD", "+A*B^CD"],
    "Postfix to Prefix": ["AB+", "AB+CD-*", "ABC*+D-", "AB^C/"],
    "Postfix to Infix": ["AB+", "AB+CD-*", "ABC*+D-", "x y + z *"],
    "Infix to Prefix": ["A + B", "A * B + C / D", "(A + B) * (C - D)", "A ^ B ^ C"],
    "Infix to Postfix": ["A + B", "(A + B) * (C - D)", "A + B * C - D", "{[a + b] * c} / d"],
    "String Reversal": ["abc", "stack", "racecar", "Hello World"],
    "Bracket Balancing": ["({[]})", "([)]", "((a + b) * c", "{[()()]}"],
}


def validate_config():
    """验证配置的合理性"""
    assert set(TOKEN_CONFIG["operators"]) == set(TOKEN_CONFIG["precedence"]), \
        "every operator needs a precedence rank"
    assert not set(TOKEN_CONFIG["operators"]) & set(TOKEN_CONFIG["brackets"]), \
        "operators and brackets must be disjoint"
    assert HISTORY_CONFIG["max_records"] is None or HISTORY_CONFIG["max_records"] > 0, \
        "max_records must be None or positive"
    assert 0.0 <= PRACTICE_CONFIG["bracket_probability"] <= 1.0, \
        "bracket_probability must be a probability"
    assert len(SAMPLE_EXPRESSIONS) == 8, "one sample list per mode"
    return True
