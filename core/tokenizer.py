"""分词器：原始字符串 -> Token序列"""
import logging

from core.token_system import Token, Notation, OPERATORS, BRACKETS

logger = logging.getLogger(__name__)


def tokenize(text, notation):
    """
    按声明的记法切分输入，任何输入都不会抛异常

    Args:
        text: 原始输入
        notation: Notation
    Returns:
        Token列表（空输入返回空列表，由校验器拒绝）
    """
    if text is None:
        return []
    if notation == Notation.INFIX:
        return tokenize_infix(text)
    return _tokenize_polish(text)


def _tokenize_polish(text):
    """前缀/后缀：先去掉括号；含空白则按空白切分，否则逐字符切分"""
    stripped = ''.join(ch for ch in text if ch not in BRACKETS).strip()

    if any(ch.isspace() for ch in stripped):
        tokens = [Token(part) for part in stripped.split()]
    else:
        # 紧凑写法：每个字符就是一个Token
        tokens = [Token(ch) for ch in stripped]

    logger.debug(f"Tokens: {' '.join(t.value for t in tokens)}")
    return tokens


def tokenize_infix(text):
    """中缀：逐字符扫描，操作符和括号各自成为Token，其余字符累积为多字符操作数"""
    tokens = []
    buffer = []

    def flush():
        if buffer:
            tokens.append(Token(''.join(buffer)))
            buffer.clear()

    for ch in text:
        if ch.isspace():
            flush()
            continue
        if ch in OPERATORS or ch in BRACKETS:
            flush()
            tokens.append(Token(ch))
        else:
            buffer.append(ch)
    flush()

    logger.debug(f"Infix Tokens: {' '.join(t.value for t in tokens)}")
    return tokens


def tokenize_characters(text):
    """字符串反转与括号匹配：每个字符（含空白）都是一个Token"""
    if not text:
        return []
    return [Token(ch) for ch in text]
