"""utils/formatting.py - 步骤描述与栈/剩余Token的文本展示"""


def describe_push(value, kind=None):
    if kind:
        return f"Pushed {kind}: {value}"
    return f"Pushed '{value}' onto stack"


def describe_pop_pair(operator, operand1, operand2):
    return [
        f"Starting new operation with operator '{operator}'",
        f"Popping first operand: {operand1}",
        f"Popping second operand: {operand2}",
    ]


def describe_combine(operator, result):
    return [
        f"Combining operands with operator '{operator}'",
        f"Created expression: {result}",
        "Placing result back in stack",
        f"Pushed '{result}' onto stack",
    ]


def format_stack(snapshot):
    """栈快照（底 -> 顶）渲染为一行，栈顶在右"""
    if not snapshot:
        return "[ ]"
    return "[ " + " | ".join(snapshot) + " ]  <- top"


def format_remaining(tokens, separator=' '):
    return "Remaining: " + separator.join(t.value for t in tokens)


def format_event(event, index=None):
    """
    CLI 输出用的一行事件描述

    Args:
        event: StepEvent
        index: 步骤序号（可选）
    """
    prefix = f"[{index:>3}] " if index is not None else ""
    message = "; ".join(event.messages) if event.messages else event.kind.value
    return f"{prefix}{event.kind.value:<12} {message}  {format_stack(event.stack)}"
