"""主程序入口 - 在终端中逐步展示表达式转换、字符串反转和括号匹配"""
import argparse
import logging
import sys

from config.config import LOGGING_CONFIG, HISTORY_CONFIG, PRACTICE_CONFIG, validate_config
from core import Mode
from history import HistoryRepository, SampleLibrary
from simulation import ExpressionSession
from utils.formatting import format_event, format_remaining

logger = logging.getLogger(__name__)


def run_expression(session, text, mode, quiet=False, out=None):
    """
    运行一条表达式直到结束

    Returns:
        True 表示成功（括号匹配模式下表示平衡）
    """
    out = out or sys.stdout
    validation = session.start(text, mode)
    print(f"=== {session.mode.label}: {text}", file=out)
    if not validation:
        print(f"Invalid input: {validation.reason}", file=out)
        return False

    if not quiet:
        print(format_remaining(session.remaining(), ' '), file=out)

    events = []
    index = 0
    while True:
        next_token = session.peek_next()
        event = session.advance()
        events.append(event)
        index += 1
        if not quiet:
            if next_token is not None:
                print(f"      next: {next_token.description}", file=out)
            print(format_event(event, index), file=out)
        if event.is_terminal:
            break

    last = events[-1]
    if last.error is not None:
        print(f"Final Result: {session.result or 'failed'} ({last.reason})", file=out)
        return False
    print(f"Final Result: {last.result}", file=out)
    return True


def main(args):
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format=LOGGING_CONFIG["format"]
    )
    validate_config()

    if args.list_modes:
        for mode in Mode:
            print(f"{mode.index}: {mode.label}")
        return 0

    session = ExpressionSession(history=HistoryRepository(), samples=SampleLibrary())
    if args.list_samples:
        for mode, expressions in session.samples.all().items():
            print(f"{mode.label}:")
            for expression in expressions:
                print(f"    {expression}")
        return 0

    mode = Mode.from_label(args.mode)
    expressions = list(args.expression or [])

    if args.random_operators is not None:
        # 练习表达式按模式的源记法生成
        expressions.append(session.practice_expression(mode, args.random_operators, seed=args.random_seed))

    if not expressions:
        expressions = session.sample_expressions(mode)
        logger.info(f"No expression given, running {len(expressions)} samples for {mode.label}")

    failures = 0
    for text in expressions:
        if not run_expression(session, text, mode, quiet=args.quiet):
            failures += 1

    if args.export_history:
        session.history.export_csv(args.export_history)

    logger.info(f"Processed {len(expressions)} expressions, {failures} failed")
    return 1 if failures else 0


def build_parser():
    parser = argparse.ArgumentParser(description="Stack expression converter and visualizer (terminal)")

    parser.add_argument(
        "--mode",
        type=str,
        default=Mode.INFIX_TO_POSTFIX.label,
        help="Mode label, enum name or index (see --list_modes)"
    )
    parser.add_argument(
        "--expression",
        type=str,
        action="append",
        help="Expression to process; may be given more than once"
    )
    parser.add_argument(
        "--list_modes",
        action="store_true",
        help="List the available modes"
    )
    parser.add_argument(
        "--list_samples",
        action="store_true",
        help="List the sample expressions for every mode"
    )
    parser.add_argument(
        "--random_operators",
        type=int,
        default=None,
        help="Also process a random infix practice expression with this many operators"
    )
    parser.add_argument(
        "--random_seed",
        type=int,
        default=PRACTICE_CONFIG["random_seed"],
        help="Random seed for the practice expression"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only print the final result of each expression"
    )
    parser.add_argument(
        "--export_history",
        type=str,
        nargs="?",
        const=HISTORY_CONFIG["export_path"],
        default=None,
        help="Save the conversion history as CSV"
    )
    parser.add_argument(
        "--log_level",
        type=str,
        default=LOGGING_CONFIG["level"],
        help="Logging level (DEBUG, INFO, WARNING, ...)"
    )
    return parser


if __name__ == "__main__":
    sys.exit(main(build_parser().parse_args()))
