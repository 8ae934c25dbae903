import argparse
import json
import logging
import sys

from taskmanager.config import settings
from taskmanager.sentry import capture_exception, init_sentry, is_enabled
from taskmanager.sentry import flush as sentry_flush
from taskmanager.services.task import ParsedTask


def setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    with open(source, encoding="utf-8") as handle:
        return handle.read()


def print_tasks(tasks: list[ParsedTask]) -> None:
    print(json.dumps([task.to_dict() for task in tasks], indent=2))


def parse_command(args: argparse.Namespace) -> None:
    from taskmanager.services.parser import TaskParser

    task = TaskParser(timezone=args.timezone).parse(args.text)
    print(json.dumps(task.to_dict(), indent=2))


def split_command(args: argparse.Namespace) -> None:
    from taskmanager.services.gemini import GeminiClient
    from taskmanager.services.multi_task import MultiTaskParser
    from taskmanager.services.parser import TaskParser

    client = GeminiClient()
    try:
        parser = MultiTaskParser(task_parser=TaskParser(timezone=args.timezone), client=client)
        if args.ai:
            print_tasks(parser.parse_with_ai(args.text))
        else:
            print_tasks(parser.parse_multiple_tasks(args.text))
    finally:
        client.close()


def transcript_command(args: argparse.Namespace) -> None:
    from taskmanager.services.parser import TaskParser
    from taskmanager.services.transcript import TranscriptParser

    parser = TranscriptParser(task_parser=TaskParser(timezone=args.timezone))
    print_tasks(parser.extract_tasks(read_source(args.source)))


def minutes_command(args: argparse.Namespace) -> None:
    from taskmanager.services.gemini import GeminiClient
    from taskmanager.services.meeting_minutes import MeetingMinutesAnalyzer

    client = GeminiClient()
    try:
        print_tasks(MeetingMinutesAnalyzer(client=client).analyze(read_source(args.source)))
    finally:
        client.close()


def enhance_command(args: argparse.Namespace) -> None:
    from taskmanager.services.enhancer import TaskEnhancer
    from taskmanager.services.gemini import GeminiClient
    from taskmanager.services.parser import TaskParser

    task = TaskParser(timezone=args.timezone).parse(args.text)
    client = GeminiClient()
    try:
        enhanced = TaskEnhancer(client=client).enhance_task(task)
    finally:
        client.close()
    print(json.dumps(enhanced.to_dict(), indent=2))


def check_command(args: argparse.Namespace) -> None:
    print("Task Manager Configuration Check\n")

    checks = [
        ("Gemini API Key", settings.has_gemini),
        ("Sentry DSN", settings.has_sentry),
    ]
    for name, configured in checks:
        status = "OK" if configured else "MISSING"
        symbol = "+" if configured else "-"
        print(f"  [{symbol}] {name}: {status}")

    print(f"\n  Timezone: {args.timezone or settings.user_timezone}")
    print(f"  Gemini model: {settings.gemini_model}")
    print(f"  Known names: {', '.join(settings.known_names)}")
    print(f"  Error tracking: {'on' if is_enabled() else 'off'}")

    print()
    if settings.has_gemini:
        print("AI enhancement enabled.")
    else:
        print("No Gemini key: enhancement and minutes analysis use local rules.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Natural-language task parser")
    parser.add_argument("--timezone", help="IANA timezone for resolving dates")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    parse = subparsers.add_parser("parse", help="Parse a single task sentence")
    parse.add_argument("text")
    parse.set_defaults(handler=parse_command)

    split = subparsers.add_parser("split", help="Split and parse several tasks")
    split.add_argument("text")
    split.add_argument("--ai", action="store_true", help="Ask Gemini to extract the tasks")
    split.set_defaults(handler=split_command)

    transcript = subparsers.add_parser("transcript", help="Extract tasks from a transcript")
    transcript.add_argument("source", help="Transcript file, or - for stdin")
    transcript.set_defaults(handler=transcript_command)

    minutes = subparsers.add_parser("minutes", help="Analyze meeting minutes")
    minutes.add_argument("source", help="Minutes file, or - for stdin")
    minutes.set_defaults(handler=minutes_command)

    enhance = subparsers.add_parser("enhance", help="Parse then enhance a task")
    enhance.add_argument("text")
    enhance.set_defaults(handler=enhance_command)

    check = subparsers.add_parser("check", help="Check configuration")
    check.set_defaults(handler=check_command)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging()

    # Initialize Sentry for error tracking (disabled if no DSN configured)
    init_sentry(
        dsn=settings.sentry_dsn if settings.has_sentry else None,
        environment=settings.sentry_environment,
    )

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return

    try:
        handler(args)
    except Exception as exc:
        capture_exception(exc)
        raise
    finally:
        sentry_flush(timeout=2.0)


if __name__ == "__main__":
    main()
