"""Command-line entry point for the IELTS evaluator."""
import sys
import json
import base64
import argparse
import logging
from pathlib import Path

from ielts_evaluator.config_manager import load_settings
from ielts_evaluator.errors import GeminiServiceError
from ielts_evaluator.logging_config import configure_logging
from ielts_evaluator.services import gemini_service

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ielts-evaluator", description="IELTS speaking evaluation via Gemini")
    parser.add_argument("--config", help="Path to a JSON config file")
    parser.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("ping", help="Check that the API key and model are reachable")

    analyze = subparsers.add_parser("analyze", help="Evaluate a recorded webm answer")
    analyze.add_argument("audio_file", type=Path, help="Path to the .webm recording")
    analyze.add_argument("--topic", required=True, help="Speaking topic the candidate answered")
    return parser


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(level=args.log_level)
    try:
        settings = load_settings(args.config)
    except (OSError, ValueError) as e:
        print(f"Error: could not load settings: {e}", file=sys.stderr)
        return 1

    if args.command == "ping":
        result = gemini_service.test_api_connection(settings)
        print(f"{'OK' if result.success else 'FAILED'}: {result.message}")
        return 0 if result.success else 1

    if not args.audio_file.exists():
        print(f"Error: file not found: {args.audio_file}", file=sys.stderr)
        return 2

    audio_base64 = base64.b64encode(args.audio_file.read_bytes()).decode("ascii")
    try:
        result = gemini_service.analyze_audio(audio_base64, args.topic, settings)
    except GeminiServiceError as e:
        print(f"Error [{e.code}]: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
