#!/usr/bin/env python3
"""
BioLens command compiler

Main entry point for compiling model output, talking to the model, and
serving the chat endpoint.

Usage:
    python main.py compile '```json {"action":"color_residue","chain":"a","resId":57,"color":"red"} ```'
    echo '{"action":"reset_view"}' | python main.py compile
    python main.py chat "把A链第57号残基染成红色"
    python main.py chat "What is a ligand?" --mode answer
    python main.py serve --port 8000
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from biolens.config import Settings, load_settings
from biolens.intent.command_normalizer import CommandNormalizer
from biolens.pipeline.compiler import StrictCompiler


# ============================================================
# LOGGING CONFIGURATION
# ============================================================

def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None):
    """Configure logging."""
    logger.remove()  # Remove default handler

    # Console output with colors
    logger.add(
        sys.stderr,
        level=log_level.upper(),
        format="<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{module}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>",
        colorize=True,
    )

    # File output
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {module}:{line} | {message}",
            rotation="10 MB",
            retention="7 days",
        )


# ============================================================
# COMMANDS
# ============================================================

def _cmd_compile(args: argparse.Namespace, settings: Settings) -> int:
    text = args.text if args.text is not None else sys.stdin.read()
    compiler = StrictCompiler(CommandNormalizer(max_batch_depth=settings.max_batch_depth))
    print(compiler.compile(text))
    return 0


def _cmd_chat(args: argparse.Namespace, settings: Settings) -> int:
    from biolens.intent.llm_interpreter import LLMInterpreter

    result = LLMInterpreter(settings).interpret(args.message, args.mode)
    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    return 1 if result.error else 0


def _cmd_serve(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    from biolens.api.server import create_app

    host = args.host or settings.host
    port = args.port or settings.port
    logger.info(f"Serving BioLens chat API on http://{host}:{port}")
    uvicorn.run(create_app(settings), host=host, port=port, log_level="info")
    return 0


# ============================================================
# ENTRY POINT
# ============================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="BioLens - natural language to Mol* viewer commands",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to configuration file (default: config/settings.yaml)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: from config, INFO)",
    )

    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Log file path (default: from config)",
    )

    sub = parser.add_subparsers(dest="cmd")

    p_compile = sub.add_parser("compile", help="Compile model output into a strict command")
    p_compile.add_argument("text", nargs="?", default=None, help="Model output (reads stdin if omitted)")
    p_compile.set_defaults(func=_cmd_compile)

    p_chat = sub.add_parser("chat", help="Send a request to the model")
    p_chat.add_argument("message", help="Natural language request")
    p_chat.add_argument("--mode", choices=["command", "answer"], default="command")
    p_chat.set_defaults(func=_cmd_chat)

    p_serve = sub.add_parser("serve", help="Run the HTTP chat endpoint")
    p_serve.add_argument("--host", type=str, default=None)
    p_serve.add_argument("--port", type=int, default=None)
    p_serve.set_defaults(func=_cmd_serve)

    return parser


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings(args.config)

    # Setup logging
    setup_logging(args.log_level or settings.log_level, args.log_file or settings.log_file)

    if not hasattr(args, "func"):
        parser.print_help()
        return 0
    return args.func(args, settings)


if __name__ == "__main__":
    sys.exit(main())
