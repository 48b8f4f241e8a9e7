#!/usr/bin/env python3
"""
ELIZA Responder - Main Entry Point
==================================

This is the main entry point for ELIZA Responder.
It provides a command-line interface for chatting with the engine
in various modes.

Usage:
    python main.py                # Chat at the prompt
    python main.py --web          # Start web API
    python main.py --tui          # Start terminal UI
    python main.py --test "Hi"    # Answer one message and exit
    python main.py --check        # Validate the rule set
    python main.py --help         # Show help
"""

import sys
import argparse
from pathlib import Path
from typing import List, Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from core.config import load_config, Config
from core.logging import setup_logging, get_logger
from core.exceptions import ElizaError
from services.conversation import Conversation
from services.responder import ElizaResponder

logger = get_logger("main")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="ELIZA Responder - Rule-driven conversational responder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                          Chat at the prompt
  python main.py --rules my_rules.json    Chat using a custom rule set
  python main.py --web --port 9000        Start web API on port 9000
  python main.py --tui                    Start terminal UI
  python main.py --test "I am sad"        Answer one message
  python main.py --check                  Validate and summarise the rule set
        """
    )

    # Mode selection (mutually exclusive)
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--web",
        action="store_true",
        help="Start web API server"
    )
    mode_group.add_argument(
        "--tui",
        action="store_true",
        help="Start terminal UI"
    )
    mode_group.add_argument(
        "--test",
        type=str,
        metavar="MESSAGE",
        help="Answer a single message and exit"
    )
    mode_group.add_argument(
        "--check",
        action="store_true",
        help="Validate the rule set and print a summary"
    )

    # Optional arguments
    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--rules",
        type=str,
        metavar="PATH",
        help="Rule set file (JSON or YAML); overrides configured and stored rules"
    )
    parser.add_argument(
        "--seed",
        type=int,
        metavar="N",
        help="Seed for phrase selection (repeatable replies)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port for web API (default: from config, 8080)"
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host for web API (default: from config, 127.0.0.1)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode"
    )

    return parser.parse_args(argv)


def run_chat_loop(responder: ElizaResponder, prompt: str = "> ") -> None:
    """
    Chat on stdin/stdout until a farewell or end of input.

    Args:
        responder: Responder holding the engine
        prompt: Input prompt
    """
    engine = responder.engine
    if engine is None:
        print("Error: no rules defined")
        return

    conversation = Conversation(engine)
    print(conversation.start())

    while conversation.is_active:
        try:
            line = input(prompt)
        except EOFError:
            print()
            break

        if not line.strip():
            continue

        response = conversation.reply(line.strip())
        print(response.message)


def run_test_message(responder: ElizaResponder, message: str) -> None:
    """Answer one message and show how it was produced."""
    print(f"\nTest Message: {message}")
    print("-" * 50)

    result = responder.handle_message(message)

    print(f"\nResponse:")
    print(f"  Source: {result.source}")
    print(f"  Message: {result.response}")
    print(f"  Keyword: {result.keyword or '-'}")
    print(f"  Farewell: {'yes' if result.is_farewell else 'no'}")
    print(f"  Latency: {result.latency_ms}ms")


def run_check(responder: ElizaResponder) -> None:
    """Print a summary of the loaded rule set."""
    ruleset = responder.engine.ruleset
    decompositions = sum(len(k.decompositions) for k in ruleset.keywords)

    print("\n" + "=" * 50)
    print("Rule Set Check")
    print("=" * 50)
    print(f"  Greetings:       {len(ruleset.initial)}")
    print(f"  Farewells:       {len(ruleset.final)}")
    print(f"  Quit phrases:    {len(ruleset.quit)}")
    print(f"  Pre rewrites:    {len(ruleset.pre)}")
    print(f"  Post rewrites:   {len(ruleset.post)}")
    print(f"  Synonym classes: {len(ruleset.synonyms)}")
    print(f"  Keywords:        {len(ruleset.keywords)}")
    print(f"  Decompositions:  {decompositions}")
    print("\nTop keywords by weight:")
    for keyword in ruleset.keywords[:5]:
        print(f"  {keyword.weight:>4}  {keyword.word}")
    print("\n✓ Rule set is valid")


def run_web_ui(config: Config, host: str, port: int, debug: bool) -> None:
    """Start the web API server."""
    from ui.web.app import run_app

    print(f"Starting web API at http://{host}:{port}")
    print("Press Ctrl+C to stop")

    run_app(host=host, port=port, debug=debug, config=config)


def run_terminal_ui(config: Config, responder: ElizaResponder) -> None:
    """Start the terminal UI."""
    from ui.terminal.app import ElizaApp

    ElizaApp(config=config, responder=responder).run()


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Apply command-line overrides to the loaded configuration."""
    if args.rules:
        config.engine.rules_path = args.rules
        config.engine.persist_rules = False
    if args.seed is not None:
        config.engine.seed = args.seed
    if args.host:
        config.ui.web_host = args.host
    if args.port:
        config.ui.web_port = args.port
    if args.debug:
        config.debug = True

    config.validate()
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = apply_overrides(load_config(args.config), args)

        # Console logging only with --debug or --web
        setup_logging(
            log_dir=config.log_dir,
            log_level="DEBUG" if args.debug else "INFO",
            console_output=args.debug or args.web
        )

        if args.web:
            run_web_ui(config, config.ui.web_host, config.ui.web_port, args.debug or config.ui.web_debug)
            return 0

        responder = ElizaResponder.from_config(config)

        if args.tui:
            run_terminal_ui(config, responder)
        elif args.test:
            run_test_message(responder, args.test)
        elif args.check:
            run_check(responder)
        else:
            run_chat_loop(responder, config.ui.prompt)

        return 0

    except ElizaError as e:
        print(f"\nError: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 0


if __name__ == "__main__":
    sys.exit(main())
