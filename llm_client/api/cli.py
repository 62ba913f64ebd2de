"""
Command-line adapter for llm-client.

Architectural role:
- Parses command-line flags and loads the configuration file.
- Configures the log sink (`LOG_FILE`, or stderr when it cannot be opened).
- Delegates the request pipeline to `llm_client.core.engine.run`.

Input validation behavior:
- Unknown flags, missing values and non-positive `--max-tokens` print the help
  text to stderr and exit with status 1.
- `-p` and `-f` are mutually exclusive; without either the prompt is read
  from stdin.

Error handling strategy:
- A missing or unreadable configuration file is reported (missing ones with
  a hint) and exits 1. The message goes to the default log file and stderr.
- Every other fatal error is reported by the engine.

Side effects:
- Appends to the log file.
- Writes the response to stdout or to the `--output` file.
"""

import argparse
import logging
import os
import sys
from typing import Sequence

from llm_client.core import engine
from llm_client.core.errors import ConfigError, ConfigNotFoundError
from llm_client.core.types import PromptSource
from llm_client.llm.provider_config import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_LOG_FILE,
    LOG_FILE_KEY,
    load_config,
    supported_modes,
)


logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
PACKAGE_LOGGER = "llm_client"

EPILOG = f"""\
Configuration (in {DEFAULT_CONFIG_FILE} or specified with -c):
  DEFAULT_LLM_MODE   : Default LLM mode (e.g., openai, gemini)
  DEFAULT_MAX_TOKEN  : Default maximum number of output tokens
  LOG_FILE           : Path to the log file
  <MODE>_API_KEY     : API key for the specific mode
  <MODE>_API_URL     : API endpoint URL for the specific mode
  <MODE>_MODEL       : Model name for the specific mode
  <MODE>_JSON_PATH   : Field path to extract response text (e.g., '.choices[0].message.content')

Supported modes: {", ".join(supported_modes())}

Examples:
  llm-client -p "Tell me a joke."
  llm-client -f my_prompt.txt -o response.json
  llm-client -m gemini -p "What is the capital of India?" -e
  cat my_long_prompt.txt | llm-client -m openai -e
"""


# =========================================================
# ARGUMENT PARSING
# =========================================================

class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that prints full help and exits 1 on usage errors."""

    def error(self, message):
        self.print_help(sys.stderr)
        self.exit(1, f"\n{self.prog}: error: {message}\n")


def positive_int(value: str) -> int:
    """argparse type for `--max-tokens`."""
    text = value.strip()
    if not text.isascii() or not text.isdigit() or int(text) <= 0:
        raise argparse.ArgumentTypeError(f"Max tokens value ('{value}') must be a positive integer.")
    return int(text)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="llm-client",
        description="Send a prompt to a configurable LLM HTTP provider.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("-p", "--prompt", help="Provide prompt directly as a string.")
    source.add_argument(
        "-f",
        "--file",
        help="Read prompt from specified file. If neither -p nor -f is given, reads from stdin.",
    )
    parser.add_argument(
        "-m",
        "--mode",
        help="LLM provider mode (e.g., 'openai', 'gemini'). Overrides DEFAULT_LLM_MODE in config.",
    )
    parser.add_argument(
        "-k",
        "--max-tokens",
        type=positive_int,
        default=None,
        help="Maximum output tokens. Overrides DEFAULT_MAX_TOKEN in config.",
    )
    parser.add_argument("-o", "--output", help="Save response to specified file instead of stdout.")
    parser.add_argument(
        "-e",
        "--extract",
        action="store_true",
        help="Extract and print only the text response from JSON.",
    )
    parser.add_argument("-c", "--config", default=None, help="Specify an alternative configuration file.")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug details, including the request payload.",
    )
    return parser


def prompt_source_from_args(args: argparse.Namespace) -> PromptSource:
    if args.prompt is not None:
        return PromptSource.from_string(args.prompt)
    if args.file is not None:
        return PromptSource.from_file(args.file)
    return PromptSource.from_stdin()


# =========================================================
# LOGGING
# =========================================================

def configure_logging(log_file: str | None, verbose: bool = False) -> logging.Logger:
    """Attach one handler to the package logger.

    Args:
        log_file: File to append to. `None` or an unopenable path logs to stderr.
        verbose: Log at DEBUG instead of INFO.

    Returns:
        The configured package logger.

    Edge cases:
        - Handlers from a previous call are removed and closed first.
        - The log file's parent directory is created when missing.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    handler: logging.Handler
    fallback_reason = None
    if log_file:
        path = os.path.expanduser(log_file)
        try:
            parent = os.path.dirname(path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            handler = logging.FileHandler(path, encoding="utf-8")
        except OSError as exc:
            fallback_reason = f"Cannot open log file {path}: {exc}"
            handler = logging.StreamHandler(sys.stderr)
    else:
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    package_logger.propagate = False

    if fallback_reason:
        package_logger.warning(fallback_reason)
    return package_logger


# =========================================================
# MAIN
# =========================================================

def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, load config, and run the request pipeline.

    Returns:
        Process exit code: 0 on success, 1 on any fatal error.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        configure_logging(DEFAULT_LOG_FILE, args.verbose)
        logger.error("%s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        if isinstance(exc, ConfigNotFoundError):
            print("Please create it or specify with -c.", file=sys.stderr)
        return engine.EXIT_FAILURE

    configure_logging(config.get(LOG_FILE_KEY, DEFAULT_LOG_FILE), args.verbose)
    logger.info("Started.")

    return engine.run(
        args.mode,
        prompt_source_from_args(args),
        args.max_tokens,
        args.extract,
        args.output,
        config=config,
        on_usage_error=lambda: parser.print_usage(sys.stderr),
    )


if __name__ == "__main__":
    sys.exit(main())
