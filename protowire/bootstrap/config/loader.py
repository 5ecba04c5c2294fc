import argparse
import os
from functools import lru_cache
from pathlib import Path

DEFAULT_CONFIGFILE = "protowire.yaml"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="protodump",
        description=(
            "Dump a binary protobuf message without its schema.\n\n"
            "Every field is printed with its number, wire type and raw value.\n"
            "Length-delimited payloads are shown as text, nested messages or\n"
            "hex-encoded bytes, whichever fits best."
        ),
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument(
        "file",
        type=str,
        help="Path to a file holding exactly one serialized message"
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Path to a protowire configuration file"
    )

    parser.add_argument(
        "-f", "--format",
        type=str,
        choices=["json", "yaml"],
        help="Output format. Overrides output.format from the configuration."
    )

    parser.add_argument(
        "-d", "--max-depth",
        type=int,
        help=(
            "How many levels of embedded messages to expand.\n"
            "Overrides inspect.max_depth from the configuration."
        )
    )

    parser.add_argument(
        "-l", "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=(
            "Logging verbosity.\n"
            "DEBUG    → traces rejected nested-message guesses.\n"
            "WARNING  → only warnings and errors (default).\n"
            "ERROR    → only errors."
        ),
    )

    return parser


@lru_cache
def get_cli_args() -> argparse.Namespace:
    return build_parser().parse_args()


def resolve_configfile(cli_path: str | None) -> Path | None:
    # Priority: CLI > ENV > default file in current working directory
    raw = cli_path or os.getenv("PROTOWIRECONFIG")

    if raw is None:
        file = Path.cwd() / DEFAULT_CONFIGFILE
        return file if file.is_file() else None

    file = Path(raw)
    if not file.is_file():
        raise SystemExit(
            f"[config] Configuration file not found: '{file}'.\n"
            "  - Use --config <file.yaml>\n"
            "  - Or set the PROTOWIRECONFIG environment variable\n"
            f"  - Or place a '{DEFAULT_CONFIGFILE}' file in the current working directory."
        )

    return file
