import logging
from pathlib import Path

from protowire.bootstrap.config.loader import get_cli_args
from protowire.bootstrap.config.settings import ProtowireConfig
from protowire.bootstrap.deps import get_config, get_renderer
from protowire.core.codec.inspect import inspect_message
from protowire.core.errors import DecodeError
from protowire.core.helpers.utils import setup_logging

logger = logging.getLogger("bootstrap.cli")


def dump(
    data: bytes,
    config: ProtowireConfig,
    fmt: str | None = None,
    max_depth: int | None = None,
) -> str:
    fields = inspect_message(
        data,
        max_depth=config.inspect.max_depth if max_depth is None else max_depth,
        max_length=config.decoder.max_length,
    )
    renderer = get_renderer(fmt or config.output.format)
    return renderer.render([field.to_dict() for field in fields])


def main():
    args = get_cli_args()
    setup_logging(args.log_level)
    config = get_config(args.config)

    try:
        data = Path(args.file).read_bytes()
    except OSError as exc:
        logger.error(f"Cannot read {args.file}: {exc}")
        raise SystemExit(1)

    try:
        output = dump(data, config, fmt=args.format, max_depth=args.max_depth)
    except DecodeError as exc:
        logger.error(f"Failed to decode {args.file}: {exc}")
        raise SystemExit(1)

    print(output)


if __name__ == "__main__":
    main()
