import json
from functools import lru_cache
from typing import BinaryIO

from pydantic import ValidationError

from protowire.bootstrap.config.loader import resolve_configfile
from protowire.bootstrap.config.settings import ProtowireConfig
from protowire.core.codec.reader import ProtobufReader
from protowire.core.ports.render import Renderer
from protowire.infra.format_renderer import JsonRenderer, YamlRenderer


@lru_cache
def get_config(cli_path: str | None = None) -> ProtowireConfig:
    """
    Configuration from `cli_path` when given, otherwise from PROTOWIRECONFIG
    or ./protowire.yaml. Library callers leave `cli_path` unset.
    """
    configfile = resolve_configfile(cli_path)
    try:
        return ProtowireConfig.from_file(configfile)
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        errs = json.loads(ex.json())
        for err in errs:
            msg.append(f"  {'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}")
        raise SystemExit("\n".join(msg))


def get_renderer(fmt: str) -> Renderer:
    match fmt:
        case "json":
            return JsonRenderer()
        case "yaml":
            return YamlRenderer()
    raise ValueError(f"Unknown output format: {fmt}")


def new_reader(stream: BinaryIO, config: ProtowireConfig | None = None) -> ProtobufReader:
    """Reader honoring the decoder section of the configuration."""
    config = config or get_config()
    return ProtobufReader(
        stream,
        strict=config.decoder.strict_wire_types,
        max_length=config.decoder.max_length,
    )
