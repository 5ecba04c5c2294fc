import json
from typing import Any

import yaml

from protowire.core.ports.render import Renderer


class JsonRenderer(Renderer):
    def render(self, data: list[dict[str, Any]]) -> str:
        return json.dumps(normalize(data), indent=2, sort_keys=False)


class YamlRenderer(Renderer):
    def render(self, data: list[dict[str, Any]]) -> str:
        return yaml.safe_dump(normalize(data), sort_keys=False, allow_unicode=True)


def normalize(obj: Any) -> Any:
    """Make an inspected field tree printable: raw bytes become hex strings."""
    if isinstance(obj, bytes):
        return obj.hex()

    if isinstance(obj, dict):
        return {k: normalize(v) for k, v in obj.items()}

    if isinstance(obj, (list, tuple)):
        return [normalize(x) for x in obj]

    return obj
