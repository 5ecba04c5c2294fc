from typing import Any, Protocol


class Renderer(Protocol):
    def render(self, data: list[dict[str, Any]]) -> str:
        ...
