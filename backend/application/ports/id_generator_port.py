from __future__ import annotations

from typing import Protocol


class IdGeneratorPort(Protocol):
    def new_id(self) -> str:
        ...
