from __future__ import annotations

from uuid import uuid4

from application.ports.id_generator_port import IdGeneratorPort


class UuidIdGenerator(IdGeneratorPort):
    def new_id(self) -> str:
        return str(uuid4())
