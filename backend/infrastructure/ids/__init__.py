from infrastructure.ids.uuid_generator import UuidIdGenerator

__all__ = ["UuidIdGenerator"]
