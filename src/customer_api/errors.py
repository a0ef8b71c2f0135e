from typing import Any, Dict


class ValidationFailure(Exception):
    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__(f"Validation failed for fields: {', '.join(sorted(errors))}")


class NotFound(Exception):
    def __init__(self, resource: str, field: str, value: Any):
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(f"{resource} not found with {field}: '{value}'")


class UniquenessConflict(Exception):
    """A write hit a UNIQUE constraint in the store."""


class ConstraintViolation(Exception):
    """A query or write was rejected by a store-level constraint."""
