from typing import Dict, List

from tasktracker.constants.messages import ApiErrors, RepositoryErrors


class InvalidInputException(Exception):
    """Semantic validation failure detected by a service; carries field-level errors."""

    def __init__(self, field_errors: Dict[str, List[str] | str]):
        self.field_errors = {
            field: messages if isinstance(messages, list) else [messages] for field, messages in field_errors.items()
        }
        first_messages = next(iter(self.field_errors.values()), [])
        self.message = first_messages[0] if first_messages else ApiErrors.VALIDATION_ERROR
        super().__init__(self.message)


class ConflictException(Exception):
    reason = "conflict"

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ConcurrencyConflictException(ConflictException):
    reason = "version-conflict"

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(RepositoryErrors.VERSION_CONFLICT.format(entity, entity_id))
