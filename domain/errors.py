class EngineError(Exception):
    """Base class for entitlement, program and dashboard engine errors."""


class DataIntegrityError(EngineError):
    """A referenced entity (package, template) is missing."""

    def __init__(self, message, entity=None, entity_id=None):
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


class MalformedPayloadError(EngineError):
    """A single program or supplement entry failed shape validation."""

    def __init__(self, message, index=None):
        super().__init__(message)
        self.index = index


class TransientStoreError(EngineError):
    """The batched read feeding the engine failed. Always propagates."""
