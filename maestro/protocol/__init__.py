from maestro.protocol.models import (
    ActionType,
    Artboard,
    ElementDescriptor,
    ElementKind,
    GenerateRequest,
    GenerateResponse,
    ValidateRequest,
)
from maestro.protocol.schema_validation import (
    ACTION_SCHEMA,
    GENERATE_RESPONSE_SCHEMA,
    ProtocolValidationError,
    ProtocolValidator,
)

__all__ = [
    "ACTION_SCHEMA",
    "GENERATE_RESPONSE_SCHEMA",
    "ActionType",
    "Artboard",
    "ElementDescriptor",
    "ElementKind",
    "GenerateRequest",
    "GenerateResponse",
    "ProtocolValidationError",
    "ProtocolValidator",
    "ValidateRequest",
]
