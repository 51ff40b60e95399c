"""PassForge: cryptographically secure password generation."""

from .generator import (
    GenerationRequest,
    InternalInvariantViolation,
    InvalidLength,
    NoCharacterClassSelected,
    PasswordOptionsError,
    generate,
    generate_password,
    validate,
)

__version__ = "1.0.0"
