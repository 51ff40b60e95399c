"""
passforge.generator
Secure password generator using Python's secrets module.

A request is validated, then one character is drawn from every enabled
character class, the rest is filled from the combined pool and the whole
sequence is shuffled. Every draw goes through a cryptographically secure
source unless a caller injects its own ``random.Random`` (tests do).
"""

from dataclasses import dataclass
from random import Random
from secrets import SystemRandom
import string
from typing import Any, List, Mapping, Optional, Tuple


UPPERCASE = string.ascii_uppercase
LOWERCASE = string.ascii_lowercase
NUMBERS = string.digits
SYMBOLS = "!@#$%^&*()_+-=[]{}|;:,.<>?"

MIN_LENGTH = 6
MAX_LENGTH = 32

_sysrand = SystemRandom()


class PasswordOptionsError(ValueError):
    """Request cannot be generated; the caller should fix its input."""

    code = "invalid_request"


class InvalidLength(PasswordOptionsError):
    code = "invalid_length"

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message or f"Password length must be between {MIN_LENGTH} and {MAX_LENGTH} characters"
        )


class NoCharacterClassSelected(PasswordOptionsError):
    code = "no_character_class"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "At least one character type must be selected")


class InternalInvariantViolation(RuntimeError):
    """A generation bug, never the caller's fault."""


# external (camelCase) field name -> attribute name
_JSON_FLAGS = {
    "includeUppercase": "include_uppercase",
    "includeLowercase": "include_lowercase",
    "includeNumbers": "include_numbers",
    "includeSymbols": "include_symbols",
}


@dataclass(frozen=True)
class GenerationRequest:
    length: int = 12
    include_uppercase: bool = True
    include_lowercase: bool = True
    include_numbers: bool = True
    include_symbols: bool = False

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "GenerationRequest":
        """
        Build a request from the HTTP shape
        {length, includeUppercase, includeLowercase, includeNumbers, includeSymbols}.
        Missing flags count as disabled.
        """
        length = data.get("length")
        # bool is an int subclass, reject it explicitly
        if isinstance(length, bool) or not isinstance(length, int):
            raise InvalidLength("Password length must be an integer")

        flags = {}
        for key, attr in _JSON_FLAGS.items():
            value = data.get(key, False)
            if not isinstance(value, bool):
                raise PasswordOptionsError(f"{key} must be a boolean")
            flags[attr] = value
        return cls(length=length, **flags)

    def to_json(self) -> dict:
        out = {"length": self.length}
        for key, attr in _JSON_FLAGS.items():
            out[key] = getattr(self, attr)
        return out


def check_symbols(symbols: str) -> str:
    """Reject symbol rosters that would overlap the other classes."""
    if not symbols:
        raise ValueError("symbol set must not be empty")
    bad = [c for c in symbols if c.isalnum() or c.isspace()]
    if bad:
        raise ValueError(f"symbol set contains non-symbol characters: {''.join(bad)!r}")
    # a repeated symbol would be drawn more often than the others
    if len(set(symbols)) != len(symbols):
        raise ValueError(f"symbol set contains duplicate characters: {symbols!r}")
    return symbols


def validate(request: GenerationRequest) -> GenerationRequest:
    # an empty selection is reported whatever the length
    if not (
        request.include_uppercase
        or request.include_lowercase
        or request.include_numbers
        or request.include_symbols
    ):
        raise NoCharacterClassSelected()
    if isinstance(request.length, bool) or not isinstance(request.length, int):
        raise InvalidLength("Password length must be an integer")
    if request.length < MIN_LENGTH or request.length > MAX_LENGTH:
        raise InvalidLength()
    return request


def enabled_classes(request: GenerationRequest, symbols: Optional[str] = None) -> List[Tuple[str, str]]:
    """(name, alphabet) pairs in canonical order: uppercase, lowercase, numbers, symbols."""
    classes = []
    if request.include_uppercase:
        classes.append(("uppercase", UPPERCASE))
    if request.include_lowercase:
        classes.append(("lowercase", LOWERCASE))
    if request.include_numbers:
        classes.append(("numbers", NUMBERS))
    if request.include_symbols:
        classes.append(("symbols", check_symbols(symbols) if symbols is not None else SYMBOLS))
    return classes


def character_pool(request: GenerationRequest, symbols: Optional[str] = None) -> str:
    return "".join(alphabet for _, alphabet in enabled_classes(request, symbols))


def _assemble(alphabets: List[str], length: int, rng: Random) -> str:
    password_chars = [rng.choice(a) for a in alphabets]

    remaining = length - len(password_chars)
    if remaining < 0:
        raise InternalInvariantViolation(
            f"{len(password_chars)} required characters do not fit in length {length}"
        )

    pool = "".join(alphabets)
    for _ in range(remaining):
        password_chars.append(rng.choice(pool))

    rng.shuffle(password_chars)
    return "".join(password_chars)


def generate(
    request: GenerationRequest,
    rng: Optional[Random] = None,
    symbols: Optional[str] = None,
) -> str:
    """
    Generate a password for a request.

    rng defaults to the OS CSPRNG; pass a seeded random.Random only in tests.
    Raises PasswordOptionsError subclasses for invalid requests.
    """
    validate(request)
    alphabets = [alphabet for _, alphabet in enabled_classes(request, symbols)]
    return _assemble(alphabets, request.length, rng or _sysrand)


def generate_password(
    length: int = 12,
    include_uppercase: bool = True,
    include_lowercase: bool = True,
    include_numbers: bool = True,
    include_symbols: bool = False,
    symbols: Optional[str] = None,
) -> str:
    request = GenerationRequest(
        length=length,
        include_uppercase=include_uppercase,
        include_lowercase=include_lowercase,
        include_numbers=include_numbers,
        include_symbols=include_symbols,
    )
    return generate(request, symbols=symbols)
