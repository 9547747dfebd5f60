"""
PassVault - Password Generator Module

Everything the app knows about making and judging passwords lives here:
- generate_password(): random password from a character-class policy
- calculate_strength(): coarse 0-7 score and a Weak/Fair/Good/Strong label
- validate_password(): list of rule violations for a typed password

All three are pure functions (no I/O, no shared state), so they are safe
to call from anywhere, including several threads at once.
"""

import re
import secrets
from dataclasses import dataclass, field
from typing import List


# =============================================================================
# Character Classes
# =============================================================================

LOWERCASE = "abcdefghijklmnopqrstuvwxyz"
UPPERCASE = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
NUMBERS = "0123456789"
SYMBOLS = "!@#$%^&*()_+-=[]{}|;:,.<>?"

# Length bounds offered by the front end (slider range)
MIN_LENGTH = 8
MAX_LENGTH = 32
DEFAULT_LENGTH = 12

# ASCII only: non-ASCII letters count as "symbols" for scoring
_HAS_LOWER = re.compile(r"[a-z]")
_HAS_UPPER = re.compile(r"[A-Z]")
_HAS_DIGIT = re.compile(r"[0-9]")
_HAS_OTHER = re.compile(r"[^a-zA-Z0-9]")


class InvalidPolicy(ValueError):
    """Raised when a generator policy cannot produce a password."""


@dataclass
class GeneratorPolicy:
    """
    Options controlling password generation.

    Defaults match the "Add credential" form: 12 characters, upper, lower
    and digits on, symbols off.
    """
    length: int = DEFAULT_LENGTH
    include_uppercase: bool = True
    include_lowercase: bool = True
    include_numbers: bool = True
    include_symbols: bool = False


@dataclass(frozen=True)
class StrengthResult:
    score: int
    label: str


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


# =============================================================================
# Generation
# =============================================================================

def clamp_length(length: int) -> int:
    """Pull a requested length into the MIN_LENGTH..MAX_LENGTH range."""
    return max(MIN_LENGTH, min(MAX_LENGTH, length))


def build_charset(policy: GeneratorPolicy) -> str:
    """
    Concatenate the enabled character classes.

    Order is always lowercase, uppercase, numbers, symbols, so the same
    flags give the same charset no matter how the policy was built.

    Returns:
        Eligible characters (empty string if no class is enabled)
    """
    charset = ""
    if policy.include_lowercase:
        charset += LOWERCASE
    if policy.include_uppercase:
        charset += UPPERCASE
    if policy.include_numbers:
        charset += NUMBERS
    if policy.include_symbols:
        charset += SYMBOLS
    return charset


def generate_password(policy: GeneratorPolicy) -> str:
    """
    Generate a random password from a policy.

    Each character is drawn independently and uniformly (with replacement)
    from the eligible charset. There is no guarantee every enabled class
    shows up: a 12-char password with all classes on may still come out
    all lowercase.

    Randomness comes from secrets.choice() (os.urandom under the hood).

    Args:
        policy: Length and character-class flags

    Returns:
        Password of exactly policy.length characters

    Raises:
        InvalidPolicy: No class selected, or negative length
    """
    charset = build_charset(policy)
    if not charset:
        raise InvalidPolicy("At least one character type must be selected")
    if policy.length < 0:
        raise InvalidPolicy(f"Password length cannot be negative ({policy.length})")

    return "".join(secrets.choice(charset) for _ in range(policy.length))


# =============================================================================
# Strength Scoring
# =============================================================================

def strength_label(score: int) -> str:
    """Map a 0-7 score onto its label."""
    if score <= 2:
        return "Weak"
    if score <= 4:
        return "Fair"
    if score <= 6:
        return "Good"
    return "Strong"


def calculate_strength(password: str) -> StrengthResult:
    """
    Score a password from 0 to 7.

    Points:
    - Length: +1 at 8, +1 more at 12, +1 more at 16
    - One point each for a lowercase letter, an uppercase letter,
      a digit, and anything else (symbols, spaces, non-ASCII)

    This is a heuristic, not an entropy estimate.

    Args:
        password: Any string (empty is fine: score 0, "Weak")

    Returns:
        StrengthResult with score and label
    """
    score = 0

    if len(password) >= 8:
        score += 1
    if len(password) >= 12:
        score += 1
    if len(password) >= 16:
        score += 1

    if _HAS_LOWER.search(password):
        score += 1
    if _HAS_UPPER.search(password):
        score += 1
    if _HAS_DIGIT.search(password):
        score += 1
    if _HAS_OTHER.search(password):
        score += 1

    return StrengthResult(score=score, label=strength_label(score))


# =============================================================================
# Validation
# =============================================================================

def validate_password(password: str) -> ValidationResult:
    """
    Check a password against the minimum rules.

    Every rule is checked (no early exit), so the caller can show all
    problems at once. Symbols are not required here even though the
    strength score rewards them.

    Returns:
        ValidationResult(is_valid, errors)
    """
    errors = []

    if len(password) < 8:
        errors.append("Password must be at least 8 characters long")
    if not _HAS_LOWER.search(password):
        errors.append("Password must contain at least one lowercase letter")
    if not _HAS_UPPER.search(password):
        errors.append("Password must contain at least one uppercase letter")
    if not _HAS_DIGIT.search(password):
        errors.append("Password must contain at least one number")

    return ValidationResult(is_valid=not errors, errors=errors)
