"""
PassVault - Generator / Strength / Validation Tests

Run with: python test_simple.py   (or: pytest)

Covers the password engine:
- Generation honours length and enabled classes
- Empty policies are rejected, never silently defaulted
- Strength scores and labels at each threshold
- Validation collects every rule violation
"""

from passvault import generator
from passvault.generator import (
    GeneratorPolicy, InvalidPolicy, build_charset, calculate_strength,
    clamp_length, generate_password, validate_password,
)


def test_generate_length_and_charset():
    """Generated passwords have the exact length and only eligible characters."""
    print("Testing Generation...")

    policies = [
        GeneratorPolicy(),
        GeneratorPolicy(length=32, include_symbols=True),
        GeneratorPolicy(length=8, include_uppercase=False, include_numbers=False),
        GeneratorPolicy(length=20, include_uppercase=False, include_lowercase=False,
                        include_numbers=False, include_symbols=True),
        GeneratorPolicy(length=3),
        GeneratorPolicy(length=0),
    ]
    for policy in policies:
        charset = set(build_charset(policy))
        for _ in range(20):
            pwd = generate_password(policy)
            assert len(pwd) == policy.length, "Should generate requested length"
            assert set(pwd) <= charset, "Should only use enabled classes"

    print("  [OK] Length and charset respected")


def test_generate_single_class():
    pwd = generate_password(GeneratorPolicy(length=50, include_uppercase=False,
                                            include_lowercase=False, include_numbers=True))
    assert pwd.isdigit()
    assert len(pwd) == 50

    pwd = generate_password(GeneratorPolicy(length=50, include_lowercase=False,
                                            include_numbers=False))
    assert pwd.isupper() and pwd.isalpha()
    print("  [OK] Single-class generation works")


def test_generate_not_repeating():
    """Two 32-char passwords colliding would mean the randomness is broken."""
    policy = GeneratorPolicy(length=32, include_symbols=True)
    assert generate_password(policy) != generate_password(policy)


def test_empty_policy_rejected():
    """No class selected -> InvalidPolicy, whatever the length."""
    print("Testing Invalid Policy...")

    for length in (0, 1, 12, 32):
        policy = GeneratorPolicy(length=length, include_uppercase=False, include_lowercase=False,
                                 include_numbers=False, include_symbols=False)
        try:
            generate_password(policy)
            assert False, "Should reject policy with no character classes"
        except InvalidPolicy as e:
            assert "At least one character type" in str(e)

    print("  [OK] Empty policy rejected")


def test_negative_length_rejected():
    try:
        generate_password(GeneratorPolicy(length=-1))
        assert False, "Should reject negative length"
    except InvalidPolicy:
        pass


def test_invalid_policy_is_value_error():
    assert issubclass(InvalidPolicy, ValueError)


def test_charset_order_is_fixed():
    """Same flags -> same charset, regardless of how they were set."""
    a = GeneratorPolicy(include_symbols=True)

    b = GeneratorPolicy(include_uppercase=False, include_lowercase=False, include_numbers=False)
    b.include_symbols = True
    b.include_numbers = True
    b.include_lowercase = True
    b.include_uppercase = True

    assert build_charset(a) == build_charset(b)
    assert build_charset(a) == (generator.LOWERCASE + generator.UPPERCASE
                                + generator.NUMBERS + generator.SYMBOLS)
    assert build_charset(GeneratorPolicy()) == (generator.LOWERCASE + generator.UPPERCASE
                                                + generator.NUMBERS)


def test_default_policy():
    policy = GeneratorPolicy()
    assert policy.length == 12
    assert policy.include_uppercase and policy.include_lowercase and policy.include_numbers
    assert not policy.include_symbols


def test_clamp_length():
    assert clamp_length(4) == 8
    assert clamp_length(8) == 8
    assert clamp_length(20) == 20
    assert clamp_length(99) == 32


def test_strength_scores():
    """Known scores at each threshold."""
    print("Testing Strength Scoring...")

    cases = [
        ("", 0, "Weak"),
        ("aaaaaaaa", 2, "Weak"),
        ("Aa1!", 4, "Fair"),
        ("Aa1!aaaa", 5, "Good"),
        ("Aa1!aaaaaaaa", 6, "Good"),
        ("Aa1!aaaaaaaaaaaaaaaa", 7, "Strong"),
        ("aaaaaaaaaaaa", 3, "Fair"),
        ("ABCDEFGH12345678", 5, "Good"),
    ]
    for password, score, label in cases:
        result = calculate_strength(password)
        assert result.score == score, f"{password!r}: expected {score}, got {result.score}"
        assert result.label == label, f"{password!r}: expected {label}, got {result.label}"

    print("  [OK] Strength scores match")


def test_strength_non_ascii_counts_as_symbol():
    assert calculate_strength("é").score == 1
    assert calculate_strength("aé").score == 2
    assert calculate_strength(" ").score == 1


def test_strength_labels():
    expected = {0: "Weak", 1: "Weak", 2: "Weak", 3: "Fair", 4: "Fair",
                5: "Good", 6: "Good", 7: "Strong"}
    for score, label in expected.items():
        assert generator.strength_label(score) == label


def test_validate():
    """Validation collects all violations in a fixed order."""
    print("Testing Validation...")

    result = validate_password("short1A")
    assert not result.is_valid
    assert result.errors == ["Password must be at least 8 characters long"]

    result = validate_password("alllowercase1")
    assert result.errors == ["Password must contain at least one uppercase letter"]

    result = validate_password("")
    assert result.errors == [
        "Password must be at least 8 characters long",
        "Password must contain at least one lowercase letter",
        "Password must contain at least one uppercase letter",
        "Password must contain at least one number",
    ]

    result = validate_password("GoodPass123")
    assert result.is_valid and result.errors == []

    print("  [OK] Validation works")


def test_validate_does_not_require_symbols():
    # Scores lower than it could, but still valid
    assert validate_password("Abcdefg1").is_valid
    assert calculate_strength("Abcdefg1").score == 4


def test_pure_functions():
    for password in ("", "aaaaaaaa", "Aa1!aaaaaaaa", "ünïcødé"):
        assert calculate_strength(password) == calculate_strength(password)
        assert validate_password(password) == validate_password(password)


def run_all_tests():
    print("=" * 70)
    print("PassVault - Password Engine Tests")
    print("=" * 70)
    print()

    tests = [
        test_generate_length_and_charset,
        test_generate_single_class,
        test_generate_not_repeating,
        test_empty_policy_rejected,
        test_negative_length_rejected,
        test_invalid_policy_is_value_error,
        test_charset_order_is_fixed,
        test_default_policy,
        test_clamp_length,
        test_strength_scores,
        test_strength_non_ascii_counts_as_symbol,
        test_strength_labels,
        test_validate,
        test_validate_does_not_require_symbols,
        test_pure_functions,
    ]

    failed = []

    for test in tests:
        try:
            test()
        except Exception as e:
            print(f"  [FAIL] {test.__name__}: {e}")
            failed.append((test.__name__, e))

    print()
    print("=" * 70)
    if not failed:
        print("[OK] ALL TESTS PASSED!")
    else:
        print(f"[FAIL] {len(failed)} TESTS FAILED:")
        for name, error in failed:
            print(f"  - {name}: {error}")
    print("=" * 70)

    return len(failed) == 0


if __name__ == "__main__":
    import sys
    success = run_all_tests()
    sys.exit(0 if success else 1)
