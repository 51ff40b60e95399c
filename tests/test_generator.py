import string
from collections import Counter
from random import Random, SystemRandom

import pytest

from passforge import generator
from passforge.generator import (
    LOWERCASE,
    NUMBERS,
    SYMBOLS,
    UPPERCASE,
    GenerationRequest,
    InternalInvariantViolation,
    InvalidLength,
    NoCharacterClassSelected,
    PasswordOptionsError,
    _assemble,
    character_pool,
    enabled_classes,
    generate,
    generate_password,
    validate,
)

ALL_ON = dict(include_uppercase=True, include_lowercase=True, include_numbers=True, include_symbols=True)


def _all_flag_combinations():
    for mask in range(1, 16):
        yield GenerationRequest(
            length=6 + mask,
            include_uppercase=bool(mask & 1),
            include_lowercase=bool(mask & 2),
            include_numbers=bool(mask & 4),
            include_symbols=bool(mask & 8),
        )


def test_symbol_roster_matches_original_tool():
    assert SYMBOLS == "!@#$%^&*()_+-=[]{}|;:,.<>?"
    assert len(SYMBOLS) == 26
    assert len(UPPERCASE) == 26 and len(LOWERCASE) == 26 and len(NUMBERS) == 10


def test_length_and_classes():
    pw = generate(GenerationRequest(length=12, **ALL_ON))
    assert len(pw) == 12
    assert any(c in UPPERCASE for c in pw)
    assert any(c in LOWERCASE for c in pw)
    assert any(c in NUMBERS for c in pw)
    assert any(c in SYMBOLS for c in pw)


def test_every_combination_covers_enabled_and_only_enabled_classes():
    for request in _all_flag_combinations():
        classes = enabled_classes(request)
        pool = set(character_pool(request))
        for _ in range(50):
            pw = generate(request)
            assert len(pw) == request.length
            assert set(pw) <= pool
            for _, alphabet in classes:
                assert any(c in alphabet for c in pw)


def test_upper_and_lower_example():
    request = GenerationRequest(
        length=10,
        include_uppercase=True,
        include_lowercase=True,
        include_numbers=False,
        include_symbols=False,
    )
    pw = generate(request)
    assert len(pw) == 10
    assert all(c in string.ascii_letters for c in pw)
    assert any(c.isupper() for c in pw)
    assert any(c.islower() for c in pw)


def test_length_bounds():
    for bad in (5, 33, 0, -1):
        with pytest.raises(InvalidLength):
            validate(GenerationRequest(length=bad))
    for good in (6, 32):
        request = GenerationRequest(length=good, **ALL_ON)
        assert validate(request) is request
        assert len(generate(request)) == good


def test_no_class_selected_rejected_at_any_length():
    for length in (5, 6, 12, 32, 33):
        request = GenerationRequest(
            length=length,
            include_uppercase=False,
            include_lowercase=False,
            include_numbers=False,
            include_symbols=False,
        )
        with pytest.raises(NoCharacterClassSelected):
            validate(request)


def test_error_codes_and_messages():
    assert InvalidLength().code == "invalid_length"
    assert "between 6 and 32" in str(InvalidLength())
    assert NoCharacterClassSelected().code == "no_character_class"
    assert isinstance(NoCharacterClassSelected(), ValueError)


def test_lowercase_distribution_is_uniform():
    request = GenerationRequest(
        length=12,
        include_uppercase=False,
        include_lowercase=True,
        include_numbers=False,
        include_symbols=False,
    )
    rng = Random(20240611)
    counts = Counter()
    for _ in range(2000):
        counts.update(generate(request, rng=rng))

    total = sum(counts.values())
    assert set(counts) == set(LOWERCASE)
    expected = total / 26
    chi2 = sum((counts[c] - expected) ** 2 / expected for c in LOWERCASE)
    # 25 degrees of freedom
    assert chi2 < 80


def test_outputs_differ():
    request = GenerationRequest()
    seen = {generate(request) for _ in range(1000)}
    assert len(seen) == 1000


def test_seeded_source_is_reproducible():
    request = GenerationRequest(length=20, **ALL_ON)
    assert generate(request, rng=Random(7)) == generate(request, rng=Random(7))
    assert generate(request, rng=Random(7)) != generate(request, rng=Random(8))


def test_required_characters_are_not_pinned_to_the_front():
    request = GenerationRequest(
        length=6,
        include_uppercase=True,
        include_lowercase=False,
        include_numbers=True,
        include_symbols=False,
    )
    rng = Random(3)
    first_chars = {generate(request, rng=rng)[0] in NUMBERS for _ in range(200)}
    assert first_chars == {True, False}


def test_custom_symbols():
    pw = generate(
        GenerationRequest(length=16, include_uppercase=False, include_lowercase=False,
                          include_numbers=False, include_symbols=True),
        symbols="#%",
    )
    assert set(pw) <= {"#", "%"}
    assert len(pw) == 16


def test_custom_symbols_must_be_symbols():
    request = GenerationRequest(include_symbols=True)
    for bad in ("", "abc!", "! ?"):
        with pytest.raises(ValueError):
            generate(request, symbols=bad)


def test_negative_filler_count_is_an_invariant_violation():
    with pytest.raises(InternalInvariantViolation):
        _assemble([UPPERCASE, LOWERCASE, NUMBERS, SYMBOLS], 3, Random(1))


def test_generate_password_helper():
    pw = generate_password(length=8, include_numbers=False)
    assert len(pw) == 8
    assert not any(c in NUMBERS or c in SYMBOLS for c in pw)

    with pytest.raises(NoCharacterClassSelected):
        generate_password(include_uppercase=False, include_lowercase=False, include_numbers=False)


def test_from_json():
    request = GenerationRequest.from_json(
        {"length": 10, "includeUppercase": True, "includeSymbols": True}
    )
    assert request == GenerationRequest(
        length=10,
        include_uppercase=True,
        include_lowercase=False,
        include_numbers=False,
        include_symbols=True,
    )
    assert GenerationRequest.from_json(request.to_json()) == request


def test_from_json_rejects_bad_types():
    for bad_length in (None, "12", 12.5, True):
        with pytest.raises(InvalidLength):
            GenerationRequest.from_json({"length": bad_length, "includeLowercase": True})
    with pytest.raises(PasswordOptionsError) as exc:
        GenerationRequest.from_json({"length": 12, "includeLowercase": "yes"})
    assert exc.value.code == "invalid_request"


def test_non_integer_length_rejected():
    for bad in (10.5, 12.0, "12", True):
        with pytest.raises(InvalidLength):
            validate(GenerationRequest(length=bad))
    with pytest.raises(InvalidLength):
        generate_password(length=10.5)


def test_duplicate_symbols_rejected():
    request = GenerationRequest(include_symbols=True)
    with pytest.raises(ValueError):
        generate(request, symbols="!!!?")


def test_default_source_is_system_random():
    assert isinstance(generator._sysrand, SystemRandom)


def test_default_source_is_used_when_none_given(monkeypatch):
    request = GenerationRequest(length=16, **ALL_ON)
    monkeypatch.setattr(generator, "_sysrand", Random(5))
    assert generate(request) == generate(request, rng=Random(5))
