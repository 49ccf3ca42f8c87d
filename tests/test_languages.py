import random

import pytest

from stellarforge.generation.languages import (
    CONSONANT_POOL,
    CORE_VOCABULARY,
    SYLLABLE_PATTERNS,
    VOWEL_POOL,
    AlienLanguage,
    Phonology,
    WordStructure,
    generate_language,
    generate_word,
)


def test_same_seed_produces_identical_language() -> None:
    assert generate_language("Test Language", 2000) == generate_language("Test Language", 2000)


def test_language_inventories_are_unique_subsets_of_pools() -> None:
    for seed in range(40):
        language = generate_language("Test Language", seed)
        consonants = language.phonology.consonants
        vowels = language.phonology.vowels

        assert 1 <= len(consonants) <= 15
        assert 1 <= len(vowels) <= 6
        assert len(set(consonants)) == len(consonants)
        assert len(set(vowels)) == len(vowels)
        assert set(consonants) <= set(CONSONANT_POOL)
        assert set(vowels) <= set(VOWEL_POOL)


def test_word_structure_ranges() -> None:
    for seed in range(40):
        structure = generate_language("Test Language", seed).structure

        assert 1 <= structure.min_syllables <= 2
        assert structure.min_syllables <= structure.max_syllables <= 4
        assert structure.pattern in SYLLABLE_PATTERNS


def test_vocabulary_covers_core_concepts() -> None:
    language = generate_language("Test Language", 11)

    assert set(language.vocabulary) == set(CORE_VOCABULARY)
    assert len(language.vocabulary) == 23
    assert all(language.vocabulary.values())


def test_translate_is_exact_match_lookup() -> None:
    language = generate_language("Test Language", 11)

    assert language.translate("hello") == language.vocabulary["hello"]
    assert language.translate("thank you") == language.vocabulary["thank you"]
    assert language.translate("Hello") is None
    assert language.translate("spaceship") is None


def test_translate_text_drops_unknown_tokens() -> None:
    language = generate_language("Test Language", 11)
    expected = f"{language.vocabulary['hello']} {language.vocabulary['friend']}"

    assert language.translate_text("hello unknown friend") == expected
    assert language.translate_text("nothing here") == ""


def test_generate_phrase_is_pure() -> None:
    language = generate_language("Test Language", 5)
    before = language.to_dict()

    phrase_a = language.generate_phrase(99)
    phrase_b = language.generate_phrase(99)

    assert phrase_a == phrase_b
    assert 2 <= len(phrase_a.split(" ")) <= 5
    assert language.to_dict() == before


@pytest.mark.parametrize(
    ("pattern", "syllables", "final_consonants", "expected"),
    [
        ("cv", 2, True, "kaka"),
        ("cvc", 2, True, "kakkak"),
        ("cvc", 2, False, "kakka"),
        ("v", 3, True, "aaa"),
        ("vc", 1, False, "a"),
        ("vc", 2, False, "aka"),
    ],
)
def test_generate_word_follows_syllable_pattern(
    pattern: str, syllables: int, final_consonants: bool, expected: str
) -> None:
    phonology = Phonology(consonants=("k",), vowels=("a",), consonant_clusters=False, final_consonants=final_consonants)
    structure = WordStructure(min_syllables=syllables, max_syllables=syllables, pattern=pattern)

    assert generate_word(random.Random(1), phonology, structure) == expected


def test_sample_words_sorted_by_concept() -> None:
    language = generate_language("Test Language", 3)
    sample = language.sample_words(5)

    assert [concept for concept, _ in sample] == sorted(CORE_VOCABULARY)[:5]
    assert all(language.vocabulary[concept] == word for concept, word in sample)


def test_language_round_trips_through_dict() -> None:
    language = generate_language("Test Language", 21)

    assert AlienLanguage.from_dict(language.to_dict()) == language


def test_word_structure_rejects_bad_ranges() -> None:
    with pytest.raises(ValueError, match="max_syllables"):
        WordStructure(min_syllables=3, max_syllables=2, pattern="cv")
    with pytest.raises(ValueError, match="invalid syllable pattern"):
        WordStructure(min_syllables=1, max_syllables=2, pattern="ccv")


def test_vocabulary_is_read_only() -> None:
    language = generate_language("Test Language", 2000)

    with pytest.raises(TypeError):
        language.vocabulary["hello"] = "overwritten"
    assert language.translate("hello") != "overwritten"
