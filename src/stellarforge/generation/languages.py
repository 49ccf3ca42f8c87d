from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from stellarforge.generation.rng import chance, int_range, make_rng, pick, require_seed

LOGGER = logging.getLogger(__name__)

PATTERN_CV = "cv"
PATTERN_CVC = "cvc"
PATTERN_V = "v"
PATTERN_VC = "vc"
SYLLABLE_PATTERNS = (PATTERN_CV, PATTERN_CVC, PATTERN_V, PATTERN_VC)

CONSONANT_POOL = (
    "p", "t", "k", "b", "d", "g", "m", "n",
    "f", "s", "h", "v", "z", "l", "r", "w", "y",
    "ch", "sh", "th", "zh", "kh", "gh",
)
VOWEL_POOL = ("a", "e", "i", "o", "u", "ae", "ai", "au", "ei", "ou")

CONSONANT_DRAW_RANGE = (8, 16)
VOWEL_DRAW_RANGE = (3, 7)
CLUSTER_CHANCE = 0.5
FINAL_CONSONANT_CHANCE = 0.7
MAX_SYLLABLES = 4
PHRASE_WORD_RANGE = (2, 6)

CORE_VOCABULARY = (
    "hello", "goodbye", "yes", "no", "please", "thank you",
    "friend", "enemy", "ship", "star", "planet", "station",
    "trade", "war", "peace", "alliance", "attack", "defend",
    "captain", "crew", "weapon", "shield", "engine",
)


@dataclass(frozen=True)
class Phonology:
    consonants: tuple[str, ...]
    vowels: tuple[str, ...]
    consonant_clusters: bool
    final_consonants: bool

    def __post_init__(self) -> None:
        if not self.consonants:
            raise ValueError("phonology requires at least one consonant")
        if not self.vowels:
            raise ValueError("phonology requires at least one vowel")

    def to_dict(self) -> dict[str, Any]:
        return {
            "consonants": list(self.consonants),
            "vowels": list(self.vowels),
            "consonant_clusters": self.consonant_clusters,
            "final_consonants": self.final_consonants,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Phonology":
        return cls(
            consonants=tuple(str(value) for value in data["consonants"]),
            vowels=tuple(str(value) for value in data["vowels"]),
            consonant_clusters=bool(data["consonant_clusters"]),
            final_consonants=bool(data["final_consonants"]),
        )


@dataclass(frozen=True)
class WordStructure:
    min_syllables: int
    max_syllables: int
    pattern: str

    def __post_init__(self) -> None:
        if self.min_syllables < 1:
            raise ValueError("min_syllables must be >= 1")
        if self.max_syllables < self.min_syllables:
            raise ValueError("max_syllables must be >= min_syllables")
        if self.pattern not in SYLLABLE_PATTERNS:
            raise ValueError(f"invalid syllable pattern: {self.pattern}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "min_syllables": self.min_syllables,
            "max_syllables": self.max_syllables,
            "pattern": self.pattern,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WordStructure":
        return cls(
            min_syllables=int(data["min_syllables"]),
            max_syllables=int(data["max_syllables"]),
            pattern=str(data["pattern"]),
        )


def _generate_syllable(rng: random.Random, phonology: Phonology, pattern: str, is_final: bool) -> str:
    allow_coda = phonology.final_consonants or not is_final
    if pattern == PATTERN_CV:
        return pick(rng, phonology.consonants) + pick(rng, phonology.vowels)
    if pattern == PATTERN_CVC:
        syllable = pick(rng, phonology.consonants) + pick(rng, phonology.vowels)
        if allow_coda:
            syllable += pick(rng, phonology.consonants)
        return syllable
    if pattern == PATTERN_V:
        return pick(rng, phonology.vowels)
    syllable = pick(rng, phonology.vowels)
    if allow_coda:
        syllable += pick(rng, phonology.consonants)
    return syllable


def generate_word(rng: random.Random, phonology: Phonology, structure: WordStructure) -> str:
    num_syllables = int_range(rng, structure.min_syllables, structure.max_syllables + 1)
    return "".join(
        _generate_syllable(rng, phonology, structure.pattern, index == num_syllables - 1)
        for index in range(num_syllables)
    )


@dataclass(frozen=True)
class AlienLanguage:
    name: str
    phonology: Phonology
    structure: WordStructure
    vocabulary: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "vocabulary", MappingProxyType(dict(self.vocabulary)))

    def translate(self, word: str) -> str | None:
        """Exact-match lookup of a concept key; unknown words give None."""
        return self.vocabulary.get(word)

    def translate_text(self, text: str) -> str:
        translated = [self.vocabulary[token] for token in text.split() if token in self.vocabulary]
        return " ".join(translated)

    def generate_phrase(self, seed: int) -> str:
        """Freshly generated words from an independent stream; the language is not touched."""
        rng = make_rng(require_seed(seed))
        num_words = int_range(rng, *PHRASE_WORD_RANGE)
        return " ".join(generate_word(rng, self.phonology, self.structure) for _ in range(num_words))

    def sample_words(self, limit: int = 10) -> list[tuple[str, str]]:
        return [(key, self.vocabulary[key]) for key in sorted(self.vocabulary)[:limit]]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "phonology": self.phonology.to_dict(),
            "structure": self.structure.to_dict(),
            "vocabulary": {key: self.vocabulary[key] for key in sorted(self.vocabulary)},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AlienLanguage":
        return cls(
            name=str(data["name"]),
            phonology=Phonology.from_dict(data["phonology"]),
            structure=WordStructure.from_dict(data["structure"]),
            vocabulary={str(key): str(value) for key, value in dict(data.get("vocabulary", {})).items()},
        )


def _draw_unique(rng: random.Random, pool: tuple[str, ...], draw_range: tuple[int, int]) -> tuple[str, ...]:
    chosen: list[str] = []
    for _ in range(int_range(rng, *draw_range)):
        value = pick(rng, pool)
        if value not in chosen:
            chosen.append(value)
    return tuple(chosen)


def _generate_phonology(rng: random.Random) -> Phonology:
    consonants = _draw_unique(rng, CONSONANT_POOL, CONSONANT_DRAW_RANGE)
    vowels = _draw_unique(rng, VOWEL_POOL, VOWEL_DRAW_RANGE)
    return Phonology(
        consonants=consonants,
        vowels=vowels,
        consonant_clusters=chance(rng, CLUSTER_CHANCE),
        final_consonants=chance(rng, FINAL_CONSONANT_CHANCE),
    )


def _generate_structure(rng: random.Random) -> WordStructure:
    min_syllables = int_range(rng, 1, 3)
    max_syllables = int_range(rng, min_syllables, MAX_SYLLABLES + 1)
    return WordStructure(
        min_syllables=min_syllables,
        max_syllables=max_syllables,
        pattern=pick(rng, SYLLABLE_PATTERNS),
    )


def generate_language(name: str, seed: int) -> AlienLanguage:
    rng = make_rng(require_seed(seed))
    phonology = _generate_phonology(rng)
    structure = _generate_structure(rng)
    vocabulary = {concept: generate_word(rng, phonology, structure) for concept in CORE_VOCABULARY}
    LOGGER.debug(
        "generated language name=%s consonants=%d vowels=%d pattern=%s",
        name,
        len(phonology.consonants),
        len(phonology.vowels),
        structure.pattern,
    )
    return AlienLanguage(name=name, phonology=phonology, structure=structure, vocabulary=vocabulary)
