#!/usr/bin/env python3
"""
Word Generator
==============
Synthesizes new words by sampling a trained LanguageModel one character at a
time, with length-constrained rejection sampling and deduplicated batches.

Usage:
    gen = WordGenerator(corpus, max_order=3, prior=0.0, seed=7)
    gen.new_word(3, 8)           # 'hadlingham'-style single word
    gen.new_words(10, 3, 8)      # ten distinct words
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from wordforge.model import BOUNDARY, LanguageModel, Snapshot
from wordforge.settings import get_setting

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class GeneratorConfig:
    """Attempt budgets for word generation."""
    max_word_attempts: Optional[int] = None        # Tries per length-constrained word
    batch_attempts_per_word: Optional[int] = None  # new_word() calls per requested word in a unique batch

    def __post_init__(self):
        cfg = get_setting("generator", {}) or {}
        if self.max_word_attempts is None:
            self.max_word_attempts = cfg.get("max_word_attempts")
        if self.batch_attempts_per_word is None:
            self.batch_attempts_per_word = cfg.get("batch_attempts_per_word")

        missing = [
            name for name, value in (
                ("max_word_attempts", self.max_word_attempts),
                ("batch_attempts_per_word", self.batch_attempts_per_word),
            )
            if value is None
        ]
        if missing:
            raise ValueError(f"generator settings missing in app.yaml: {', '.join(missing)}")
        if self.max_word_attempts < 1 or self.batch_attempts_per_word < 1:
            raise ValueError("generator attempt budgets must be at least 1")


# =============================================================================
# Generator
# =============================================================================

class WordGenerator:
    """Generates words from a backoff character model"""

    def __init__(self,
                 corpus: Optional[Sequence[str]] = None,
                 max_order: int = 3,
                 prior: float = 0.0,
                 *,
                 seed: Optional[int] = None,
                 config: Optional[GeneratorConfig] = None):
        """
        Initialize generator, training it when a corpus is given.

        Args:
            corpus: Training words (None leaves the generator untrained)
            max_order: Longest context length
            prior: Additive smoothing constant
            seed: Seed for the model's random generator
            config: Attempt budgets (defaults from app.yaml)
        """
        self.config = config or GeneratorConfig()
        self._model = LanguageModel(corpus, max_order, prior, seed=seed)

    @classmethod
    def from_snapshot(cls,
                      snapshot: Snapshot,
                      *,
                      seed: Optional[int] = None,
                      config: Optional[GeneratorConfig] = None) -> 'WordGenerator':
        """Create a trained generator from exported model data"""
        generator = cls(config=config)
        generator._model = LanguageModel.from_snapshot(snapshot, seed=seed)
        return generator

    @property
    def model(self) -> LanguageModel:
        return self._model

    def train(self,
              corpus: Sequence[str],
              max_order: int = 3,
              prior: float = 0.0):
        self._model.train(corpus, max_order, prior)

    def is_trained(self) -> bool:
        return self._model.is_trained()

    def export_data(self) -> Snapshot:
        return self._model.export_data()

    def _sample_word(self) -> str:
        """Run the model from a fully padded start until it predicts BOUNDARY."""
        word = BOUNDARY * self._model.order()
        letter = self._model.predict_next(word)
        while letter != BOUNDARY:
            word += letter
            letter = self._model.predict_next(word)
        return word.replace(BOUNDARY, '')

    def new_word(self, min_length: int, max_length: int) -> str:
        """
        Generate a single word.

        Resamples until the word length is within [min_length, max_length]
        or max_word_attempts is reached; in the latter case the last sample
        is returned whatever its length.

        Returns:
            Generated word, or '' if the model is untrained
        """
        if not self.is_trained():
            return ''

        word = ''
        for _ in range(self.config.max_word_attempts):
            word = self._sample_word()
            if min_length <= len(word) <= max_length:
                return word

        logger.debug(
            f"No word of length {min_length}-{max_length} after "
            f"{self.config.max_word_attempts} attempts, returning '{word}'"
        )
        return word

    def new_words(self,
                  n: int,
                  min_length: int,
                  max_length: int,
                  allow_repeats: bool = False) -> list[str]:
        """
        Generate a batch of words.

        Args:
            n: Number of words wanted
            min_length: Minimum word length (best effort, see new_word)
            max_length: Maximum word length (best effort, see new_word)
            allow_repeats: Keep duplicate words

        Returns:
            Exactly n words when allow_repeats is set. Otherwise up to n
            distinct words; fewer when the attempt budget runs out.
        """
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")
        if not self.is_trained():
            return []

        words = []
        seen = set()
        attempts = 0
        max_attempts = n * self.config.batch_attempts_per_word

        while len(words) < n:
            if not allow_repeats and attempts >= max_attempts:
                logger.warning(
                    f"Insufficient distinct outputs: {len(words)}/{n} unique words "
                    f"after {attempts} attempts"
                )
                break
            attempts += 1

            word = self.new_word(min_length, max_length)
            if allow_repeats or word not in seen:
                seen.add(word)
                words.append(word)

        return words
