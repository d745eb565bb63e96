#!/usr/bin/env python3
"""
Character Language Model
========================
Backoff n-gram model over characters, trained on a corpus of example words.

For every order k from 1 to max_order the model keeps a chain mapping each
k-character context seen in training to one weight per alphabet character:

    weight = prior + count(character follows context)

Words are padded with k boundary markers on the left and one on the right,
so the marker doubles as "start of word" context and "end of word" outcome.

Prediction tries the longest context first and backs off to shorter ones:

    context "...hes" -> chain[3]["hes"] -> chain[2]["es"] -> chain[1]["s"] -> '#'
"""

import logging
import math
import random
from bisect import bisect_right
from collections import Counter, defaultdict
from dataclasses import dataclass
from itertools import accumulate
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

# Start/end-of-word marker
BOUNDARY = '#'


# =============================================================================
# SNAPSHOT
# =============================================================================

@dataclass(frozen=True)
class Snapshot:
    """Exported alphabet and per-order chains of a trained model.

    ``chains[0]`` is the order-1 chain; the model order is ``len(chains)``.
    """
    alphabet: tuple
    chains: tuple

    # Unhashable: chains hold dicts
    __hash__ = None

    @property
    def order(self) -> int:
        return len(self.chains)

    def to_dict(self) -> dict:
        """Serialize snapshot to JSON-compatible dictionary"""
        return {
            'alphabet': list(self.alphabet),
            'chains': [
                {context: list(weights) for context, weights in chain.items()}
                for chain in self.chains
            ],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Snapshot':
        """Deserialize snapshot from dictionary"""
        try:
            alphabet = tuple(data['alphabet'])
            raw_chains = data['chains']
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid snapshot data: missing {e}") from e

        if BOUNDARY not in alphabet:
            raise ValueError(f"Invalid snapshot data: alphabet lacks '{BOUNDARY}'")
        if any(not isinstance(c, str) or len(c) != 1 for c in alphabet):
            raise ValueError("Invalid snapshot data: alphabet entries must be single characters")
        if list(alphabet) != sorted(set(alphabet)):
            raise ValueError("Invalid snapshot data: alphabet must be sorted without duplicates")

        chains = []
        for order, raw in enumerate(raw_chains, start=1):
            if not isinstance(raw, dict):
                raise ValueError(f"Invalid snapshot data: order {order} chain is not a mapping")
            chain = {}
            for context, weights in raw.items():
                if len(context) != order:
                    raise ValueError(
                        f"Invalid snapshot data: context '{context}' in order {order} chain"
                    )
                if len(weights) != len(alphabet):
                    raise ValueError(
                        f"Invalid snapshot data: context '{context}' has {len(weights)} "
                        f"weights, expected {len(alphabet)}"
                    )
                weights = tuple(float(w) for w in weights)
                if any(not math.isfinite(w) or w < 0 for w in weights):
                    raise ValueError(
                        f"Invalid snapshot data: context '{context}' has negative or non-finite weights"
                    )
                chain[context] = weights
            chains.append(chain)

        return cls(alphabet=alphabet, chains=tuple(chains))


# =============================================================================
# TRAINING
# =============================================================================

def build_alphabet(corpus: Sequence[str]) -> tuple:
    """Distinct characters of the corpus plus the boundary marker, sorted."""
    alphabet = [BOUNDARY]
    seen = {BOUNDARY}
    for word in corpus:
        for char in word:
            if char not in seen:
                seen.add(char)
                alphabet.append(char)
    return tuple(sorted(alphabet))


def build_chain(corpus: Sequence[str],
                order: int,
                alphabet: Sequence[str],
                prior: float = 0.0) -> dict:
    """
    Build the context chain for one order.

    Args:
        corpus: Training words
        order: Context length in characters
        alphabet: Output of build_alphabet() for the same corpus
        prior: Additive smoothing constant

    Returns:
        Mapping of observed context -> weights in alphabet order.
        Contexts never observed are absent.
    """
    padding = BOUNDARY * order
    observations = defaultdict(Counter)

    for word in corpus:
        padded = padding + word + BOUNDARY
        for i in range(len(padded) - order):
            context = padded[i:i + order]
            observations[context][padded[i + order]] += 1

    return {
        context: [prior + counts[char] for char in alphabet]
        for context, counts in observations.items()
    }


# =============================================================================
# SAMPLING
# =============================================================================

def select_index(weights: Sequence[float], rng: random.Random) -> int:
    """
    Pick an index with probability proportional to its weight.

    Draws uniformly in [0, total) and returns the first index whose running
    total exceeds the draw. An all-zero vector yields index 0.
    """
    totals = list(accumulate(weights))
    if not totals or totals[-1] <= 0:
        return 0
    draw = rng.random() * totals[-1]
    return min(bisect_right(totals, draw), len(totals) - 1)


# =============================================================================
# LANGUAGE MODEL
# =============================================================================

class LanguageModel:
    """Backoff character n-gram model"""

    def __init__(self,
                 corpus: Optional[Sequence[str]] = None,
                 max_order: int = 3,
                 prior: float = 0.0,
                 *,
                 seed: Optional[int] = None,
                 rng: Optional[random.Random] = None):
        """
        Initialize the model, training it when a corpus is given.

        Args:
            corpus: Training words (None leaves the model untrained)
            max_order: Longest context length
            prior: Additive smoothing constant
            seed: Seed for this model's random generator
            rng: Random generator to use instead of a seeded one
        """
        self._rng = rng if rng is not None else random.Random(seed)
        self._order = 0
        self._prior = 0.0
        self._alphabet = (BOUNDARY,)
        self._chains = []

        if corpus is not None:
            self.train(corpus, max_order, prior)

    @classmethod
    def from_snapshot(cls,
                      snapshot: Snapshot,
                      *,
                      seed: Optional[int] = None,
                      rng: Optional[random.Random] = None) -> 'LanguageModel':
        """Rebuild a trained model from exported data"""
        model = cls(seed=seed, rng=rng)
        model._alphabet = tuple(snapshot.alphabet)
        model._chains = [
            {context: tuple(weights) for context, weights in chain.items()}
            for chain in snapshot.chains
        ]
        model._order = len(model._chains)
        return model

    def train(self,
              corpus: Sequence[str],
              max_order: int = 3,
              prior: float = 0.0):
        """Replace alphabet and all chains with ones built from corpus"""
        if max_order < 1:
            raise ValueError(f"max_order must be at least 1, got {max_order}")
        if prior < 0:
            raise ValueError(f"prior must be non-negative, got {prior}")

        corpus = list(corpus)
        self._order = max_order
        self._prior = float(prior)
        self._alphabet = build_alphabet(corpus)
        self._chains = [
            {
                context: tuple(weights)
                for context, weights in build_chain(corpus, order, self._alphabet, self._prior).items()
            }
            for order in range(1, max_order + 1)
        ]

        logger.debug(
            f"Trained order-{max_order} model on {len(corpus)} words: "
            f"{len(self._alphabet)} symbols, "
            f"contexts per order {[len(c) for c in self._chains]}"
        )

    def is_trained(self) -> bool:
        return bool(self._chains)

    def order(self) -> int:
        return self._order

    @property
    def alphabet(self) -> tuple:
        return self._alphabet

    @property
    def prior(self) -> float:
        return self._prior

    def weights_for(self, context: str) -> Optional[tuple]:
        """
        Find the most specific chain entry for a context.

        Returns:
            (order, weights) of the first hit from max_order down to 1,
            with weights as a read-only tuple in alphabet order,
            or None when no order matches.
        """
        for order in range(self._order, 0, -1):
            if len(context) < order:
                continue
            weights = self._chains[order - 1].get(context[-order:])
            if weights is not None:
                return order, weights
        return None

    def predict_next(self, context: str) -> str:
        """Sample the character following context; BOUNDARY means stop"""
        match = self.weights_for(context)
        if match is None:
            return BOUNDARY
        _, weights = match
        return self._alphabet[select_index(weights, self._rng)]

    def export_data(self) -> Snapshot:
        """Copy of alphabet and chains, independent of this model"""
        return Snapshot(
            alphabet=tuple(self._alphabet),
            chains=tuple(
                dict(chain) for chain in self._chains
            ),
        )
