#!/usr/bin/env python3
"""
Wordforge - N-gram Letter Model Word Generator
==============================================

Trains a backoff n-gram model over the characters of example words and
samples it to synthesize new, pronounceable-looking words.

Quick Start
-----------
    from wordforge import WordGenerator, load_corpus

    gen = WordGenerator(load_corpus(), max_order=3, prior=0.0, seed=42)

    # One word of 3-8 letters
    word = gen.new_word(3, 8)

    # Ten distinct words
    words = gen.new_words(10, 3, 8)

    # Export and rebuild without retraining
    clone = WordGenerator.from_snapshot(gen.export_data())

Modules
-------
    wordforge.model     - LanguageModel, Snapshot, weighted sampling
    wordforge.generator - WordGenerator (length-constrained, deduplicated)
    wordforge.corpus    - Corpus files and the bundled English towns corpus
    wordforge.settings  - app.yaml settings

CLI Usage
---------
    python -m wordforge generate -n 10
    python -m wordforge train --corpus names.txt -o model.json
    python -m wordforge generate --model model.json
"""

__version__ = "0.1.0"

from wordforge.model import (
    BOUNDARY,
    LanguageModel,
    Snapshot,
    build_alphabet,
    build_chain,
    select_index,
)
from wordforge.generator import WordGenerator, GeneratorConfig
from wordforge.corpus import load_corpus, parse_corpus

__all__ = [
    '__version__',
    'BOUNDARY',
    'LanguageModel',
    'Snapshot',
    'build_alphabet',
    'build_chain',
    'select_index',
    'WordGenerator',
    'GeneratorConfig',
    'load_corpus',
    'parse_corpus',
]
