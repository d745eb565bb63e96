#!/usr/bin/env python3
"""
Training Corpora
================
Reads word lists for training. A corpus file holds one word per line;
blank lines and lines starting with ';' are ignored.

The bundled corpus (data/english_towns.txt) is a list of English town names.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from wordforge.settings import get_setting, resolve_path

COMMENT_PREFIX = ';'


def parse_corpus(text: str) -> list[str]:
    """Split corpus text into normalized words (lowercase, stripped)"""
    words = []
    for line in text.splitlines():
        word = line.strip().lower()
        if not word or word.startswith(COMMENT_PREFIX):
            continue
        words.append(word)
    return words


def load_corpus(filepath: Optional[str] = None) -> list[str]:
    """
    Load a training corpus.

    Args:
        filepath: Corpus file; None loads the bundled corpus

    Returns:
        List of training words
    """
    if filepath is None:
        return list(default_corpus())

    path = Path(filepath).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"Corpus not found: {path}")
    words = parse_corpus(path.read_text(encoding='utf-8'))
    if not words:
        raise ValueError(f"Corpus is empty: {path}")
    return words


@lru_cache(maxsize=1)
def default_corpus() -> tuple:
    """Bundled corpus configured under cli.corpus in app.yaml"""
    configured = get_setting("cli.corpus")
    if not configured:
        raise ValueError("cli.corpus must be set in app.yaml")
    path = resolve_path(configured)
    if not path.exists():
        raise FileNotFoundError(f"Bundled corpus not found: {path}")
    return tuple(parse_corpus(path.read_text(encoding='utf-8')))
