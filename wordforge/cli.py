#!/usr/bin/env python3
"""
Wordforge CLI
=============
Command-line interface for training letter models and generating words.

Usage:
    wordforge generate -n 10
    wordforge generate --corpus names.txt --order 2 --prior 0.01
    wordforge train --corpus names.txt -o model.json
    wordforge generate --model model.json --min-length 4 --max-length 9
    wordforge info --model model.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from wordforge import __version__
from wordforge.corpus import load_corpus
from wordforge.generator import WordGenerator
from wordforge.model import Snapshot
from wordforge.settings import get_setting

# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.console = Console(highlight=False)

    def print(self, *args, **kwargs):
        if not self.quiet:
            print(*args, **kwargs)

    def error(self, msg: str):
        print(f"Error: {msg}", file=sys.stderr)

    def success(self, msg: str):
        if not self.quiet:
            print(f"OK: {msg}")

    def table(self, headers: list, rows: list, title: str = None):
        """Print a formatted table."""
        if self.quiet:
            return

        table = Table(title=title)
        for header in headers:
            table.add_column(str(header))
        for row in rows:
            table.add_row(*(str(c) for c in row))
        self.console.print(table)


def _cli_default(key: str):
    value = get_setting(f"cli.{key}")
    if value is None:
        raise ValueError(f"cli.{key} must be set in app.yaml")
    return value


def save_snapshot(snapshot: Snapshot, filepath: str):
    """Save exported model data to JSON file"""
    Path(filepath).write_text(json.dumps(snapshot.to_dict(), indent=2))


def load_snapshot(filepath: str) -> Snapshot:
    """Load exported model data from JSON file"""
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Model file not found: {path}")
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ValueError(f"Model file is not valid JSON: {path} ({e})") from e
    return Snapshot.from_dict(data)


def build_generator(args) -> WordGenerator:
    """Load a generator from --model, or train one on --corpus / the bundled corpus."""
    seed = getattr(args, 'seed', None)
    model_path = getattr(args, 'model', None)
    if model_path:
        return WordGenerator.from_snapshot(load_snapshot(model_path), seed=seed)

    corpus = load_corpus(args.corpus)
    return WordGenerator(corpus, args.order, args.prior, seed=seed)


# =============================================================================
# Commands
# =============================================================================

def cmd_generate(args, out: Output):
    """Generate words."""
    if args.count < 0:
        out.error("Count must be non-negative")
        return 1

    generator = build_generator(args)
    words = generator.new_words(
        args.count,
        args.min_length,
        args.max_length,
        allow_repeats=args.allow_repeats,
    )

    if args.json:
        print(json.dumps(words, indent=2))
        return 0

    if args.verbose:
        rows = [[i, word, len(word)] for i, word in enumerate(words, 1)]
        out.table(['#', 'Word', 'Length'], rows)
    else:
        for word in words:
            print(word)

    if len(words) < args.count:
        out.print(f"\nNote: Only found {len(words)}/{args.count} distinct words. "
                  f"Try --allow-repeats, a larger corpus or a higher --prior.",
                  file=sys.stderr)
    return 0


def cmd_train(args, out: Output):
    """Train a model and save it as JSON."""
    corpus = load_corpus(args.corpus)
    generator = WordGenerator(corpus, args.order, args.prior)
    save_snapshot(generator.export_data(), args.output)
    out.success(f"Trained order-{args.order} model on {len(corpus)} words, saved to {args.output}")
    return 0


def cmd_info(args, out: Output):
    """Show alphabet and chain sizes of a model."""
    generator = build_generator(args)
    model = generator.model
    snapshot = generator.export_data()

    alphabet = ''.join(model.alphabet)
    out.print(f"Order:    {model.order()}")
    out.print(f"Alphabet: {alphabet} ({len(model.alphabet)} symbols)")

    rows = []
    for order, chain in enumerate(snapshot.chains, 1):
        busiest = max(chain, key=lambda context: sum(chain[context]), default="")
        rows.append([order, len(chain), busiest])
    out.table(['Order', 'Contexts', 'Busiest context'], rows, title='Chains')
    return 0


# =============================================================================
# Main
# =============================================================================

def _add_model_source(p: argparse.ArgumentParser, allow_model: bool = True):
    p.add_argument('--corpus', help='Corpus file, one word per line (default: bundled English towns)')
    p.add_argument('--order', '-k', type=int, default=_cli_default('order'),
                   help='Maximum context length (default: %(default)s)')
    p.add_argument('--prior', '-p', type=float, default=_cli_default('prior'),
                   help='Additive smoothing, 0.001-0.05 adds randomness (default: %(default)s)')
    if allow_model:
        p.add_argument('--model', '-M', help='Load a trained model JSON instead of training')


def main():
    parser = argparse.ArgumentParser(
        prog='wordforge',
        description='Wordforge - n-gram letter model word generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate -n 10
  %(prog)s generate -n 20 --min-length 4 --max-length 7 --seed 42
  %(prog)s train --corpus names.txt --order 2 -o model.json
  %(prog)s generate --model model.json --json
  %(prog)s info --corpus names.txt
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], help='Generate words')
    p.add_argument('-n', '--count', type=int, default=_cli_default('count'),
                   help='Number of words (default: %(default)s)')
    p.add_argument('--min-length', type=int, default=_cli_default('min_length'),
                   help='Minimum word length (default: %(default)s)')
    p.add_argument('--max-length', type=int, default=_cli_default('max_length'),
                   help='Maximum word length (default: %(default)s)')
    _add_model_source(p)
    p.add_argument('--allow-repeats', '-r', action='store_true', help='Allow duplicate words')
    p.add_argument('--seed', type=int, help='Random seed for reproducible output')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')
    p.add_argument('--verbose', '-v', action='store_true', help='Show detailed output')

    # --- train ---
    p = subparsers.add_parser('train', aliases=['t'], help='Train a model and save it as JSON')
    _add_model_source(p, allow_model=False)
    p.add_argument('--output', '-o', required=True, help='Output model file path')

    # --- info ---
    p = subparsers.add_parser('info', aliases=['i'], help='Show model alphabet and chain sizes')
    _add_model_source(p)

    # Parse
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, 'verbose', False) else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    # Handle aliases
    cmd_map = {
        'gen': 'generate', 'g': 'generate',
        't': 'train',
        'i': 'info',
    }
    command = cmd_map.get(args.command, args.command)

    # Output handler
    out = Output(quiet=getattr(args, 'quiet', False))

    # Dispatch
    commands = {
        'generate': cmd_generate,
        'train': cmd_train,
        'info': cmd_info,
    }

    handler = commands.get(command)
    if handler:
        try:
            return handler(args, out)
        except KeyboardInterrupt:
            out.print("\nCancelled.")
            return 130
        except Exception as e:
            out.error(str(e))
            if getattr(args, 'verbose', False):
                import traceback
                traceback.print_exc()
            return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
