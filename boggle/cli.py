"""
Command-line Boggle solver.

Usage:
    boggle <words_file> [matrix_file] [--rows N] [--cols N] [--seed S]

Examples:
    boggle words.txt
    boggle words.txt board.json
    boggle words.txt --rows 5 --cols 5 --seed 7 --max-results 20

words_file is a newline-delimited word list. matrix_file is a JSON matrix of
letters; when omitted a random grid is generated. The grid is printed, then
every word found, longest first.
"""
import argparse
import json
import logging
import sys

from boggle.grid import InvalidGridError, format_grid, load_grid, random_grid
from boggle.metrics import SearchStats, StageTimer
from boggle.settings import settings
from boggle.solver import MIN_WORD_LENGTH, load_trie, rank_words, solve

logger = logging.getLogger("boggle")


def _word_length(value: str) -> int:
    length = int(value)
    if length < MIN_WORD_LENGTH:
        raise argparse.ArgumentTypeError(f"must be at least {MIN_WORD_LENGTH}, got {length}")
    return length


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="boggle", description="Find every word in a Boggle grid")
    parser.add_argument("words_file", help="Newline-delimited word list")
    parser.add_argument("matrix_file", nargs="?", default=None,
                        help="JSON matrix of letters (default: random grid)")
    parser.add_argument("--rows", type=int, default=settings.DEFAULT_ROWS,
                        help=f"Rows of the random grid (default: {settings.DEFAULT_ROWS})")
    parser.add_argument("--cols", type=int, default=settings.DEFAULT_COLS,
                        help=f"Columns of the random grid (default: {settings.DEFAULT_COLS})")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the random grid")
    parser.add_argument("--min-length", type=_word_length, default=settings.MIN_WORD_LENGTH,
                        help=f"Shortest word to report (default: {settings.MIN_WORD_LENGTH})")
    parser.add_argument("--max-length", type=int, default=settings.MAX_WORD_LENGTH,
                        help=f"Longest dictionary word to load (default: {settings.MAX_WORD_LENGTH})")
    parser.add_argument("--max-results", type=int, default=0,
                        help="Print at most N words (default: all)")
    parser.add_argument("--json", action="store_true",
                        help="Print the board and words as a JSON object")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log loading and stage timings")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    timer = StageTimer()

    with timer.stage("dictionary"):
        try:
            trie = load_trie(args.words_file, args.min_length, args.max_length)
        except (OSError, UnicodeDecodeError) as e:
            logger.info("Could not load %s: %s", args.words_file, e)
            print("Error reading words file.", file=sys.stderr)
            return 1

    with timer.stage("board"):
        try:
            if args.matrix_file:
                board = load_grid(args.matrix_file)
            else:
                board = random_grid(args.rows, args.cols, args.seed)
        except InvalidGridError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except (OSError, ValueError) as e:
            logger.info("Could not load %s: %s", args.matrix_file, e)
            if args.matrix_file:
                print("Error reading matrix file.", file=sys.stderr)
            else:
                print(f"Error: {e}", file=sys.stderr)
            return 1

    stats = SearchStats()
    with timer.stage("solve"):
        words = rank_words(solve(trie, board, args.min_length, stats), args.max_results)

    logger.info("branches=%d pruned=%d found=%d total=%.1fms",
                stats.branches, stats.pruned, stats.found, timer.total_ms)

    if args.json:
        print(json.dumps({"board": board, "words": words}))
    else:
        print(format_grid(board))
        print()
        for word in words:
            print(word)
    return 0


if __name__ == "__main__":
    sys.exit(main())
