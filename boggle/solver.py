from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from boggle.grid import validate_grid
from boggle.metrics import SearchStats
from boggle.trie import Trie

logger = logging.getLogger("boggle")

MIN_WORD_LENGTH = 3
MAX_WORD_LENGTH = 16

_WORD_RE = re.compile(r"[A-Z]+")


def _check_min_length(min_length: int):
    if min_length < MIN_WORD_LENGTH:
        raise ValueError(f"min_length must be at least {MIN_WORD_LENGTH}, got {min_length}")


def build_trie(words: Iterable[str], min_length: int = MIN_WORD_LENGTH, max_length: int = MAX_WORD_LENGTH) -> Trie:
    """Fold each word to uppercase and insert those of length min_length..max_length.

    Blank lines are ignored; entries with anything other than A-Z are skipped.
    """
    _check_min_length(min_length)
    trie = Trie()
    skipped = 0
    for raw in words:
        word = raw.strip().upper()
        if not word:
            continue
        if not _WORD_RE.fullmatch(word):
            skipped += 1
            continue
        if min_length <= len(word) <= max_length:
            trie.insert(word)
    if skipped:
        logger.debug("Skipped %d non-letter dictionary entries", skipped)
    return trie


def load_trie(path: str, min_length: int = MIN_WORD_LENGTH, max_length: int = MAX_WORD_LENGTH) -> Trie:
    with open(path, "r", encoding="utf-8") as f:
        trie = build_trie(f, min_length, max_length)
    logger.info("Loaded %d words from %s", len(trie), path)
    return trie


def _neighbor_table(rows: int, cols: int) -> list[list[int]]:
    neighbors: list[list[int]] = []
    for idx in range(rows * cols):
        r, c = divmod(idx, cols)
        adj = []
        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                if dr == 0 and dc == 0:
                    continue
                nr, nc = r + dr, c + dc
                if 0 <= nr < rows and 0 <= nc < cols:
                    adj.append(nr * cols + nc)
        neighbors.append(adj)
    return neighbors


def solve(trie: Trie, board: list[list[str]], min_length: int = MIN_WORD_LENGTH,
          stats: SearchStats | None = None) -> set[str]:
    """Find every dictionary word spelled by a simple 8-adjacent path on the board.

    Iterative DFS over an explicit stack. Each branch carries the trie node of
    its parent, the string spelled so far and an int bitmask of visited cells;
    children get ``visited | bit`` so siblings never share visited state. A
    branch whose string is not a prefix of any word is dropped before its
    neighbours are pushed.

    Raises ValueError when min_length is below 3. Counters in *stats* are
    added to, so one SearchStats can total several searches.
    """
    _check_min_length(min_length)
    board = validate_grid(board)
    rows, cols = len(board), len(board[0])
    total_cells = rows * cols
    cells = [ch for row in board for ch in row]
    neighbors = _neighbor_table(rows, cols)

    found: set[str] = set()
    branches = pruned = 0

    for start in range(total_cells):
        stack = [(start, trie.root, "", 1 << start)]
        while stack:
            idx, parent, prefix, visited = stack.pop()
            branches += 1

            node = parent.children.get(cells[idx])
            if node is None:
                pruned += 1
                continue

            word = prefix + cells[idx]
            if node.is_word and len(word) >= min_length:
                found.add(word)

            # Longest simple path uses every cell once
            if len(word) >= total_cells or not node.children:
                continue

            for nidx in neighbors[idx]:
                bit = 1 << nidx
                if not visited & bit:
                    stack.append((nidx, node, word, visited | bit))

    if stats is not None:
        stats.branches += branches
        stats.pruned += pruned
        stats.found += len(found)
    logger.debug("Searched %dx%d grid: %d branches, %d pruned, %d words",
                 rows, cols, branches, pruned, len(found))
    return found


def rank_words(words: Iterable[str], max_results: int = 0) -> list[str]:
    """Sort longest first, then alphabetically. max_results <= 0 keeps everything."""
    result = sorted(words, key=lambda w: (-len(w), w))
    return result[:max_results] if max_results > 0 else result


def find_path(board: list[list[str]], word: str) -> list[tuple[int, int]] | None:
    """Return one simple path spelling *word*, trying start cells in row-major order."""
    board = validate_grid(board)
    word = word.upper()
    if not word:
        return None
    rows, cols = len(board), len(board[0])
    if len(word) > rows * cols:
        return None
    cells = [ch for row in board for ch in row]
    neighbors = _neighbor_table(rows, cols)

    def extend(path: list[int], visited: int) -> list[int] | None:
        if len(path) == len(word):
            return path
        nxt = word[len(path)]
        for nidx in neighbors[path[-1]]:
            if cells[nidx] == nxt and not visited & (1 << nidx):
                hit = extend(path + [nidx], visited | (1 << nidx))
                if hit is not None:
                    return hit
        return None

    for start in range(rows * cols):
        if cells[start] == word[0]:
            hit = extend([start], 1 << start)
            if hit is not None:
                return [divmod(idx, cols) for idx in hit]
    return None
