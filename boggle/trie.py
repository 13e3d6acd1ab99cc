from __future__ import annotations

from enum import IntEnum


class Match(IntEnum):
    """Outcome of a prefix query against the trie."""

    ABSENT = 0
    WORD = 1
    PREFIX = 2


class TrieNode:
    __slots__ = ("children", "is_word")

    def __init__(self):
        self.children: dict[str, TrieNode] = {}
        self.is_word: bool = False

    def match(self) -> Match:
        return Match.WORD if self.is_word else Match.PREFIX


class Trie:
    """Prefix tree over uppercase words.

    Callers fold case and apply length policy before inserting; the trie
    stores whatever letters it is given.
    """

    def __init__(self):
        self.root = TrieNode()
        self._word_count = 0

    def insert(self, word: str):
        node = self.root
        for ch in word:
            if ch not in node.children:
                node.children[ch] = TrieNode()
            node = node.children[ch]
        # An empty word would mark the root terminal
        if word and not node.is_word:
            node.is_word = True
            self._word_count += 1

    def find_node(self, s: str) -> TrieNode | None:
        node = self.root
        for ch in s:
            node = node.children.get(ch)
            if node is None:
                return None
        return node

    def query(self, s: str) -> Match:
        """Classify *s* as ABSENT, a complete WORD, or only a PREFIX.

        Stops at the first missing edge. The empty string is always a PREFIX.
        """
        node = self.find_node(s)
        if node is None:
            return Match.ABSENT
        return node.match()

    def __contains__(self, word: str) -> bool:
        return self.query(word) is Match.WORD

    def __len__(self) -> int:
        return self._word_count
