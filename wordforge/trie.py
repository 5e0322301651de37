from __future__ import annotations
from typing import Dict, Iterable, Optional


class TrieNode:
    __slots__ = ('children', 'is_end')

    def __init__(self):
        self.children: Dict[str, TrieNode] = {}
        self.is_end: bool = False


class Trie:
    """Prefix tree over lowercase words.

    Built once by the dictionary loader and only read afterwards. Lookups
    lowercase their input so callers can pass grid letters directly.
    """

    def __init__(self):
        self.root = TrieNode()
        self._size = 0

    @classmethod
    def from_words(cls, words: Iterable[str]) -> 'Trie':
        trie = cls()
        for w in words:
            trie.insert(w)
        return trie

    def insert(self, word: str) -> None:
        node = self.root
        for ch in word.lower():
            child = node.children.get(ch)
            if child is None:
                child = node.children[ch] = TrieNode()
            node = child
        if not node.is_end:
            node.is_end = True
            self._size += 1

    def _walk(self, text: str) -> Optional[TrieNode]:
        node = self.root
        for ch in text.lower():
            node = node.children.get(ch)
            if node is None:
                return None
        return node

    def exists(self, word: str) -> bool:
        node = self._walk(word)
        return node is not None and node.is_end

    def is_prefix(self, text: str) -> bool:
        return self._walk(text) is not None

    def __contains__(self, word: str) -> bool:
        return self.exists(word)

    def __len__(self) -> int:
        return self._size

    # Plain nested dict form: {'isEnd': bool, 'children': {letter: node}}
    def serialize(self) -> dict:
        def to_dict(node: TrieNode) -> dict:
            return {
                'isEnd': node.is_end,
                'children': {ch: to_dict(child) for ch, child in node.children.items()},
            }
        return to_dict(self.root)

    @classmethod
    def deserialize(cls, data: dict) -> 'Trie':
        trie = cls()

        def build(d: dict) -> TrieNode:
            node = TrieNode()
            node.is_end = bool(d.get('isEnd', False))
            if node.is_end:
                trie._size += 1
            for ch, child in (d.get('children') or {}).items():
                node.children[ch] = build(child)
            return node

        trie.root = build(data)
        return trie
