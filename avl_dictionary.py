import logging
from typing import Iterable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


class AVLNode:
    """
    A node in the AVL tree.

    Attributes:
        word (str): The key. Never changes once the node exists.
        frequency (int): How many times the word has been inserted.
        height (int): Cached height of the subtree rooted at this node.
        left (Optional[AVLNode]): Subtree of smaller words.
        right (Optional[AVLNode]): Subtree of larger words.
    """
    __slots__ = ('word', 'frequency', 'height', 'left', 'right')

    def __init__(self, word: str) -> None:
        self.word: str = word
        self.frequency: int = 1
        self.height: int = 1
        self.left: Optional[AVLNode] = None
        self.right: Optional[AVLNode] = None


def _height(node: Optional[AVLNode]) -> int:
    return node.height if node is not None else 0


def _update_height(node: AVLNode) -> None:
    node.height = 1 + max(_height(node.left), _height(node.right))


def _balance(node: Optional[AVLNode]) -> int:
    if node is None:
        return 0
    return _height(node.left) - _height(node.right)


def _rotate_right(y: AVLNode) -> AVLNode:
    x = y.left
    inner = x.right

    x.right = y
    y.left = inner

    _update_height(y)
    _update_height(x)
    logger.debug("Right rotation on '%s'", y.word)
    return x


def _rotate_left(x: AVLNode) -> AVLNode:
    y = x.right
    inner = y.left

    y.left = x
    x.right = inner

    _update_height(x)
    _update_height(y)
    logger.debug("Left rotation on '%s'", x.word)
    return y


class OrderedFrequencyDictionary:
    """
    An ordered dictionary of words and their occurrence counts, stored in a
    height-balanced (AVL) binary search tree keyed on the word text.

    The dictionary is built once through repeated calls to `insert` and then
    queried. Nodes never leave the dictionary: every read returns plain
    (word, frequency) tuples.
    """

    def __init__(self, words: Optional[Iterable[str]] = None) -> None:
        """
        Initializes the dictionary.

        Args:
            words (Optional[Iterable[str]]): Words to insert right away, in order.
        """
        self._root: Optional[AVLNode] = None
        self._size: int = 0
        self._total: int = 0
        if words is not None:
            for word in words:
                self.insert(word)

    def __len__(self) -> int:
        return self._size

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self.contains(word)

    def __iter__(self) -> Iterator[str]:
        for word, _ in self.items():
            yield word

    @property
    def height(self) -> int:
        """Height of the whole tree, 0 when empty."""
        return _height(self._root)

    @property
    def total_count(self) -> int:
        """Sum of the frequencies of every stored word."""
        return self._total

    def insert(self, word: str) -> None:
        """
        Inserts a word, or increments its frequency if it is already stored.

        A new word becomes a leaf with frequency 1; the insertion path is then
        rebalanced on the way back up. Case folding is the caller's job.

        Args:
            word (str): The word to insert. Must be a non-empty string.

        Raises:
            TypeError: If `word` is not a string.
            ValueError: If `word` is empty.
        """
        if not isinstance(word, str):
            raise TypeError(f"word must be a string, got {type(word).__name__}")
        if not word:
            raise ValueError("word must be a non-empty string.")

        self._root = self._insert(self._root, word)
        self._total += 1

    def _insert(self, node: Optional[AVLNode], word: str) -> AVLNode:
        if node is None:
            self._size += 1
            return AVLNode(word)

        if word < node.word:
            node.left = self._insert(node.left, word)
        elif word > node.word:
            node.right = self._insert(node.right, word)
        else:
            node.frequency += 1
            return node

        _update_height(node)
        balance = _balance(node)

        # Left Left
        if balance > 1 and word < node.left.word:
            return _rotate_right(node)

        # Right Right
        if balance < -1 and word > node.right.word:
            return _rotate_left(node)

        # Left Right
        if balance > 1 and word > node.left.word:
            node.left = _rotate_left(node.left)
            return _rotate_right(node)

        # Right Left
        if balance < -1 and word < node.right.word:
            node.right = _rotate_right(node.right)
            return _rotate_left(node)

        return node

    def _find(self, word: str) -> Optional[AVLNode]:
        node = self._root
        while node is not None:
            if word == node.word:
                return node
            node = node.left if word < node.word else node.right
        return None

    def contains(self, word: str) -> bool:
        """Returns True if `word` is stored in the dictionary."""
        return self._find(word) is not None

    def frequency(self, word: str) -> int:
        """Returns the stored frequency of `word`, or 0 if it is absent."""
        node = self._find(word)
        return node.frequency if node is not None else 0

    def prefix_scan(self, prefix: str) -> List[Tuple[str, int]]:
        """
        Finds every stored word that starts with `prefix`.

        Words starting with a prefix form one contiguous range in key order,
        beginning at the prefix itself. A left subtree is skipped when the
        prefix is greater than the node's word (everything there is smaller
        still), and a right subtree is skipped when the node's word has
        already passed the end of that range.

        Args:
            prefix (str): The prefix to match. The empty prefix matches every word.

        Returns:
            List[Tuple[str, int]]: (word, frequency) pairs, one per matching word.
                                   The order is not meaningful.
        """
        result: List[Tuple[str, int]] = []
        self._prefix_scan(self._root, prefix, result)
        return result

    def _prefix_scan(self, node: Optional[AVLNode], prefix: str,
                     result: List[Tuple[str, int]]) -> None:
        if node is None:
            return

        matches = node.word.startswith(prefix)

        if prefix <= node.word:
            self._prefix_scan(node.left, prefix, result)

        if matches:
            result.append((node.word, node.frequency))

        # past the range: every key on the right is larger still
        if node.word > prefix and not matches:
            return
        self._prefix_scan(node.right, prefix, result)

    def print_all(self) -> List[Tuple[str, int]]:
        """
        Dumps every stored word with its frequency, in pre-order.

        Diagnostic only; the order reflects the tree shape.
        """
        result: List[Tuple[str, int]] = []
        stack = [self._root] if self._root is not None else []
        while stack:
            node = stack.pop()
            result.append((node.word, node.frequency))
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)
        return result

    def items(self) -> Iterator[Tuple[str, int]]:
        """Yields (word, frequency) pairs in ascending word order."""
        stack: List[AVLNode] = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node.word, node.frequency
            node = node.right

    def merge(self, other: "OrderedFrequencyDictionary") -> None:
        """
        Adds every word of `other` into this dictionary, summing frequencies.

        This is plain repeated insertion and must not run while anything else
        is writing to either dictionary.
        """
        for word, frequency in other.items():
            for _ in range(frequency):
                self.insert(word)

    def check_invariants(self) -> None:
        """
        Walks the whole tree and verifies ordering, cached heights and balance.

        Raises:
            AssertionError: On the first violated invariant.
        """
        previous: Optional[str] = None
        count = 0
        for word, frequency in self.items():
            if previous is not None and not previous < word:
                raise AssertionError(f"Keys out of order: '{previous}' before '{word}'")
            if frequency < 1:
                raise AssertionError(f"Non-positive frequency for '{word}': {frequency}")
            previous = word
            count += 1
        if count != self._size:
            raise AssertionError(f"Size mismatch: counted {count}, recorded {self._size}")
        self._check_node(self._root)

    def _check_node(self, node: Optional[AVLNode]) -> int:
        if node is None:
            return 0
        left = self._check_node(node.left)
        right = self._check_node(node.right)
        if node.height != 1 + max(left, right):
            raise AssertionError(f"Stale height at '{node.word}': {node.height}")
        if abs(left - right) > 1:
            raise AssertionError(f"Unbalanced at '{node.word}': {left} vs {right}")
        return node.height
