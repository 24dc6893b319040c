from typing import List, Optional, Tuple

from avl_dictionary import OrderedFrequencyDictionary
from top_k import TopKSelector

DEFAULT_SUGGESTION_COUNT = 5

Suggestion = Tuple[str, int]


def normalize(text: str) -> str:
    """Case-folds a word or prefix the same way for inserts and queries."""
    return text.strip().lower()


class _Descending:
    """Wraps a value so that it orders in reverse."""
    __slots__ = ('value',)

    def __init__(self, value) -> None:
        self.value = value

    def __lt__(self, other: "_Descending") -> bool:
        return other.value < self.value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _Descending) and self.value == other.value


def _retention_rank(pair: Suggestion):
    # lowest frequency goes first, then the alphabetically last word
    word, frequency = pair
    return frequency, _Descending(word)


def format_suggestion(suggestion: Suggestion) -> str:
    """Renders a (word, frequency) pair as 'word (frequency)'."""
    word, frequency = suggestion
    return f"{word} ({frequency})"


class PrefixSuggester:
    """
    An autocomplete system backed by an OrderedFrequencyDictionary,
    returning the most frequent words that start with a given prefix.
    """

    def __init__(self, dictionary: Optional[OrderedFrequencyDictionary] = None,
                 k: int = DEFAULT_SUGGESTION_COUNT):
        """
        Initializes the PrefixSuggester.

        Args:
            dictionary (Optional[OrderedFrequencyDictionary]): The word store to
                query. A new, empty one is created if omitted.
            k (int): The default number of suggestions to return. Defaults to 5.
        """
        if not isinstance(k, int) or isinstance(k, bool) or k <= 0:
            raise ValueError("k must be a positive integer.")
        self.dictionary: OrderedFrequencyDictionary = (
            dictionary if dictionary is not None else OrderedFrequencyDictionary()
        )
        self.k_suggestions: int = k

    def insert(self, word: str) -> None:
        """
        Lowercases `word` and counts one occurrence of it.

        Raises:
            ValueError: If `word` is empty or only whitespace.
        """
        key = normalize(word)
        if not key:
            raise ValueError(f"word must contain non-whitespace characters, got {word!r}")
        self.dictionary.insert(key)

    def contains(self, word: str) -> bool:
        return self.dictionary.contains(normalize(word))

    def suggest(self, prefix: str, k: Optional[int] = None) -> List[Suggestion]:
        """
        Suggests the top k words starting with the given prefix.

        Matches are narrowed to the k most frequent with a bounded min-heap,
        then ordered by frequency (descending) and word (ascending) so that
        ties always come out in alphabetical order. When ties straddle the
        cutoff, the alphabetically first words are the ones kept.

        Args:
            prefix (str): The prefix to search for. Lowercased before use.
            k (Optional[int]): How many suggestions to return at most.
                               Defaults to the value given at construction.

        Returns:
            List[Tuple[str, int]]: (word, frequency) pairs, most popular first.
                                   Empty if no word matches.
        """
        if not isinstance(prefix, str):
            return []
        limit = self.k_suggestions if k is None else k

        selector: TopKSelector[Suggestion] = TopKSelector(limit, key=_retention_rank)
        selector.extend(self.dictionary.prefix_scan(normalize(prefix)))

        return sorted(selector.items(), key=lambda pair: (-pair[1], pair[0]))
