import heapq
import itertools
from typing import Any, Callable, Generic, Iterable, List, Tuple, TypeVar

T = TypeVar('T')


def _second(item: Any) -> Any:
    return item[1]


class TopKSelector(Generic[T]):
    """
    Keeps the k largest items of a stream, by `key`.

    A min-heap of at most k entries: every offered item is pushed, and once the
    heap grows past k the smallest entry is evicted. Items with equal keys are
    kept or evicted in no particular order; callers that need a stable display
    order sort the result themselves.

    The default key is the second element of each item, which for
    (word, frequency) pairs is the frequency.
    """

    def __init__(self, k: int, key: Callable[[T], Any] = _second) -> None:
        """
        Args:
            k (int): Capacity. Must be a positive integer.
            key (Callable): Maps an item to the value it is ranked by.
        """
        if not isinstance(k, int) or isinstance(k, bool) or k <= 0:
            raise ValueError("k must be a positive integer.")
        self.k: int = k
        self._key = key
        # (key, sequence number, item); the counter keeps items out of comparisons
        self._heap: List[Tuple[Any, int, T]] = []
        self._counter = itertools.count()

    def __len__(self) -> int:
        return len(self._heap)

    def offer(self, item: T) -> None:
        heapq.heappush(self._heap, (self._key(item), next(self._counter), item))
        if len(self._heap) > self.k:
            heapq.heappop(self._heap)

    def extend(self, items: Iterable[T]) -> None:
        for item in items:
            self.offer(item)

    def peek_smallest(self) -> T:
        if not self._heap:
            raise IndexError("peek from empty selector")
        return self._heap[0][2]

    def pop_smallest(self) -> T:
        if not self._heap:
            raise IndexError("pop from empty selector")
        return heapq.heappop(self._heap)[2]

    def items(self) -> List[T]:
        """The retained items, in heap order."""
        return [item for _, _, item in self._heap]


def top_k(items: Iterable[T], k: int, key: Callable[[T], Any] = _second) -> List[T]:
    """Returns the k largest `items` by `key`, in no guaranteed order."""
    selector: TopKSelector[T] = TopKSelector(k, key=key)
    selector.extend(items)
    return selector.items()
