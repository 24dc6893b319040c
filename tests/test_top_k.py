import pytest

from top_k import TopKSelector, top_k


def test_keeps_the_k_highest_frequencies():
    selector = TopKSelector(3)
    selector.extend([("w%d" % f, f) for f in [5, 1, 9, 3, 7, 2, 8]])
    assert len(selector) == 3
    assert sorted(f for _, f in selector.items()) == [7, 8, 9]


def test_fewer_items_than_capacity():
    selector = TopKSelector(5)
    selector.offer(("only", 1))
    assert selector.items() == [("only", 1)]


def test_pop_smallest_returns_in_ascending_order():
    selector = TopKSelector(4)
    selector.extend([("a", 4), ("b", 1), ("c", 3), ("d", 2), ("e", 6)])
    popped = [selector.pop_smallest() for _ in range(len(selector))]
    assert [f for _, f in popped] == [2, 3, 4, 6]
    with pytest.raises(IndexError):
        selector.pop_smallest()
    with pytest.raises(IndexError):
        selector.peek_smallest()


def test_equal_keys_never_compare_items():
    class Opaque:
        pass

    selector = TopKSelector(2, key=lambda item: 1)
    for _ in range(5):
        selector.offer(Opaque())
    assert len(selector) == 2


def test_custom_key_and_helper():
    assert sorted(top_k(["ccc", "a", "bb", "dddd"], 2, key=len)) == ["ccc", "dddd"]
    assert top_k([], 3) == []


@pytest.mark.parametrize("k", [0, -1, 2.5, True])
def test_rejects_invalid_capacity(k):
    with pytest.raises(ValueError):
        TopKSelector(k)
