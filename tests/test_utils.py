from utils import tokenize


def test_keeps_only_alphabetic_words_lowercased():
    assert tokenize("12 Main St., Windsor ON N9A-1B2") == ["main", "st", "windsor", "on"]


def test_drops_mixed_and_underscored_tokens():
    assert tokenize("3beds 2_baths Condo") == ["condo"]


def test_non_string_cells():
    assert tokenize(None) == []
    assert tokenize(42.0) == []
    assert tokenize(True) == ["true"]
    assert tokenize("") == []
