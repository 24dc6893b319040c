import csv
import io

import pytest

from autocomplete import PrefixSuggester
from main import handle_command, main


@pytest.fixture
def listings(tmp_path):
    path = tmp_path / "listings.csv"
    with open(path, "w", encoding="utf-8", newline="") as handle:
        csv.writer(handle).writerows([
            ["description"],
            ["home home home"],
            ["house house"],
            ["hotel"],
        ])
    return str(path)


def test_one_shot_prefix(listings, capsys):
    assert main(["--source", listings, "--prefix", "Ho", "--no_progress"]) == 0
    out = capsys.readouterr().out
    assert "Suggestions:\nhome (3)\nhouse (2)\nhotel (1)\n" in out


def test_one_shot_without_matches(listings, capsys):
    assert main(["--source", listings, "--prefix", "xyz", "--no_progress"]) == 0
    assert "No suggestions found for prefix 'xyz'." in capsys.readouterr().out


def test_dump_lists_every_word(listings, capsys):
    assert main(["--source", listings, "--dump", "--no_progress"]) == 0
    out = capsys.readouterr().out
    assert "All words (3):" in out
    for line in ["home (3)", "house (2)", "hotel (1)"]:
        assert line in out


def test_k_flag_limits_output(listings, capsys):
    main(["--source", listings, "--prefix", "ho", "-k", "1", "--no_progress"])
    out = capsys.readouterr().out
    assert "home (3)" in out
    assert "house (2)" not in out


def test_handle_command():
    suggester = PrefixSuggester()
    for word in ["cat", "car", "cart", "dog"]:
        suggester.insert(word)
    out = io.StringIO()

    assert handle_command(suggester, "suggest ca", out)
    assert handle_command(suggester, "contains dog", out)
    assert handle_command(suggester, "contains bird", out)
    assert handle_command(suggester, "do", out)
    assert handle_command(suggester, "", out)
    assert not handle_command(suggester, "quit", out)

    text = out.getvalue()
    assert "car (1)\ncart (1)\ncat (1)\n" in text
    assert "'dog' is in the vocabulary." in text
    assert "'bird' is not in the vocabulary." in text
    assert "dog (1)" in text


def test_k_from_environment(listings, capsys, monkeypatch):
    monkeypatch.setenv("AUTOCOMPLETE_K", "2")
    main(["--source", listings, "--prefix", "ho", "--no_progress"])
    out = capsys.readouterr().out
    assert "house (2)" in out
    assert "hotel (1)" not in out


def test_non_numeric_k_from_environment_is_a_usage_error(listings, capsys, monkeypatch):
    monkeypatch.setenv("AUTOCOMPLETE_K", "many")
    with pytest.raises(SystemExit) as info:
        main(["--source", listings, "--prefix", "ho", "--no_progress"])
    assert info.value.code == 2
    assert "invalid int value: 'many'" in capsys.readouterr().err
