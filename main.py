import os
import sys
import logging
import argparse
from typing import List, Optional, TextIO

from dotenv import load_dotenv

from autocomplete import DEFAULT_SUGGESTION_COUNT, PrefixSuggester, format_suggestion
from ingestion import DEFAULT_LAYOUTS, VocabularyBuilder

DEFAULT_DATA_DIR = "./resources"

logger = logging.getLogger(__name__)


def print_help(out: TextIO = sys.stdout) -> None:
    """Prints the available commands and their descriptions."""
    print("\nAutocomplete ready. Commands:", file=out)
    print("  suggest <prefix>  — Show the most popular words starting with <prefix>.", file=out)
    print("  <prefix>          — Same as 'suggest <prefix>'.", file=out)
    print("  contains <word>   — Check whether a word is in the vocabulary.", file=out)
    print("  dump              — Print every word with its frequency.", file=out)
    print("  help              — Show this help message.", file=out)
    print("  quit              — Exit the application.", file=out)
    print("-" * 30, file=out)


def print_suggestions(suggester: PrefixSuggester, prefix: str, k: Optional[int] = None,
                      out: TextIO = sys.stdout) -> None:
    suggestions = suggester.suggest(prefix, k)
    if not suggestions:
        print(f"No suggestions found for prefix '{prefix}'.", file=out)
        return
    print("Suggestions:", file=out)
    for suggestion in suggestions:
        print(format_suggestion(suggestion), file=out)


def print_all_words(suggester: PrefixSuggester, out: TextIO = sys.stdout) -> None:
    entries = suggester.dictionary.print_all()
    print(f"All words ({len(entries)}):", file=out)
    for entry in entries:
        print(format_suggestion(entry), file=out)


def handle_command(suggester: PrefixSuggester, user_input: str, out: TextIO = sys.stdout) -> bool:
    """
    Runs one line typed at the prompt.

    Returns:
        bool: False when the user asked to quit, True otherwise.
    """
    command_parts = user_input.split()
    if not command_parts:
        return True
    command = command_parts[0].lower()

    if command == "quit":
        print("Exiting autocomplete.", file=out)
        return False
    elif command == "help":
        print_help(out)
    elif command == "dump":
        print_all_words(suggester, out)
    elif command == "contains":
        if len(command_parts) < 2:
            print("Usage: contains <word>", file=out)
            return True
        word = command_parts[1]
        found = suggester.contains(word)
        print(f"'{word}' is {'in' if found else 'not in'} the vocabulary.", file=out)
    elif command == "suggest":
        if len(command_parts) < 2:
            print("Usage: suggest <prefix>", file=out)
            return True
        print_suggestions(suggester, command_parts[1], out=out)
    elif len(command_parts) == 1:
        print_suggestions(suggester, command_parts[0], out=out)
    else:
        print(f"Unknown command: '{command}'. Type 'help' for a list of commands.", file=out)
    return True


def run_prompt_loop(suggester: PrefixSuggester) -> None:
    print_help()
    while True:
        try:
            user_input = input("Enter a prefix >> ").strip()
            if not handle_command(suggester, user_input):
                break
        except KeyboardInterrupt:  # Ctrl+C
            print("\nExiting autocomplete (Keyboard Interrupt).")
            break
        except EOFError:  # Ctrl+D
            print("\nExiting autocomplete (EOF).")
            break
        except Exception as e:
            logger.error(f"An unexpected error occurred: {e}", exc_info=True)
            print(f"An unexpected error occurred: {e}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Word autocompletion over a vocabulary built from CSV and Excel sources.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--data_dir",
        type=str,
        default=os.getenv("AUTOCOMPLETE_DATA_DIR", DEFAULT_DATA_DIR),
        help="Directory holding the default source files."
    )
    parser.add_argument(
        "--source",
        action="append",
        default=[],
        metavar="PATH",
        help="Extra CSV or Excel file to read every cell from. May be repeated. "
             "When given, the default sources are not read."
    )
    parser.add_argument(
        "-k", "--suggestions",
        type=int,
        default=os.getenv("AUTOCOMPLETE_K", str(DEFAULT_SUGGESTION_COUNT)),
        help="Number of suggestions to show."
    )
    parser.add_argument(
        "--prefix",
        type=str,
        default=None,
        help="Print suggestions for this prefix and exit instead of prompting."
    )
    parser.add_argument(
        "--dump",
        action="store_true",
        help="Print every word in the vocabulary with its frequency."
    )
    parser.add_argument(
        "--no_progress",
        action="store_true",
        help="Hide the progress bars while reading sources."
    )
    parser.add_argument(
        "--log_level",
        type=str,
        default=os.getenv("AUTOCOMPLETE_LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level."
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.getLogger().setLevel(args.log_level.upper())

    if args.suggestions <= 0:
        parser.error("--suggestions must be a positive integer.")

    suggester = PrefixSuggester(k=args.suggestions)
    builder = VocabularyBuilder(suggester.dictionary, show_progress=not args.no_progress)

    if args.source:
        for path in args.source:
            builder.add_source(path)
    else:
        builder.build(args.data_dir, DEFAULT_LAYOUTS)

    if len(suggester.dictionary) == 0:
        logger.warning("The vocabulary is empty. Suggestions will be empty.")

    if args.dump:
        print_all_words(suggester)

    if args.prefix is not None:
        print_suggestions(suggester, args.prefix)
        return 0

    if not args.dump:
        run_prompt_loop(suggester)
    return 0


if __name__ == "__main__":
    sys.exit(main())
