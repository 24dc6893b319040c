import re
from typing import Any, List

_SPLIT = re.compile(r'\W+')
_ALPHABETIC = re.compile(r'^[a-zA-Z]+$')


def tokenize(text: Any) -> List[str]:
    """
    Split on non-word characters, keep purely alphabetic words, lowercase them.
    """
    if text is None:
        return []
    if not isinstance(text, str):
        text = str(text)
    return [word.lower() for word in _SPLIT.split(text) if _ALPHABETIC.match(word)]
