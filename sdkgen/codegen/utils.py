"""Naming helpers shared by every stage of the compiler.

All derived names (synthetic model names, method names, service names) go through
`split_words`, so one input always splits the same way within a run:
``split_words('XMLHttpRequest') == ['XML', 'Http', 'Request']``.
"""

import re
import unicodedata

__all__ = (
    'remove_accents',
    'split_words',
    'to_camel_case',
    'to_kebab_case',
    'to_pascal_case',
    'to_snake_case',
)

_NON_ALNUM = re.compile(r'[^A-Za-z0-9]+')


def remove_accents(input_str: str) -> str:
    """Strip combining marks, so 'café' becomes 'cafe' and 'São' becomes 'Sao'."""
    nfd_form = unicodedata.normalize('NFD', input_str)
    stripped = ''.join(c for c in nfd_form if not unicodedata.combining(c))
    return unicodedata.normalize('NFC', stripped)


def _split_camel(run: str) -> list[str]:
    words = []
    current = ''
    for i, char in enumerate(run):
        if i > 0 and char.isupper():
            prev = run[i - 1]
            starts_word = not prev.isupper() or (
                i + 1 < len(run) and run[i + 1].islower()
            )
            if starts_word and current:
                words.append(current)
                current = ''
        current += char
    if current:
        words.append(current)
    return words


def split_words(text: str) -> list[str]:
    """Split an identifier-ish string into words.

    Runs of non-alphanumeric characters separate words. Inside a run, a new word
    starts at an uppercase letter that follows a non-uppercase character, or at an
    uppercase letter followed by a lowercase one when the previous letter was also
    uppercase (the end of an acronym).

    Examples:
        >>> split_words('listUserResources')
        ['list', 'User', 'Resources']
        >>> split_words('XMLHttpRequest')
        ['XML', 'Http', 'Request']
        >>> split_words('hello-world_again')
        ['hello', 'world', 'again']
    """
    if not text:
        return []
    words = []
    for run in _NON_ALNUM.split(remove_accents(text.strip())):
        if run:
            words.extend(_split_camel(run))
    return words


def to_pascal_case(text: str) -> str:
    return ''.join(word[:1].upper() + word[1:].lower() for word in split_words(text))


def to_camel_case(text: str) -> str:
    pascal = to_pascal_case(text)
    return pascal[:1].lower() + pascal[1:]


def to_snake_case(text: str) -> str:
    return '_'.join(word.lower() for word in split_words(text))


def to_kebab_case(text: str) -> str:
    return '-'.join(word.lower() for word in split_words(text))
