"""Display name formatting for generated bodies."""

from __future__ import annotations

GREEK_LETTERS = (
    'Alpha', 'Beta', 'Gamma', 'Delta', 'Epsilon', 'Zeta', 'Eta', 'Theta',
    'Iota', 'Kappa', 'Lambda', 'Mu', 'Nu', 'Xi', 'Omicron', 'Pi',
    'Rho', 'Sigma', 'Tau', 'Upsilon', 'Phi', 'Chi', 'Psi', 'Omega',
)

_ROMAN = (
    (1000, 'M'), (900, 'CM'), (500, 'D'), (400, 'CD'),
    (100, 'C'), (90, 'XC'), (50, 'L'), (40, 'XL'),
    (10, 'X'), (9, 'IX'), (5, 'V'), (4, 'IV'), (1, 'I'),
)


def to_roman(number: int) -> str:
    """Roman numeral for number >= 1; str(number) otherwise."""
    if number < 1:
        return str(number)
    out = []
    for value, numeral in _ROMAN:
        while number >= value:
            out.append(numeral)
            number -= value
    return ''.join(out)


def to_greek(index: int) -> str:
    """Greek letter name for 0-based index; wraps with a numeric suffix after Omega."""
    letter = GREEK_LETTERS[index % len(GREEK_LETTERS)]
    cycle = index // len(GREEK_LETTERS)
    return letter if cycle == 0 else f'{letter} {cycle + 1}'


def to_letters(index: int) -> str:
    """Lowercase spreadsheet-style letters for 0-based index: a..z, aa, ab, ..."""
    out = ''
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        out = chr(ord('a') + rem) + out
    return out


def format_name(template: str, index: int, subtype_id: str = '', parent_name: str = '') -> str:
    """Render a name template for the body at 0-based ``index``.

    Placeholders: {number} (1-based), {roman}, {greek}, {letter}, {LETTER},
    {subtype}, {parent}. Unknown placeholders are left in place.
    """
    values = {
        'number': str(index + 1),
        'roman': to_roman(index + 1),
        'greek': to_greek(index),
        'letter': to_letters(index),
        'LETTER': to_letters(index).upper(),
        'subtype': subtype_id,
        'parent': parent_name,
    }
    return template.format_map(_Keep(values)).strip()


class _Keep(dict):
    def __missing__(self, key: str) -> str:
        return '{' + key + '}'
