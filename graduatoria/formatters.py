import re

DISPLAY_PREFIXES = [
    (re.compile(r'^Alma Mater Studiorum - Università di ', re.I), ''),
    (re.compile(r'^Alma Mater Studiorum - ', re.I), ''),
    (re.compile(r'^Università degli Studi di ', re.I), ''),
    (re.compile(r'^Università degli Studi ', re.I), ''),
    (re.compile(r'^Università del ', re.I), ''),
    (re.compile(r'^Università della ', re.I), ''),
    (re.compile(r'^Università di ', re.I), ''),
    (re.compile(r'^Università Politecnica ', re.I), 'Politecnica '),
    (re.compile(r'^Università ', re.I), ''),
]

WORD_START = re.compile(r'(^|[^a-z0-9])([a-z])')


def format_university_name(name):
    """'Università degli Studi di NAPOLI "Parthenope"' -> 'Napoli "Parthenope"'."""
    if not isinstance(name, str):
        return ''
    formatted = name
    for pattern, repl in DISPLAY_PREFIXES:
        formatted = pattern.sub(repl, formatted)
    formatted = formatted.lower()
    return WORD_START.sub(lambda m: m.group(1) + m.group(2).upper(), formatted)
