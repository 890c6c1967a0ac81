import pytest

from graduatoria.formatters import format_university_name


@pytest.mark.parametrize("name, expected", [
    ('Università degli Studi di NAPOLI "Parthenope"', 'Napoli "Parthenope"'),
    ("Alma Mater Studiorum - Università di BOLOGNA", "Bologna"),
    ("Università Politecnica delle MARCHE", "Politecnica Delle Marche"),
    ("Università degli Studi di MILANO-BICOCCA", "Milano-Bicocca"),
    ("Università della CALABRIA", "Calabria"),
])
def test_format_university_name(name, expected):
    assert format_university_name(name) == expected


def test_format_non_string():
    assert format_university_name(None) == ''
