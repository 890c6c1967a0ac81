import pytest

from graduatoria.enrollments import ENROLLMENTS, load_enrollments
from graduatoria.resolver import UniversityResolver, normalize_name


def test_every_reference_name_resolves_to_its_id(resolver):
    for row in ENROLLMENTS:
        assert resolver.resolve(row['name']) == row['id']


def test_napoli_universities_are_not_confused(resolver):
    federico = resolver.resolve("Università degli Studi di Napoli Federico II")
    parthenope = resolver.resolve("Università degli Studi di Napoli Parthenope")
    assert federico == '18'
    assert parthenope == '41'
    assert federico != parthenope


@pytest.mark.parametrize("name, expected", [
    ("UNIVERSITA' DEGLI STUDI DI NAPOLI FEDERICO II", '18'),
    ("universita degli studi di catania", '08'),
    ("Sapienza Università di Roma", '26'),
    ("Università di Roma Tor Vergata", '27'),
    ("Statale di Milano", '15'),
    ("Università degli Studi di Milano-Bicocca", 'C6'),
    ("Università della Campania Luigi Vanvitelli", '49'),
    ("Università Insubria", 'C7'),
])
def test_resolves_naming_variants(resolver, name, expected):
    assert resolver.resolve(name) == expected


def test_exclusion_blocks_generic_alias(resolver):
    # "MILANO" alone would hit the Statale; Politecnico is a different university
    assert resolver.resolve("Politecnico di Milano") is None


@pytest.mark.parametrize("name", [None, "", "   ", "Harvard University"])
def test_unknown_names_give_none(resolver, name):
    assert resolver.resolve(name) is None


def test_normalize_name_strips_legal_prefixes():
    assert normalize_name("Università degli Studi dell'AQUILA") == "AQUILA"
    assert normalize_name("Alma Mater Studiorum - Università di BOLOGNA") == "BOLOGNA"
    assert normalize_name("Università degli Studi della BASILICATA") == "BASILICATA"
    assert normalize_name('Università degli Studi di ROMA "La Sapienza"') == "ROMA LA SAPIENZA"


def test_resolve_many_and_reference_row(resolver):
    mapping = resolver.resolve_many(["Università degli Studi di PADOVA", "Boh", "Università degli Studi di PADOVA"])
    assert mapping == {"Università degli Studi di PADOVA": '19', "Boh": None}
    row = resolver.reference_row('19')
    assert row['available_seats'] == 713
    assert resolver.reference_row(None) is None
    assert resolver.reference_row('ZZ') is None


def test_resolution_is_scoped_to_the_reference_table():
    only_padova = load_enrollments([{'id': '19', 'name': "Università degli Studi di PADOVA"}])
    resolver = UniversityResolver(only_padova)
    assert resolver.resolve("Università degli Studi di CATANIA") is None
    assert resolver.resolve("Università degli Studi di PADOVA") == '19'
