from graduatoria.config import RECORD_COLUMNS
from graduatoria.results import filter_survey, load_results, load_universities
from graduatoria.students import aggregate_students


def test_load_results_parses_feed(raw_feed):
    results, _ = raw_feed
    records = load_results(results)

    assert list(records.columns) == RECORD_COLUMNS
    # 'n/a' and 'latino' rows are dropped
    assert len(records) == 7
    assert set(records['subject']) == {'physics', 'chemistry', 'biology'}
    neg = records[records['label'] == 'DEF2'].iloc[0]
    assert neg['score'] == -1.5
    assert neg['university_name'] == "Università degli Studi di MILANO"
    assert neg['university_id'] == 'u15'
    srv = records[records['label'] == 'SRV-X1']
    assert srv['is_from_survey'].all()
    assert (srv['source'] == 'internal_survey').all()


def test_load_results_reports_when_verbose(raw_feed, capsys):
    results, _ = raw_feed
    load_results(results, verbose=True)
    out = capsys.readouterr().out
    assert "7 esami" in out
    assert "Scartate 2" in out


def test_duplicate_label_subject_keeps_last():
    uni = {'nome': 'X', 'id': '1'}
    records = load_results([
        {'etichetta': 'A1', 'punteggio': '10', 'materia': 'fisica', 'is_from_survey': False, 'universita': uni},
        {'etichetta': 'A1', 'punteggio': '12', 'materia': 'fisica', 'is_from_survey': False, 'universita': uni},
    ])
    assert records['score'].tolist() == [12.0]


def test_empty_payload():
    assert load_results([]).empty
    assert list(load_results(None).columns) == RECORD_COLUMNS


def test_filter_survey(raw_feed):
    records = load_results(raw_feed[0])
    assert len(filter_survey(records, True)) == 7
    official = filter_survey(records, False)
    assert len(official) == 5
    assert not official['is_from_survey'].any()


def test_load_universities_fixes_region(raw_feed):
    _, universities = raw_feed
    unis = load_universities(universities)
    assert unis['region'].tolist() == ['Lombardia', 'Veneto', 'Lombardia']
    assert unis['name'].iloc[1] == "Università degli Studi di PADOVA"


def test_duplicate_keeps_first_seen_label_order():
    uni = {'nome': 'X', 'id': '1'}
    records = load_results([
        {'etichetta': 'ZZZ', 'punteggio': '10', 'materia': 'fisica', 'universita': uni},
        {'etichetta': 'AAA', 'punteggio': '20', 'materia': 'fisica', 'universita': uni},
        {'etichetta': 'ZZZ', 'punteggio': '22', 'materia': 'fisica', 'universita': uni},
    ])
    assert records['label'].tolist() == ['ZZZ', 'AAA']
    assert records['score'].tolist() == [22.0, 20.0]

    students = aggregate_students(records)
    assert students['label'].tolist() == ['ZZZ', 'AAA']


def test_verbose_reports_malformed_labels(capsys):
    uni = {'nome': 'X', 'id': '1'}
    load_results([
        {'etichetta': 'abc-1', 'punteggio': '20', 'materia': 'fisica', 'universita': uni},
        {'etichetta': 'GOOD1', 'punteggio': '20', 'materia': 'fisica', 'universita': uni},
    ], verbose=True)
    out = capsys.readouterr().out
    assert "1 etichette fuori formato: abc-1" in out
