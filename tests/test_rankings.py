import pandas as pd
import pytest
from conftest import make_records

from graduatoria.rankings import general_ranking, paginate, score_distribution, subject_ranking
from graduatoria.students import aggregate_students

PADOVA = "Università degli Studi di PADOVA"
PAVIA = "Università degli Studi di PAVIA"


@pytest.fixture
def records():
    return make_records([
        ('AAA', 'physics', 20, PADOVA),
        ('BBB', 'physics', 27.4, PAVIA),
        ('BBB', 'chemistry', 17.5, PAVIA),
        ('SRV-CC', 'physics', -2.5, PADOVA),
        ('DDD', 'biology', 40, PADOVA),
    ])


def test_general_ranking_positions_survive_search(records):
    ranking = general_ranking(aggregate_students(records))
    assert ranking['label'].tolist() == ['DDD', 'BBB', 'AAA', 'SRV-CC']
    assert ranking['position'].tolist() == [1, 2, 3, 4]

    filtered = general_ranking(aggregate_students(records), search='pavia')
    assert filtered['label'].tolist() == ['BBB']
    assert filtered['position'].tolist() == [2]

    by_label = general_ranking(aggregate_students(records), search='srv')
    assert by_label['label'].tolist() == ['SRV-CC']


def test_subject_ranking(records):
    ranking = subject_ranking(records, 'physics')
    assert ranking['label'].tolist() == ['BBB', 'AAA', 'SRV-CC']
    with pytest.raises(ValueError):
        subject_ranking(records, 'latin')


def test_score_distribution_bins(records):
    dist = score_distribution(records, aggregate_students(records), 'physics')
    assert dist['score'].tolist() == list(range(-3, 32))
    counts = dist.set_index('score')['count']
    assert counts[20] == 1
    assert counts[27] == 1
    # -2.5 arrotonda lontano da zero
    assert counts[-3] == 1
    assert counts.sum() == 3


def test_score_distribution_average_and_filter(records):
    students = aggregate_students(records)
    dist = score_distribution(records, students, 'average', universities=[PAVIA])
    counts = dist.set_index('score')['count']
    # media di BBB = 22.45
    assert counts[22] == 1
    assert counts.sum() == 1
    # 40 is outside the chart range
    everything = score_distribution(records, students).set_index('score')['count']
    assert everything.sum() == 3


def test_paginate():
    frame = pd.DataFrame({'x': range(120)})
    page, total = paginate(frame, 3)
    assert total == 3
    assert page['x'].tolist() == list(range(100, 120))
    first, _ = paginate(frame, 0)
    assert first['x'].iloc[0] == 0
    empty, total = paginate(frame.iloc[:0], 1)
    assert empty.empty and total == 1
