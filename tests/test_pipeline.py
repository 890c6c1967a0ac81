import pandas as pd
import pytest

from graduatoria.config import PipelineConfig
from graduatoria.pipeline import build_dashboard


def test_pipeline_is_idempotent(raw_feed):
    results, universities = raw_feed
    first = build_dashboard(results, universities)
    second = build_dashboard(results, universities)

    pd.testing.assert_frame_equal(first.records, second.records)
    pd.testing.assert_frame_equal(first.students, second.students)
    pd.testing.assert_frame_equal(first.universities, second.universities)
    pd.testing.assert_frame_equal(first.regions, second.regions)
    assert first.summary == second.summary
    assert first.projection == second.projection
    assert first.national_cutoff == second.national_cutoff


def test_pipeline_does_not_mutate_input(raw_feed):
    results, universities = raw_feed
    before = [dict(r) for r in results]
    build_dashboard(results, universities)
    assert results == before


def test_pipeline_outputs(raw_feed):
    data = build_dashboard(*raw_feed)

    assert data.summary['total_result_count'] == 7
    assert data.summary['unique_student_count'] == 4
    assert data.summary['fully_qualified_count'] == 1
    assert data.summary['almost_qualified_count'] == 2
    assert data.universities['name'].tolist()[:2] == [
        "Università degli Studi di PADOVA", "Università degli Studi di MILANO",
    ]
    assert set(data.regions['name']) == {'Lombardia', 'Veneto'}
    assert data.projection.method == 'national'
    assert data.national_cutoff is not None


def test_survey_toggle(raw_feed):
    data = build_dashboard(*raw_feed, config=PipelineConfig(include_survey_data=False))
    assert data.summary['total_result_count'] == 5
    assert 'SRV-X1' not in set(data.students['label'])


def test_projection_method_toggle(raw_feed):
    data = build_dashboard(*raw_feed, config=PipelineConfig(projection_method='per-university'))
    assert data.projection.method == 'per-university'


def test_invalid_config():
    with pytest.raises(ValueError):
        PipelineConfig(projection_method='magic')


def test_verbose_prints_steps(raw_feed, capsys):
    build_dashboard(*raw_feed, verbose=True)
    out = capsys.readouterr().out
    assert "[STEP 1]" in out
    assert "[STEP 4]" in out
