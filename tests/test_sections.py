import pandas as pd
import pytest

from course_builder.models.types import Annotation, Sample
from course_builder.recognition.sections import (
    Active,
    Idle,
    SectionAggregator,
    aggregate_sections,
    round_to_raster,
    snap_to_raster,
)


def _samples(*rows):
    """rows: (time_s, power_fraction_or_None, text_or_None)"""
    return [Sample(line=i, time_s=t, power=p, text=txt) for i, (t, p, txt) in enumerate(rows, start=1)]


def test_round_to_raster_examples():
    assert round_to_raster(0, 30) == 30
    assert round_to_raster(10, 30) == 30
    assert round_to_raster(12, 5) == 10
    assert round_to_raster(20, 30) == 30
    assert round_to_raster(30, 30) == 30
    assert round_to_raster(40, 30) == 30
    assert round_to_raster(45, 30) == 60
    assert round_to_raster(50, 30) == 60


@pytest.mark.parametrize("raster", [5, 30, 60])
def test_round_to_raster_is_a_positive_multiple_near_value(raster):
    for x in range(0, 400):
        result = round_to_raster(x, raster)
        assert result % raster == 0
        assert result >= raster
        if x >= raster:
            assert abs(result - x) <= raster


def test_snap_to_raster_allows_zero():
    assert snap_to_raster(0, 30) == 0
    assert snap_to_raster(14, 30) == 0
    assert snap_to_raster(15, 30) == 30
    assert snap_to_raster(50, 30) == 60


def test_spike_scenario():
    sections = aggregate_sections(_samples((0, 0.67, None), (30, 1.0, "go"), (60, 1.0, None)))
    assert len(sections) == 2
    first, second = sections
    assert (first.start_s, first.duration_s, first.power, first.annotations) == (0, 30, 0.67, [])
    assert (second.start_s, second.duration_s, second.power) == (30, 60, 1.0)
    assert second.annotations == [Annotation(offset_s=0, text="go")]


def test_constant_power_collapses_to_one_section():
    sections = aggregate_sections(_samples((0, 0.8, None), (30, 0.8, None), (60, 0.8, None)))
    assert len(sections) == 1
    assert sections[0].power == 0.8
    assert sections[0].duration_s == 90


def test_runs_of_differing_power_are_chained():
    powers = [0.5, 0.5, 0.8, 1.0, 1.0, 0.5]
    rows = [(i * 30, p, None) for i, p in enumerate(powers)]
    sections = aggregate_sections(_samples(*rows))
    assert [s.power for s in sections] == [0.5, 0.8, 1.0, 0.5]
    for prev, nxt in zip(sections, sections[1:]):
        assert nxt.start_s == prev.start_s + prev.duration_s
    for s in sections:
        assert s.duration_s >= 30 and s.duration_s % 30 == 0


def test_first_section_start_snaps_to_raster():
    sections = aggregate_sections(_samples((50, 1.0, None)))
    assert sections[0].start_s == 60
    assert sections[0].duration_s == 30


def test_text_before_first_power_is_dropped():
    agg = SectionAggregator()
    for sample in _samples((0, None, "too early"), (0, 1.0, None)):
        agg.feed(sample)
    sections = agg.finish()
    assert len(sections) == 1
    assert sections[0].annotations == []
    assert agg.dropped_annotations == 1


def test_text_only_input_produces_nothing():
    assert aggregate_sections(_samples((0, None, "hello"), (30, None, "world"))) == []


def test_text_attaches_to_section_open_when_processed():
    sections = aggregate_sections(_samples((0, 0.5, None), (40, None, "a"), (60, 1.0, None)))
    assert sections[0].annotations == [Annotation(offset_s=40, text="a")]
    assert sections[1].annotations == []
    assert sections[0].duration_s == 60
    assert sections[1].start_s == 60


def test_late_text_extends_duration_by_one_raster():
    agg = SectionAggregator(raster_s=30)
    agg.feed(Sample(line=1, time_s=0, power=1.0))
    agg.feed(Sample(line=2, time_s=44, text="hold on"))
    section = agg.state.section
    # 44s rounds to a 30s section but the text snaps to 45s
    assert section.annotations == [Annotation(offset_s=45, text="hold on")]
    assert section.duration_s == 60


def test_text_at_section_start_snaps_to_one_annotation_step():
    sections = aggregate_sections(_samples((0, 1.0, None), (0, None, "now")))
    assert sections[0].annotations == [Annotation(offset_s=5, text="now")]
    assert sections[0].duration_s == 30


def test_power_row_with_text_annotates_at_offset_zero():
    sections = aggregate_sections(_samples((0, 0.6, "warm up"), (120, 0.9, "work")))
    assert sections[0].annotations == [Annotation(0, "warm up")]
    assert sections[1].annotations == [Annotation(0, "work")]
    assert sections[1].start_s == 120


def test_repeated_power_with_text_annotates_at_carried_offset():
    sections = aggregate_sections(_samples((0, 1.0, None), (30, 1.0, "again"), (45, None, "later")))
    assert len(sections) == 1
    assert sections[0].annotations == [Annotation(30, "again"), Annotation(45, "later")]


def test_duration_is_recomputed_not_accumulated():
    agg = SectionAggregator(raster_s=30)
    agg.feed(Sample(line=1, time_s=0, power=1.0))
    agg.feed(Sample(line=2, time_s=100))
    assert agg.state.section.duration_s == 90
    agg.feed(Sample(line=3, time_s=130))
    assert agg.state.section.duration_s == 120


def test_sample_before_chained_start_leaves_duration():
    # second section starts at 30 although its power arrived at t=10
    sections = aggregate_sections(_samples((0, 0.5, None), (10, 1.0, None), (20, None, "x")))
    assert sections[1].start_s == 30
    assert sections[1].duration_s == 30
    assert sections[1].annotations == [Annotation(5, "x")]


def test_state_transitions():
    agg = SectionAggregator()
    assert isinstance(agg.state, Idle)
    agg.feed(Sample(line=1, time_s=0, power=1.0))
    assert isinstance(agg.state, Active)
    agg.finish()
    assert isinstance(agg.state, Idle)


def test_aggregate_accepts_transformed_frame():
    df = pd.DataFrame(
        {
            "line": [1, 2, 3],
            "time_s": [0, 30, 60],
            "power": [0.5, float("nan"), 0.75],
            "text": [None, "spin", None],
        }
    )
    sections = aggregate_sections(df, raster_s=30)
    assert [s.power for s in sections] == [0.5, 0.75]
    assert sections[0].annotations == [Annotation(30, "spin")]


def test_custom_raster():
    sections = aggregate_sections(_samples((0, 0.5, None), (100, 0.7, None)), raster_s=60)
    assert sections[0].duration_s == 120
    assert sections[1].start_s == 120
    assert sections[1].duration_s == 60


def test_dense_constant_power_follows_the_trace():
    # two minutes sampled every second at one power level
    rows = [(t, 1.0, None) for t in range(0, 121)]
    sections = aggregate_sections(_samples(*rows))
    assert len(sections) == 1
    assert sections[0].start_s == 0
    assert sections[0].duration_s == 150


def test_duration_never_shrinks_on_later_sample():
    sections = aggregate_sections(_samples((0, 1.0, None), (30, 1.0, None), (31, None, "steady")))
    assert sections[0].duration_s == 60
    assert sections[0].annotations == [Annotation(30, "steady")]
