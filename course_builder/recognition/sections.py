from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Union

import pandas as pd

from ..config import ANNOTATION_RASTER_S, DEFAULT_RASTER_S
from ..models.types import Annotation, Sample, Section
from ..timeline.transform import round_half_up

logger = logging.getLogger(__name__)


def round_to_raster(value: float, raster: int) -> int:
    """Nearest multiple of raster, never less than one raster unit."""
    return max(raster, snap_to_raster(value, raster))


def snap_to_raster(value: float, raster: int) -> int:
    return int(round_half_up(value / raster)) * raster


@dataclass
class Idle:
    pass


@dataclass
class Active:
    section: Section


SectionState = Union[Idle, Active]


def _optional(value):
    if value is None or pd.isna(value):
        return None
    return value


def iter_samples(df: pd.DataFrame) -> Iterator[Sample]:
    for row in df.itertuples(index=False):
        power = _optional(row.power)
        yield Sample(
            line=int(row.line),
            time_s=int(row.time_s),
            power=float(power) if power is not None else None,
            text=_optional(row.text),
        )


class SectionAggregator:
    """Fold transformed samples into contiguous steady-power sections.

    A sample with a new power value closes the open section and starts the
    next one exactly where the previous one ends. A repeated power value keeps
    the open section running. Text-only samples attach to the open section,
    or are dropped while no section exists yet.
    """

    def __init__(self, raster_s: int = DEFAULT_RASTER_S, annotation_raster_s: int = ANNOTATION_RASTER_S):
        self.raster_s = raster_s
        self.annotation_raster_s = annotation_raster_s
        self.state: SectionState = Idle()
        self.sections: List[Section] = []
        self.dropped_annotations = 0

    def feed(self, sample: Sample) -> None:
        state = self.state
        local_offset = 0
        if isinstance(state, Active) and sample.time_s > state.section.start_s:
            local_offset = sample.time_s - state.section.start_s
            # Recomputed from the section start on every sample, never shrinks
            state.section.duration_s = max(state.section.duration_s, round_to_raster(local_offset, self.raster_s))

        if sample.power is not None:
            if isinstance(state, Active) and state.section.power == sample.power:
                self._continue(state, local_offset, sample.text)
            else:
                self._open(sample)
        elif sample.text is not None:
            if isinstance(state, Active):
                self._annotate(state, local_offset, sample.text)
            else:
                self.dropped_annotations += 1
                logger.debug("Line %d: no open section for text %r, dropped", sample.line, sample.text)

    def _open(self, sample: Sample) -> None:
        if isinstance(self.state, Active):
            prior = self.state.section
            self.sections.append(prior)
            start = prior.end_s
        else:
            start = snap_to_raster(sample.time_s, self.raster_s)

        section = Section(start_s=start, duration_s=self.raster_s, power=sample.power)
        if sample.text is not None:
            section.annotations.append(Annotation(offset_s=0, text=sample.text))
        self.state = Active(section=section)

    def _continue(self, state: Active, local_offset: int, text: Optional[str]) -> None:
        # The repeated power holds for at least one raster past this sample
        section = state.section
        section.duration_s = max(section.duration_s, round_to_raster(local_offset, self.raster_s) + self.raster_s)
        if text is not None:
            section.annotations.append(
                Annotation(offset_s=round_to_raster(local_offset, self.annotation_raster_s), text=text)
            )

    def _annotate(self, state: Active, local_offset: int, text: str) -> None:
        section = state.section
        offset = round_to_raster(local_offset, self.annotation_raster_s)
        section.annotations.append(Annotation(offset_s=offset, text=text))
        if offset > section.duration_s:
            # Grows by a single raster unit even if the offset is further out
            section.duration_s += self.raster_s

    def finish(self) -> List[Section]:
        if isinstance(self.state, Active):
            self.sections.append(self.state.section)
            self.state = Idle()
        if self.dropped_annotations:
            logger.warning("Dropped %d text row(s) that came before the first power value", self.dropped_annotations)
        return self.sections


def aggregate_sections(
    samples: Union[pd.DataFrame, Iterable[Sample]],
    raster_s: int = DEFAULT_RASTER_S,
) -> List[Section]:
    """Run the aggregator over a transformed sample frame (or Sample iterable)."""
    if isinstance(samples, pd.DataFrame):
        samples = iter_samples(samples)
    aggregator = SectionAggregator(raster_s=raster_s)
    for sample in samples:
        aggregator.feed(sample)
    sections = aggregator.finish()
    logger.info("Built %d sections", len(sections))
    return sections
