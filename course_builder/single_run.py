from __future__ import annotations

import logging

from .config import CourseSettings
from .errors import OutputWriteError
from .io.csv_loader import load_samples
from .models.types import Course
from .recognition.sections import aggregate_sections
from .storage.export import render_workout, write_workout
from .timeline.resolver import resolve_times
from .timeline.transform import transform_samples

logger = logging.getLogger(__name__)


def build_course(settings: CourseSettings) -> Course:
    """Read the trace named in settings and fold it into a Course."""
    samples = load_samples(settings.input_path)
    timeline = resolve_times(samples, settings.time_mode)
    timeline = transform_samples(
        timeline,
        ftp_watts=settings.ftp_watts,
        acceleration=settings.acceleration,
        scale=settings.scale,
    )
    sections = aggregate_sections(timeline, raster_s=settings.raster_s)
    course = Course(
        name=settings.name,
        author=settings.author,
        sport_type=settings.sport_type,
        description=settings.description,
        sections=sections,
    )
    logger.info(
        "Course '%s': %d sections, %ds total (FTP=%dW, mode=%s)",
        course.name,
        len(sections),
        course.total_duration_s,
        settings.ftp_watts,
        settings.time_mode,
    )
    return course


def run(settings: CourseSettings) -> str:
    """Build, render and write the workout. Nothing is written on failure."""
    text = render_workout(build_course(settings))
    try:
        write_workout(text, settings.output_path)
    except OSError as e:
        raise OutputWriteError(str(settings.output_path), e.strerror or str(e))
    return text
