from __future__ import annotations

import os
import sys
import tempfile
from typing import List, Optional

from ..models.types import Course, Section

INDENT = "    "


def format_power(power: float) -> str:
    """Shortest exact decimal form: 1.0 -> "1", 0.5 -> "0.5", 0.67 -> "0.67"."""
    text = repr(float(power))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def _section_lines(section: Section, indent: str) -> List[str]:
    attrs = f'Duration="{section.duration_s}" Power="{format_power(section.power)}" pace="0"'
    if not section.annotations:
        return [f"{indent * 2}<SteadyState {attrs}/>"]
    lines = [f"{indent * 2}<SteadyState {attrs}>"]
    for a in section.annotations:
        lines.append(f'{indent * 3}<textevent timeoffset="{a.offset_s}" message="{a.text}"/>')
    lines.append(f"{indent * 2}</SteadyState>")
    return lines


def render_workout(course: Course, indent: str = INDENT) -> str:
    """Render the course as a .zwo workout document.

    Text is written verbatim, without XML escaping.
    """
    lines = [
        "<workout_file>",
        f"{indent}<author>{course.author}</author>",
        f"{indent}<name>{course.name}</name>",
    ]
    if course.description is not None:
        lines.append(f"{indent}<description>{course.description}</description>")
    else:
        lines.append(f"{indent}<description/>")
    lines.append(f"{indent}<sportType>{course.sport_type}</sportType>")
    lines.append(f"{indent}<tags/>")
    lines.append(f"{indent}<workout>")
    for section in course.sections:
        lines.extend(_section_lines(section, indent))
    lines.append(f"{indent}</workout>")
    lines.append("</workout_file>")
    return "\n".join(lines) + "\n"


def write_workout(text: str, path: Optional[str] = None) -> None:
    if path is None:
        sys.stdout.write(text)
        sys.stdout.flush()
        return
    # The target is only ever replaced by a complete file
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(prefix=".course-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
