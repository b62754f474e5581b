from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Sample:
    line: int  # 1-based data row in the source
    time_s: int
    power: Optional[float] = None  # watts before transform, fraction of FTP after
    text: Optional[str] = None


@dataclass
class Annotation:
    offset_s: int  # relative to the owning section's start
    text: str


@dataclass
class Section:
    start_s: int
    duration_s: int
    power: float  # fraction of FTP, e.g. 1.0 = 100%
    annotations: List[Annotation] = field(default_factory=list)

    @property
    def end_s(self) -> int:
        return self.start_s + self.duration_s


@dataclass
class Course:
    name: str
    author: str
    sport_type: str
    description: Optional[str] = None
    sections: List[Section] = field(default_factory=list)

    @property
    def total_duration_s(self) -> int:
        return sum(s.duration_s for s in self.sections)
