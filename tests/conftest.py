import pytest


SPIKE_CSV = "time,power,text\n00:00:00,100,\n00:00:30,150,go\n00:01:00,150,\n"


@pytest.fixture
def write_csv(tmp_path):
    """Write CSV text to a temp file and return its path as a string."""

    def _write(content: str, name: str = "course.csv") -> str:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def spike_csv(write_csv):
    return write_csv(SPIKE_CSV)
