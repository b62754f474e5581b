"""Build Zwift-style steady-state workouts from sampled power traces.

Modules:
- io: Reading the CSV trace and parsing rows into samples
- timeline: Time resolution and time/power transforms
- recognition: Folding samples into steady-power sections
- models: Typed domain objects
- storage: Workout document rendering
- cli: Command line interface
"""

__version__ = "0.1.0"

__all__ = [
    "io",
    "timeline",
    "recognition",
    "models",
    "storage",
    "cli",
]
