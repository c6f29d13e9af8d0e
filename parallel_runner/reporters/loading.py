"""Loading of reporters from entry points."""

from importlib.metadata import entry_points

from parallel_runner.events import EventSink

ENTRY_POINT_GROUP = "parallel_runner.reporters"


class ReporterNotFoundError(Exception):
    """Raised when a reporter is not found."""


def load_reporter(key: str) -> type[EventSink]:
    """Load a reporter class by key.

    Args:
        key: The reporter key as registered in pyproject.toml
             (e.g., "console", "collector")

    Returns:
        The reporter class, ready to be instantiated

    Raises:
        ReporterNotFoundError: If no reporter with the given key is found

    """
    entries = entry_points(group=ENTRY_POINT_GROUP)

    for entry in entries:
        if entry.name == key:
            reporter: type[EventSink] = entry.load()
            return reporter

    available = sorted(e.name for e in entries)
    raise ReporterNotFoundError(
        f"Reporter '{key}' not found. Available reporters: {available}"
    )
