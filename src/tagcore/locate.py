"""Find the tag file for a path - walk up until one turns up."""

from pathlib import Path

DEFAULT_TAGS_FILENAME = "tags"


def locate_tags_file(path: str, filename: str = DEFAULT_TAGS_FILENAME) -> str:
    """
    A file path is taken as-is. A directory is searched for `filename`,
    then each parent in turn.
    """
    start = Path(path).expanduser()
    if start.is_file():
        return str(start)
    if not start.is_dir():
        raise FileNotFoundError(2, "No such file or directory", str(start))

    for directory in (start, *start.resolve().parents):
        candidate = directory / filename
        if candidate.is_file():
            return str(candidate)

    raise FileNotFoundError(2, f"No '{filename}' file in or above directory", str(start))
