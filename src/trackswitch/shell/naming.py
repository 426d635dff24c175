"""Output file naming for switched copies."""

from typing import Optional

UNKNOWN_LANGUAGE = "unknown"


def split_path(path: str) -> tuple[str, str]:
    """Split ``path`` into (directory, filename) at the last separator.

    Both ``/`` and ``\\`` count as separators so that Windows paths are handled
    on any platform. The directory keeps its trailing separator.
    """
    cut = max(path.rfind("/"), path.rfind("\\")) + 1
    return path[:cut], path[cut:]


def split_extension(filename: str) -> tuple[str, str]:
    """Split ``filename`` into (stem, extension) at the last dot."""
    dot = filename.rfind(".")
    if dot == -1:
        return filename, ""
    return filename[:dot], filename[dot:]


def derive_output_path(
    input_path: str,
    track_index: int,
    language: Optional[str] = None,
    include_language: bool = True,
    unknown_language: str = UNKNOWN_LANGUAGE,
) -> str:
    """Build the path of the switched copy of ``input_path``.

    ``C:\\videos\\movie.mp4`` with track 2 in ``eng`` becomes
    ``C:\\videos\\movie_track2_eng.mp4``. The suffix is never empty, so the
    result always differs from the input.

    Args:
        input_path: Path of the source video
        track_index: Index of the track made default
        language: Language tag of that track, if any
        include_language: Whether to append the language tag
        unknown_language: Tag used when ``language`` is empty

    Returns:
        Output path in the same directory with the same extension
    """
    directory, filename = split_path(input_path)
    stem, extension = split_extension(filename)

    suffix = f"_track{track_index}"
    if include_language:
        suffix += f"_{language or unknown_language}"

    return f"{directory}{stem}{suffix}{extension}"
