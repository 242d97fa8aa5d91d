"""Filesystem helpers for printer settings, job files and G-code output.

``load_yaml`` reads ``printer.yaml`` and job files; ``atomic_write_text``
publishes a finished program so a print host polling the output directory
never picks up a truncated file.
"""

import os
from pathlib import Path
from typing import Any, Union

import yaml


def ensure_dir(p: Union[str, Path]) -> Path:
    """Create the output directory for a G-code file if it is missing.

    Parameters
    ----------
    p : Union[str, Path]
        Directory that will hold the program.

    Returns
    -------
    Path
        The directory, now present on disk.
    """
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def atomic_write_text(
    path: Union[str, Path],
    text: str,
    encoding: str = "utf-8",
    tmp_suffix: str = ".tmp",
) -> None:
    """Publish a G-code program in one step (tmp -> fsync -> rename).

    Parameters
    ----------
    path : Union[str, Path]
        Destination ``.gcode`` file; missing parent directories are created.
    text : str
        Complete program.
    encoding : str
        Text encoding, default "utf-8".
    tmp_suffix : str
        Appended to *path* for the staging file, default ".tmp".

    Raises
    ------
    OSError
        If staging or renaming fails.  The staging file is removed and any
        previous program at *path* is left untouched.
    """
    path = Path(path)
    ensure_dir(path.parent)

    tmp_path = path.with_suffix(path.suffix + tmp_suffix)

    try:
        with open(tmp_path, "w", encoding=encoding) as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())

        # Atomic rename (overwrites existing file on POSIX)
        tmp_path.replace(path)
    except OSError as e:
        if tmp_path.exists():
            tmp_path.unlink()
        raise OSError(f"Failed to write {path} atomically: {e}") from e


def load_yaml(path: Union[str, Path]) -> Any:
    """Parse a settings or job file with ``yaml.safe_load``.

    Parameters
    ----------
    path : Union[str, Path]
        ``printer.yaml`` or a job file.

    Returns
    -------
    Any
        Parsed document (a mapping for well-formed files), or ``None``
        for an empty file; callers decide whether that is an error.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    yaml.YAMLError
        If the document is not valid YAML; the message names the file.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"No such settings or job file: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"{path} is not valid YAML: {e}") from e
