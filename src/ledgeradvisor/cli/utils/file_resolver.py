"""File path resolution utilities for CLI."""

from pathlib import Path


def resolve_file_path(file_path: str) -> Path:
    """
    Resolve a ledger file path relative to the current directory.

    Args:
        file_path: User-provided file path or name

    Returns:
        Resolved Path object

    Raises:
        FileNotFoundError: If the file does not exist or is not a file
    """
    path = Path(file_path).expanduser()

    if path.is_absolute():
        resolved_path = path.resolve()
    else:
        resolved_path = (Path.cwd() / path).resolve()

    if not resolved_path.exists():
        raise FileNotFoundError(
            f"File not found: {file_path}. Please check the file path and try again."
        )

    if not resolved_path.is_file():
        raise FileNotFoundError(
            f"Path is not a file: {file_path}. Please provide a valid file path."
        )

    return resolved_path
