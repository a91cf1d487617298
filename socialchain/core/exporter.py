"""Export utilities for instruction results and records."""

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from socialchain.models.post import PostLog
from socialchain.models.result import InstructionResult

if TYPE_CHECKING:
    import pandas as pd

try:
    import pandas as pd
    PANDAS_AVAILABLE = True
except ImportError:
    PANDAS_AVAILABLE = False


def to_json(result: InstructionResult, indent: int = 2) -> str:
    """
    Convert InstructionResult to JSON string.

    Args:
        result: InstructionResult to serialize
        indent: JSON indentation level

    Returns:
        JSON string with addresses in base58
    """
    return result.model_dump_json(indent=indent)


def to_dict(result: InstructionResult) -> dict:
    """
    Convert InstructionResult to a JSON-compatible dictionary.

    Args:
        result: InstructionResult to convert

    Returns:
        Dictionary representation
    """
    return result.model_dump(mode="json")


def save_json(
    result: InstructionResult,
    filepath: str | Path,
    indent: int = 2,
) -> Path:
    """
    Save InstructionResult to JSON file.

    Args:
        result: InstructionResult to save
        filepath: Output file path
        indent: JSON indentation level

    Returns:
        Path to saved file
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(result.model_dump_json(indent=indent), encoding="utf-8")
    return path


def load_json(filepath: str | Path) -> InstructionResult:
    """
    Load InstructionResult from JSON file.

    Args:
        filepath: Path to JSON file

    Returns:
        InstructionResult instance
    """
    path = Path(filepath)
    return InstructionResult.model_validate_json(path.read_text(encoding="utf-8"))


def merge_results(results: list[InstructionResult]) -> dict:
    """
    Merge several results into one export-friendly dict.

    Args:
        results: List of InstructionResults

    Returns:
        Dict with 'results' array plus success/failure counts
    """
    return {
        "exported_at": datetime.now().isoformat(),
        "results_count": len(results),
        "failed_count": sum(1 for r in results if not r.success),
        "results": [r.model_dump(mode="json") for r in results],
    }


def _check_pandas():
    """Raise ImportError if pandas is not available."""
    if not PANDAS_AVAILABLE:
        raise ImportError(
            "pandas is required for DataFrame export. Install with: pip install pandas"
        )


def posts_to_df(log: PostLog, owner: str | None = None) -> "pd.DataFrame":
    """
    Convert a post log to a pandas DataFrame.

    Args:
        log: PostLog to convert
        owner: Optional base58 owner address added as a column

    Returns:
        DataFrame with one row per post, in log order

    Raises:
        ImportError: If pandas is not installed
    """
    _check_pandas()

    rows = []
    for index, post in enumerate(log.posts):
        row = post.model_dump(mode="json")
        row["index"] = index
        if owner:
            row["owner"] = owner
        rows.append(row)

    return pd.DataFrame(rows, columns=["index", "content", "timestamp"] + (["owner"] if owner else []))


def save_posts_csv(log: PostLog, filepath: str | Path, owner: str | None = None) -> Path:
    """
    Save a post log to CSV.

    Args:
        log: PostLog to save
        filepath: Output file path
        owner: Optional base58 owner address added as a column

    Returns:
        Path to saved file

    Raises:
        ImportError: If pandas is not installed
    """
    _check_pandas()

    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    posts_to_df(log, owner).to_csv(path, index=False)
    return path
