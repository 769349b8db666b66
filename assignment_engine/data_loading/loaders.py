"""
Roster loading from CSV files.

This module reads people and staff exports into Person and Supervisor
records. Blank cells are treated as missing values; missing birth dates and
ages are allowed and handled downstream by neutral scoring terms.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from ..exceptions import InvalidInputError
from ..roster import Roster
from ..roster.schema import Person, Supervisor

logger = logging.getLogger(__name__)

PERSON_REQUIRED_COLUMNS = ["id"]
PERSON_OPTIONAL_COLUMNS = [
    "name", "birth_date", "age", "group_tag", "behavior_score", "exam_status", "status"
]
STAFF_REQUIRED_COLUMNS = ["id", "role"]
STAFF_OPTIONAL_COLUMNS = PERSON_OPTIONAL_COLUMNS + [
    "experience_years", "current_load", "average_effectiveness"
]


def _read_csv(filepath: str, delimiter: str, label: str) -> pd.DataFrame:
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"{label} file not found: {filepath}")

    logger.info(f"Loading {label} from {filepath} (delimiter: {repr(delimiter)})")
    df = pd.read_csv(filepath, sep=delimiter, dtype={"id": str, "group_tag": str})
    logger.info(f"Loaded {len(df)} rows with {len(df.columns)} columns")
    return df


def validate_columns(df: pd.DataFrame, required: List[str]) -> List[str]:
    """
    Check that required columns exist in the DataFrame.

    Args:
        df: Roster DataFrame
        required: Required column names

    Returns:
        List of missing column names (empty if all present)
    """
    return [c for c in required if c not in df.columns]


def _row_values(row: pd.Series, columns: List[str]) -> Dict[str, Any]:
    """Pick present, non-blank values from a row."""
    values = {}
    for column in columns:
        if column not in row.index:
            continue
        value = row[column]
        if pd.isna(value):
            continue
        if isinstance(value, str):
            value = value.strip()
            if not value:
                continue
        values[column] = value
    return values


def people_from_frame(df: pd.DataFrame) -> List[Person]:
    """
    Build Person records from a roster DataFrame.

    Args:
        df: DataFrame with at least an 'id' column

    Returns:
        List of Person in row order

    Raises:
        InvalidInputError: If columns are missing or a row is invalid
    """
    missing = validate_columns(df, PERSON_REQUIRED_COLUMNS)
    if missing:
        raise InvalidInputError(f"People data missing columns: {missing}")

    people = []
    for row_number, (_, row) in enumerate(df.iterrows(), start=1):
        values = _row_values(row, PERSON_REQUIRED_COLUMNS + PERSON_OPTIONAL_COLUMNS)
        try:
            people.append(Person(**values))
        except (InvalidInputError, TypeError) as e:
            raise InvalidInputError(f"Invalid person on row {row_number}: {e}")

    n_missing_birth = sum(1 for p in people if p.birth_date is None)
    if n_missing_birth:
        logger.warning(f"{n_missing_birth} of {len(people)} people have no birth date")
    return people


def staff_from_frame(df: pd.DataFrame) -> List[Supervisor]:
    """
    Build Supervisor records from a staff DataFrame.

    Args:
        df: DataFrame with at least 'id' and 'role' columns

    Returns:
        List of Supervisor in row order

    Raises:
        InvalidInputError: If columns are missing or a row is invalid
    """
    missing = validate_columns(df, STAFF_REQUIRED_COLUMNS)
    if missing:
        raise InvalidInputError(f"Staff data missing columns: {missing}")

    staff = []
    for row_number, (_, row) in enumerate(df.iterrows(), start=1):
        values = _row_values(row, STAFF_REQUIRED_COLUMNS + STAFF_OPTIONAL_COLUMNS)
        try:
            staff.append(Supervisor(**values))
        except (InvalidInputError, TypeError) as e:
            raise InvalidInputError(f"Invalid staff member on row {row_number}: {e}")
    return staff


def load_people(filepath: str, delimiter: str = ",") -> List[Person]:
    """
    Load the people roster from CSV.

    Args:
        filepath: Path to the CSV file
        delimiter: Field delimiter (default: comma)

    Returns:
        List of Person records

    Raises:
        FileNotFoundError: If the file doesn't exist
        InvalidInputError: If the data is invalid
    """
    return people_from_frame(_read_csv(filepath, delimiter, "people roster"))


def load_staff(filepath: str, delimiter: str = ",") -> List[Supervisor]:
    """
    Load the staff roster from CSV.

    Args:
        filepath: Path to the CSV file
        delimiter: Field delimiter (default: comma)

    Returns:
        List of Supervisor records

    Raises:
        FileNotFoundError: If the file doesn't exist
        InvalidInputError: If the data is invalid
    """
    return staff_from_frame(_read_csv(filepath, delimiter, "staff roster"))


def load_roster(config: Dict[str, Any], base_dir: Optional[str] = None) -> Roster:
    """
    Load people and staff as configured and build a Roster.

    Args:
        config: Configuration dictionary with a 'data' section
        base_dir: Directory relative paths are resolved against

    Returns:
        Roster instance
    """
    data = config.get("data", {})
    base = Path(base_dir) if base_dir else Path(".")

    people_cfg = data.get("people", {})
    staff_cfg = data.get("staff", {})

    people = load_people(str(base / people_cfg["path"]), people_cfg.get("delimiter", ","))
    staff_path = base / staff_cfg.get("path", "")
    if staff_cfg.get("path") and staff_path.exists():
        staff = load_staff(str(staff_path), staff_cfg.get("delimiter", ","))
    else:
        logger.warning(f"Staff roster not found at {staff_path}; supervisor pool is empty")
        staff = []

    return Roster(people, staff)
