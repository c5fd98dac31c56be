"""Roster CSV adapter — load a season's teams from a spreadsheet export.

Accepts a team-name column plus optional code and id columns, under
several common header spellings. Missing codes are derived from the team
name. Rows without an id reuse the id already known for that team name,
otherwise they are numbered upwards from `start_id`.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path

import pandas as pd
from unidecode import unidecode

from leaguesched.models.season import Team

CODE_LENGTH = 3
MAX_CODE_LENGTH = 5

# Expected column names, then alternatives some exports use
ROSTER_COLUMNS = {
    "Team": "name",
    "Code": "code",
    "ID": "id",
}

ROSTER_ALT_COLUMNS = {
    "Name": "name",
    "Club": "name",
    "Team Name": "name",
    "Short": "code",
    "Abbr": "code",
    "Team ID": "id",
    "Id": "id",
}


def team_code_from_name(name: str, length: int = CODE_LENGTH) -> str:
    """Short uppercase code from a team name.

    "Atlético Madrid" → "ATL"
    "1. FC Köln" → "FCK" (digits and punctuation dropped)
    """
    letters = re.sub(r"[^A-Za-z]", "", unidecode(name))
    code = letters[:length].upper()
    return code or "TM"


def _unique_code(base: str, taken: set[str]) -> str:
    if base not in taken:
        return base
    for i in range(2, 100):
        suffix = str(i)
        candidate = f"{base[:MAX_CODE_LENGTH - len(suffix)]}{suffix}"
        if candidate not in taken:
            return candidate
    raise ValueError(f"Cannot derive a unique code from {base!r}")


def _detect_columns(df: pd.DataFrame) -> dict[str, str]:
    """Map our field names to the CSV headers present."""
    mapping: dict[str, str] = {}
    columns = {str(c).strip(): c for c in df.columns}
    for csv_col, our_key in {**ROSTER_COLUMNS, **ROSTER_ALT_COLUMNS}.items():
        if csv_col in columns and our_key not in mapping:
            mapping[our_key] = columns[csv_col]
    return mapping


def load_roster(
    source_path: str | Path,
    season_id: int | None = None,
    start_id: int = 1,
    known_ids: Mapping[str, int] | None = None,
) -> list[Team]:
    """Load teams from a roster CSV.

    Args:
        source_path: CSV file with a team name column.
        season_id: Season the teams are entered in.
        start_id: First id handed out to a new team without an id.
        known_ids: Existing team name → id, reused for teams without an id.

    Raises:
        FileNotFoundError: The file does not exist.
        ValueError: No team-name column, or an unusable id.
    """
    path = Path(source_path)
    if not path.exists():
        raise FileNotFoundError(f"Roster CSV not found: {source_path}")

    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    column_map = _detect_columns(df)
    name_col = column_map.get("name")
    if name_col is None:
        raise ValueError(f"No team name column in {path.name}: {list(df.columns)}")
    code_col = column_map.get("code")
    id_col = column_map.get("id")

    teams: list[Team] = []
    taken_codes: set[str] = set()
    known = known_ids or {}
    next_id = start_id
    for _, row in df.iterrows():
        name = str(row[name_col]).strip()
        if not name:
            continue

        raw_code = str(row[code_col]).strip().upper() if code_col else ""
        code = _unique_code(raw_code[:MAX_CODE_LENGTH] or team_code_from_name(name), taken_codes)
        taken_codes.add(code)

        raw_id = str(row[id_col]).strip() if id_col else ""
        if raw_id:
            try:
                team_id = int(float(raw_id))
            except ValueError as e:
                raise ValueError(f"Bad team id {raw_id!r} for {name}") from e
        elif name in known:
            team_id = known[name]
        else:
            team_id = next_id
        next_id = max(next_id, team_id + 1)

        teams.append(Team(id=team_id, name=name, code=code, season_id=season_id))

    return teams
