"""Load the per-game, advanced and salary tables and join them per player."""

import logging
import re
import unicodedata

import numpy as np
import pandas as pd

from .errors import DataFormatError

logger = logging.getLogger(__name__)

# folded player name the tables are matched on; dropped before returning
JOIN_KEY = "_player_key"


def read_table(path, sep=","):
    """Read a delimited text file with a header row.

    Column names are stripped and pandas' ``Unnamed: N`` index columns are
    dropped.
    """
    df = pd.read_csv(path, sep=sep)
    df.columns = [str(c).strip() for c in df.columns]
    unnamed = [c for c in df.columns if c.startswith("Unnamed:") or c == ""]
    if unnamed:
        df = df.drop(columns=unnamed)
    logger.info("read %s: %d rows x %d columns", path, len(df), df.shape[1])
    return df


def parse_salary(values):
    """'$1,234,567' -> 1234567.0; anything unparseable becomes NaN."""
    if pd.api.types.is_numeric_dtype(values):
        return values.astype("float64")
    cleaned = (
        values.astype("string")
        .str.replace(r"[$,\s]", "", regex=True)
    )
    return pd.to_numeric(cleaned, errors="coerce").astype("float64")


def fold_name(name):
    """'  Luka  Dončić ' -> 'luka doncic'; non-strings fold to ''."""
    if not isinstance(name, str):
        return ""
    name = unicodedata.normalize("NFKD", name)
    name = "".join(ch for ch in name if not unicodedata.combining(ch))
    return re.sub(r"\s+", " ", name).strip().casefold()


def _require(df, cols, table):
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise DataFormatError(f"{table} table is missing column(s) {missing}")


def _with_join_key(df, key):
    out = df.copy()
    out[key] = out[key].astype("string").str.replace(r"\s+", " ", regex=True).str.strip()
    out[JOIN_KEY] = [fold_name(v) if isinstance(v, str) else "" for v in out[key].tolist()]
    return out[out[JOIN_KEY] != ""]


def drop_repeated_players(df, key):
    """Remove every row whose key appears more than once.

    Players who changed teams mid-season show up on several lines; they are
    excluded outright instead of being aggregated.
    """
    repeated = df[key].duplicated(keep=False)
    if repeated.any():
        logger.info(
            "dropping %d rows for %d repeated %r values",
            int(repeated.sum()),
            df.loc[repeated, key].nunique(),
            key,
        )
    return df.loc[~repeated]


def join_tables(per_game, advanced, salaries, key="Player", salary_col="Salary"):
    """Inner-join the three tables per player and drop incomplete rows.

    Names are matched with accents, case and spacing folded away; the name
    shown in the result is the one from ``per_game``. Columns present in
    both stats tables are also taken from ``per_game``. The result is sorted
    by ``key`` with a fresh 0..n-1 index.
    """
    _require(per_game, [key], "per-game")
    _require(advanced, [key], "advanced")
    _require(salaries, [key, salary_col], "salary")

    tables = []
    for name, table in (("per-game", per_game), ("advanced", advanced), ("salary", salaries)):
        table = drop_repeated_players(_with_join_key(table, key), JOIN_KEY)
        logger.info("%s table: %d unique players", name, len(table))
        tables.append(table)
    per_game, advanced, salaries = tables

    adv_cols = [JOIN_KEY] + [c for c in advanced.columns if c not in per_game.columns]
    merged = (
        per_game
        .merge(advanced[adv_cols], on=JOIN_KEY, how="inner")
        .merge(salaries[[JOIN_KEY, salary_col]], on=JOIN_KEY, how="inner", suffixes=("", "_salary"))
        .drop(columns=[JOIN_KEY])
    )
    merged[salary_col] = parse_salary(merged[salary_col])

    n_joined = len(merged)
    merged = merged.replace([np.inf, -np.inf], np.nan).dropna(how="any")
    logger.info("joined %d players, %d complete after dropping missing fields", n_joined, len(merged))

    return merged.sort_values(key, kind="stable").reset_index(drop=True)


def load_dataset(per_game_path, advanced_path, salaries_path, key="Player", salary_col="Salary", sep=","):
    return join_tables(
        read_table(per_game_path, sep=sep),
        read_table(advanced_path, sep=sep),
        read_table(salaries_path, sep=sep),
        key=key,
        salary_col=salary_col,
    )
