from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, List, Tuple

from .errors import EmptyInputError, MalformedSourceError
from .models import ProcessRecord

logger = logging.getLogger(__name__)


def load_workload(path: str | Path) -> List[ProcessRecord]:
    """
    Load a workload file into arrival-ordered process records with ids
    assigned 1, 2, ... in file order.

    ``.json`` and ``.csv`` files are parsed as structured data; anything else
    is read as whitespace-separated ``arrival burst`` integer pairs.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        pairs = _load_json(path)
    elif suffix == ".csv":
        pairs = _load_csv(path)
    else:
        pairs = _load_pairs(path)

    processes = build_records(pairs)
    if not processes:
        raise EmptyInputError(f"No processes found in file: {path}")

    logger.info("Loaded %d processes from %s", len(processes), path)
    return processes


def build_records(pairs: Iterable[Tuple[int, int]]) -> List[ProcessRecord]:
    processes: List[ProcessRecord] = []
    for pid, (arrival_time, burst_time) in enumerate(pairs, start=1):
        if arrival_time < 0:
            raise MalformedSourceError(f"P{pid}: arrival time must be >= 0, got {arrival_time}")
        if burst_time <= 0:
            raise MalformedSourceError(f"P{pid}: burst time must be > 0, got {burst_time}")
        if processes and arrival_time < processes[-1].arrival_time:
            raise MalformedSourceError(
                f"P{pid}: arrival time {arrival_time} is earlier than the previous process; "
                "entries must be sorted by arrival time"
            )
        processes.append(ProcessRecord(id=pid, arrival_time=arrival_time, burst_time=burst_time))
    return processes


def _load_pairs(path: Path) -> List[Tuple[int, int]]:
    try:
        tokens = path.read_text(encoding="utf-8").split()
    except UnicodeDecodeError as exc:
        raise MalformedSourceError(f"{path}: not valid UTF-8 text ({exc})") from exc

    try:
        values = [int(tok) for tok in tokens]
    except ValueError as exc:
        raise MalformedSourceError(f"{path}: non-integer value in workload ({exc})") from exc

    if len(values) % 2:
        raise MalformedSourceError(f"{path}: expected 'arrival burst' pairs, got {len(values)} values")

    return list(zip(values[0::2], values[1::2]))


def _load_json(path: Path) -> List[Tuple[int, int]]:
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except UnicodeDecodeError as exc:
        raise MalformedSourceError(f"{path}: not valid UTF-8 text ({exc})") from exc
    except json.JSONDecodeError as exc:
        raise MalformedSourceError(f"{path}: invalid JSON ({exc})") from exc

    if not isinstance(raw, list):
        raise MalformedSourceError("JSON workload must be a list of process objects")

    return [_pair_from_json(entry) for entry in raw]


def _load_csv(path: Path) -> List[Tuple[int, int]]:
    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            return [_pair_from_row(row) for row in reader]
    except UnicodeDecodeError as exc:
        raise MalformedSourceError(f"{path}: not valid UTF-8 text ({exc})") from exc


def _pair_from_json(entry) -> Tuple[int, int]:
    if isinstance(entry, dict):
        values = (entry.get("arrival_time"), entry.get("burst_time"))
    elif isinstance(entry, list) and len(entry) == 2:
        values = (entry[0], entry[1])
    else:
        raise MalformedSourceError(f"Invalid process entry: {entry!r}")

    # JSON numbers must already be integers; 2.9 or true are not burst times.
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int):
            raise MalformedSourceError(f"Invalid process entry: {entry!r}")
    return values


def _pair_from_row(row) -> Tuple[int, int]:
    try:
        return int(row["arrival_time"]), int(row["burst_time"])
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedSourceError(f"Invalid process entry: {row!r}") from exc
