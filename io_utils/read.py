from pathlib import Path
from typing import Any, Dict, Iterator, List
import csv
import json
import logging

from clustering.clusters import ClusterPair
from dwc.record import RawTerms

logger = logging.getLogger(__name__)

RECORD_EXTENSIONS = {".csv", ".tsv", ".txt", ".jsonl", ".json"}


def iter_rows(path: Path) -> Iterator[Dict[str, Any]]:
    """Yield flat rows from a CSV/TSV file or a JSON Lines file.

    Args:
        path: Input file; the format follows its extension

    Yields:
        One dict per record
    """
    suffix = path.suffix.lower()
    if suffix not in RECORD_EXTENSIONS:
        raise ValueError(f"Unsupported record file {path.name!r}; expected one of {sorted(RECORD_EXTENSIONS)}")

    if suffix in (".jsonl", ".json"):
        with path.open(encoding="utf-8") as f:
            for number, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                row = json.loads(line)
                if not isinstance(row, dict):
                    raise ValueError(f"{path.name}:{number} is not a JSON object")
                yield row
        return

    delimiter = "\t" if suffix in (".tsv", ".txt") else ","
    with path.open(newline="", encoding="utf-8-sig") as f:
        yield from csv.DictReader(f, delimiter=delimiter)


def iter_raw_terms(path: Path) -> Iterator[RawTerms]:
    """Yield :class:`RawTerms` for every row of ``path``.

    Rows without an ``id`` or ``occurrenceID`` get their 1-based row number
    as identifier.
    """
    for number, row in enumerate(iter_rows(path), start=1):
        record = RawTerms.from_mapping(row)
        if record.id is None:
            record = record.model_copy(update={"id": str(number)})
        yield record


def read_pairs(path: Path) -> List[ClusterPair]:
    """Read candidate-duplicate pairs from a CSV file with a header row.

    The first two columns hold the identifiers; extra columns are ignored.
    """
    pairs: List[ClusterPair] = []
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.reader(f)
        header = next(reader, None)
        if header is None:
            return pairs
        for number, row in enumerate(reader, start=2):
            if not row or not any(cell.strip() for cell in row):
                continue
            if len(row) < 2 or not row[0].strip() or not row[1].strip():
                logger.warning("Skipping incomplete pair on line %d of %s", number, path.name)
                continue
            pairs.append(ClusterPair(row[0].strip(), row[1].strip()))
    return pairs
