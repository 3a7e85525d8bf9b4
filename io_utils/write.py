from collections import Counter
from pathlib import Path
from typing import Any, Dict, Iterable, List
import csv
import json

from clustering.representative import ClusterResult
from interpretation.record import InterpretedRecord

ISSUE_SUMMARY_COLUMNS = ["issue", "count"]
CLUSTER_COLUMNS = ["clusterID", "id", "isRepresentative"]


def write_jsonl(output_dir: Path, rows: Iterable[Dict[str, Any]], name: str = "interpreted.jsonl") -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    jsonl_path = output_dir / name
    with jsonl_path.open("w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row, ensure_ascii=False) + "\n")
    return jsonl_path


def write_interpreted(output_dir: Path, records: Iterable[InterpretedRecord]) -> Path:
    return write_jsonl(output_dir, (record.to_dict() for record in records))


def issue_counts(records: Iterable[InterpretedRecord]) -> List[Dict[str, Any]]:
    """Count records per issue type, most frequent first, then by name."""
    counts: Counter = Counter()
    for record in records:
        counts.update({issue_type.value for issue_type in record.issue_types})
    return [
        {"issue": issue, "count": count}
        for issue, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    ]


def write_issue_summary(output_dir: Path, records: Iterable[InterpretedRecord]) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    csv_path = output_dir / "issues.csv"
    with csv_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=ISSUE_SUMMARY_COLUMNS)
        writer.writeheader()
        for row in issue_counts(records):
            writer.writerow(row)
    return csv_path


def write_clusters_csv(output_dir: Path, results: Iterable[ClusterResult]) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    csv_path = output_dir / "clusters.csv"
    with csv_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CLUSTER_COLUMNS)
        writer.writeheader()
        for result in results:
            for member in result.members:
                writer.writerow(
                    {
                        "clusterID": result.cluster_id,
                        "id": member,
                        "isRepresentative": str(member == result.representative).lower(),
                    }
                )
    return csv_path
