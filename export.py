"""
CSV export of the metrics history
"""

import csv
import logging
from pathlib import Path
from typing import Iterable, List

from models import AttackKind, MetricsRecord

logger = logging.getLogger(__name__)

HEADERS = [
    "Timestamp", "AttackType", "PDR", "PLR", "Throughput",
    "Latency_ms", "Energy", "AvgLinkQuality", "JammingIntensity",
]


def to_rows(records: Iterable[MetricsRecord]) -> List[list]:
    """One flat row per record, columns in ``HEADERS`` order"""
    return [
        [r.timestamp, r.attack_kind.value, r.pdr, r.plr, r.throughput,
         r.latency, r.energy, r.avg_link_quality, r.jamming_intensity]
        for r in records
    ]


def write_csv(records: Iterable[MetricsRecord], path) -> Path:
    path = Path(path)
    if path.parent != Path("."):
        path.parent.mkdir(parents=True, exist_ok=True)
    rows = to_rows(records)
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(HEADERS)
        writer.writerows(rows)
    logger.info("exported %d records to %s", len(rows), path)
    return path


def default_filename(kind: AttackKind, now_ms: int) -> str:
    return f"netjam_dataset_{kind.value}_{now_ms}.csv"
