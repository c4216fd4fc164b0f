import json
import math
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, TextIO, Union

from .types import ErrorRow, LicenseInfo, ReportRow

SIGNIFICANT_DIGITS = 5

# NDJSON key for each ReportRow field, in output order
FIELD_NAMES = {
    "url": "URL",
    "net_score": "NetScore",
    "net_score_latency": "NetScore_Latency",
    "ramp_up": "RampUp",
    "ramp_up_latency": "RampUp_Latency",
    "correctness": "Correctness",
    "correctness_latency": "Correctness_Latency",
    "bus_factor": "BusFactor",
    "bus_factor_latency": "BusFactor_Latency",
    "responsive_maintainer": "ResponsiveMaintainer",
    "responsive_maintainer_latency": "ResponsiveMaintainer_Latency",
    "license": "License",
    "license_latency": "License_Latency",
}


def round_sig(value: float, digits: int = SIGNIFICANT_DIGITS) -> float:
    """Round to ``digits`` significant digits (0.000123456 -> 0.00012346)."""
    if value == 0 or not math.isfinite(value):
        return value
    return float(f"{value:.{digits}g}")


def to_record(row: Union[ReportRow, ErrorRow]) -> Dict[str, Any]:
    if isinstance(row, ErrorRow):
        return {"URL": row.url, "Error": row.error}
    record: Dict[str, Any] = {}
    for field, key in FIELD_NAMES.items():
        value = getattr(row, field)
        if isinstance(value, LicenseInfo):
            value = asdict(value)
        elif isinstance(value, float):
            value = round_sig(value)
        record[key] = value
    return record


def default_output_path(url_file: Union[str, Path]) -> Path:
    """Sibling of the URL file with the same stem: ``urls.txt`` -> ``urls.ndjson``."""
    return Path(url_file).with_suffix(".ndjson")


class NdjsonWriter:
    """Append-only sink: one JSON line per row, flushed as soon as it is written."""

    def __init__(self, stream: TextIO):
        self._stream = stream
        self.count = 0

    def write(self, row: Union[ReportRow, ErrorRow]) -> None:
        self._stream.write(json.dumps(to_record(row), ensure_ascii=False) + "\n")
        self._stream.flush()
        self.count += 1
