# certchecker/export/csv_writer.py
import csv, os
from typing import Dict, Iterable, List, Union

from certchecker.tls.inventory import CertificateRecord

FIELDNAMES: List[str] = ["hostname", "issuer", "subject", "valid_not_before", "valid_not_after"]

Row = Union[CertificateRecord, Dict[str, str]]


class CSVWriter:
    def __init__(self, path: str, fieldnames: List[str] = FIELDNAMES):
        self.path = path
        self.fieldnames = list(fieldnames)
        self.rows: List[Dict] = []

    def add(self, row: Row):
        if isinstance(row, CertificateRecord):
            row = row.to_dict()
        self.rows.append(row)

    def extend(self, rows: Iterable[Row]):
        for r in rows:
            self.add(r)

    def flush(self):
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(self.path, "w", newline="", encoding="utf-8") as f:
            w = csv.DictWriter(f, fieldnames=self.fieldnames)
            w.writeheader()
            for r in self.rows:
                w.writerow(r)


def write_records(path: str, records: Iterable[CertificateRecord]) -> int:
    writer = CSVWriter(path)
    writer.extend(records)
    writer.flush()
    return len(writer.rows)
