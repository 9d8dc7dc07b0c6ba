"""Export the job history as CSV."""
from __future__ import annotations

import csv
import io
from typing import Iterable

from jobdash.models import Job

HEADERS: list[str] = ["Job Title", "Company", "Date", "Link"]
EXPORT_FILENAME = "job_history.csv"


def history_to_csv(jobs: Iterable[Job]) -> str | None:
    """CSV text with every field quoted, or None when there is nothing to export."""
    jobs = list(jobs)
    if not jobs:
        return None
    buf = io.StringIO()
    buf.write(",".join(HEADERS) + "\n")
    w = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for job in jobs:
        w.writerow([job.title, job.company, job.date, job.link])
    return buf.getvalue()
