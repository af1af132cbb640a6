"""CSV export helper shared by the admin export endpoints."""

import csv
from typing import Iterable, Optional, Sequence

from django.http import HttpResponse, StreamingHttpResponse
from django.utils import timezone


class _Echo:
    """File-like object whose write() hands the line back to the csv writer."""

    def write(self, value):
        return value


def _attachment(response, basename: str):
    filename = f"{basename}_{timezone.localdate().isoformat()}.csv"
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response


def csv_response(rows: Iterable[dict], basename: str, fieldnames: Optional[Sequence[str]] = None):
    """Build a CSV attachment from dict rows.

    With `fieldnames` the rows are streamed as they are produced. Without
    them, headers are the union of all row keys in first-seen order, so rows
    with flattened free-form attributes line up. Missing values render empty.
    """
    if fieldnames is not None:
        writer = csv.DictWriter(_Echo(), fieldnames=list(fieldnames), restval="", quoting=csv.QUOTE_ALL)

        def _lines():
            yield writer.writeheader()
            for row in rows:
                yield writer.writerow(row)

        return _attachment(StreamingHttpResponse(_lines(), content_type="text/csv; charset=utf-8"), basename)

    rows = list(rows)
    headers: dict[str, None] = {}
    for row in rows:
        headers.update(dict.fromkeys(row))

    response = _attachment(HttpResponse(content_type="text/csv; charset=utf-8"), basename)
    writer = csv.DictWriter(response, fieldnames=list(headers), restval="", quoting=csv.QUOTE_ALL)
    writer.writeheader()
    writer.writerows(rows)
    return response
