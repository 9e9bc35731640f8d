"""JSON output wrapper for CLI commands.

Every machine-readable document leads with ``schema_id``, ``schema_version``,
``producer`` and ``produced_at`` so scripted consumers can detect format
changes and tell which protofilter release wrote it.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from protofilter import __version__

PRODUCER = f"protofilter-{__version__}"


def json_response(
    schema_id: str,
    schema_version: int,
    **data: Any,
) -> str:
    """Create schema-wrapped JSON response for CLI output.

    Example:
        >>> json_response("annotated_fields", 1, fields=[])
        {
          "schema_id": "annotated_fields",
          "schema_version": 1,
          "producer": "protofilter-0.1.0",
          "produced_at": "2026-10-19T10:30:00+00:00",
          "fields": []
        }
    """
    wrapped = {
        "schema_id": schema_id,
        "schema_version": schema_version,
        "producer": PRODUCER,
        "produced_at": datetime.now(UTC).isoformat(),
        **data,
    }
    return json.dumps(wrapped, indent=2, default=str)
