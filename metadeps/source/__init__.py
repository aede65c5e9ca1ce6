"""Record sources feeding the graph builder.

Submodules:
    base     -- RecordSource ABC and RecordSourceError.
    tooling  -- httpx-backed Tooling API implementation.
"""

from metadeps.source.base import RecordSource, RecordSourceError
from metadeps.source.tooling import ToolingRecordSource

__all__ = ["RecordSource", "RecordSourceError", "ToolingRecordSource"]
