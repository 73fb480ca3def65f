"""One-way vault-to-filesystem mirror engine.

Modules:

- ``engine``   -- ``MirrorEngine``: runs the two-pass mirror.
- ``mapper``   -- ``PathMapper``: subtree selection and vault-to-destination
  path mapping.
- ``models``   -- ``FileFailure``, ``SyncReport``: outcome contracts.
- ``reporter`` -- human-readable and JSON report formatting.

Usage example
-------------
::

    from pathlib import Path
    from projsync.directive import parse_directive
    from projsync.sync import MirrorEngine, format_sync_report
    from projsync.tree import scan_vault

    directive = parse_directive("path ~/site/content\\nexclude \\\\.canvas$")
    tree = scan_vault(Path("~/vault").expanduser())
    report = await MirrorEngine().sync(directive, tree, "projects/site")
    print(format_sync_report(report))
"""

from .engine import MirrorEngine
from .mapper import PathMapper
from .models import FileFailure, SyncReport
from .reporter import (
    format_failure_notices,
    format_sync_report,
    report_to_json,
)

__all__ = [
    "FileFailure",
    "MirrorEngine",
    "PathMapper",
    "SyncReport",
    "format_failure_notices",
    "format_sync_report",
    "report_to_json",
]
