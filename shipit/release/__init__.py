"""Release domain: versions, manifest, channels and tool commands.

Nothing in this package prompts the operator or runs a process; the flow
controller in ``shipit.cli.release_flow`` does both.
"""

from __future__ import annotations
