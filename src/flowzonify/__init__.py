"""flowzonify.

Bulk-onboards the Flowzone CI workflow into GitHub repositories:
- configuration loaded from the environment or `.env`
- structured logging
- template reconciliation, commit, push and pull request per repository
"""

__version__ = "0.1.0"

from flowzonify.config import FlowzonifySettings

__all__ = ["__version__", "FlowzonifySettings"]
