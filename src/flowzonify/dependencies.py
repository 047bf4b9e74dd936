"""Dev dependencies for repositories still carrying a Karma test setup."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

KARMA_CONF = Path("karma.conf.js")

KARMA_DEV_DEPENDENCIES: tuple[str, ...] = (
    "balena-config-karma@4.0.0",
    "@types/chai@^4.3.0",
    "@types/chai-as-promised@^7.1.5",
    "@types/mocha@^9.1.1",
    "chai@^4.3.4",
    "mocha@^10.0.0",
    "ts-node@^10.0.0",
    "karma@^5.0.0",
)


class DependencyInstaller:
    """Installs Karma dev dependencies when the marker file is present.

    The marker is looked up relative to `cwd` (the process working directory by
    default), not inside the cloned repository.
    """

    def __init__(self, *, cwd: Path | None = None) -> None:
        self._cwd = cwd

    @property
    def marker(self) -> Path:
        return (self._cwd or Path.cwd()) / KARMA_CONF

    def command(self) -> list[str]:
        return ["npm", "i", "-D", *KARMA_DEV_DEPENDENCIES]

    def install_if_needed(self) -> bool:
        """Run `npm i -D ...` when `karma.conf.js` exists.

        Raises:
            subprocess.CalledProcessError: if npm exits non-zero.
        """

        if not self.marker.exists():
            return False
        logger.info("Installing karma dev dependencies", extra={"cwd": str(self.marker.parent)})
        subprocess.run(self.command(), cwd=self.marker.parent, check=True)
        return True
