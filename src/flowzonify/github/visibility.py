"""Public visibility probe.

An unauthenticated GET of the repository's web page: a 200 means the repository
exists and anyone can see it. Anything else, including network errors, is treated
as private.
"""

from __future__ import annotations

import logging

import requests

from flowzonify.repository import RepositoryDescriptor

logger = logging.getLogger(__name__)


class VisibilityOracle:
    def __init__(
        self,
        *,
        host: str = "github.com",
        session: requests.Session | None = None,
        timeout: float = 30,
    ) -> None:
        self._host = host.strip().rstrip("/")
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": "flowzonify"})
        self._timeout = timeout

    def url_for(self, repository: RepositoryDescriptor) -> str:
        return f"https://{self._host}/{repository.owner}/{repository.name}"

    def is_public(self, repository: RepositoryDescriptor) -> bool:
        url = self.url_for(repository)
        try:
            resp = self._session.get(url, timeout=self._timeout, allow_redirects=True)
        except requests.RequestException as e:
            logger.warning(
                "Visibility check failed; assuming private",
                extra={"repo": repository.full_name, "error": str(e)},
            )
            return False

        is_public = resp.status_code == 200
        logger.debug(
            "Visibility checked",
            extra={"repo": repository.full_name, "status": resp.status_code, "public": is_public},
        )
        return is_public

    def close(self) -> None:
        self._session.close()
