"""Repository descriptors parsed from 'owner/name' tokens."""

from __future__ import annotations

from dataclasses import dataclass


class InvalidRepositoryError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class RepositoryDescriptor:
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @staticmethod
    def parse(token: str) -> RepositoryDescriptor:
        """Parse an 'owner/name' token.

        Raises:
            InvalidRepositoryError: if either part is empty or the name contains '/'.
        """

        raw = token.strip()
        owner, sep, name = raw.partition("/")
        owner = owner.strip()
        name = name.strip()
        if not sep or not owner or not name or "/" in name:
            raise InvalidRepositoryError(f"Invalid repo name: {token!r}")
        if name.endswith(".git"):
            name = name[: -len(".git")]
            if not name:
                raise InvalidRepositoryError(f"Invalid repo name: {token!r}")
        return RepositoryDescriptor(owner=owner, name=name)

    def __str__(self) -> str:
        return self.full_name


def parse_repository_list(values: list[str] | str) -> list[RepositoryDescriptor]:
    """Parse every token up front so a malformed entry fails before any side effect."""

    if isinstance(values, str):
        values = [p for p in (v.strip() for v in values.split(",")) if p]
    return [RepositoryDescriptor.parse(v) for v in values]
