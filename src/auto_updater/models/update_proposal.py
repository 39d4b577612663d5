"""Update proposal model."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import RunConfig

BRANCH_PREFIX = "auto-update/"


@dataclass(frozen=True)
class UpdateProposal:
    """A proposed version bump for one package."""

    package_name: str
    old_version: str
    new_version: str

    def to_dict(self) -> dict[str, str]:
        return {
            "package": self.package_name,
            "oldVersion": self.old_version,
            "newVersion": self.new_version,
        }


@dataclass(frozen=True)
class UpdateEnv:
    """An update proposal together with the run configuration driving it."""

    proposal: UpdateProposal
    options: RunConfig

    @property
    def package_name(self) -> str:
        return self.proposal.package_name

    @property
    def old_version(self) -> str:
        return self.proposal.old_version

    @property
    def new_version(self) -> str:
        return self.proposal.new_version

    @property
    def branch_name(self) -> str:
        return branch_name(self.proposal)


def branch_name(proposal: UpdateProposal) -> str:
    """Return the version-control branch used to publish ``proposal``.

    The package name is used verbatim; it is not checked for characters git
    rejects in ref names.
    """
    return BRANCH_PREFIX + proposal.package_name
