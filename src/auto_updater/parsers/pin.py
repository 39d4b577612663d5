"""Version pins encoded in catalog attribute paths.

A catalog entry that is expected to stay on one release branch usually carries
that branch in its attribute path, e.g. ``libgit2_0_25``, ``owncloud90`` or
``nodejs-slim-10_x``. The heuristics here never parse versions numerically;
they only compare digit runs against a prefix of the new version. When no
clean digit run can be extracted, the entry is treated as unpinned.

Examples:
- "libgit2_0_25" with "0.25.3" → True
- "owncloud90" with "9.0.3" → True
- "owncloud90" with "9.1.3" → False
- "owncloud-client" with "2.4.1" → True
- "nodejs-slim-10_x" with "11.2.0" → False
- "nodejs-slim-10_x" with "10.12.0" → True
"""

from __future__ import annotations

from ..models import Err, Ok, Result

_DIGITS = frozenset("0123456789")
_DIGITS_OR_UNDERSCORE = _DIGITS | {"_"}


class PinViolation(RuntimeError):
    """Raised when a new version breaks the pin in an attribute path."""

    def __init__(self, attr_path: str, new_version: str) -> None:
        super().__init__(f"Version in attr path {attr_path} not compatible with {new_version}")
        self.attr_path = attr_path
        self.new_version = new_version


def _strip_track_suffix(attr_path: str) -> str:
    # "_x" means "latest minor of this major"; the loop shortens the path on
    # every pass so "a_x_x" ends at "a".
    while attr_path.lower().endswith("_x"):
        attr_path = attr_path[:-2]
    return attr_path


def is_compatible(attr_path: str, new_version: str) -> bool:
    """Return True unless ``attr_path`` pins a version ``new_version`` leaves."""
    attr_path = _strip_track_suffix(attr_path)

    if "_" in attr_path:
        _, version_part = attr_path.split("_", 1)
        if any(ch not in _DIGITS_OR_UNDERSCORE for ch in version_part):
            return True
        # Underscores separate components: 0_25 => "0.25"
        return new_version.startswith(version_part.replace("_", "."))

    index = 0
    while index < len(attr_path) and attr_path[index] not in _DIGITS:
        index += 1
    version_part = attr_path[index:]
    if any(ch not in _DIGITS for ch in version_part):
        return True
    # No separators: 90 => prefix of "9.0.3" with the dots removed
    return new_version.replace(".", "").startswith(version_part)


def check_compatible(attr_path: str, old_version: str, new_version: str) -> Result[None]:
    """Gate an update on the pin in ``attr_path``.

    Fails only when the old version honoured the pin and the new one does not.
    An old version that already falls outside the pin means the path is not
    really pinned, so the update passes.
    """
    if is_compatible(attr_path, old_version) and not is_compatible(attr_path, new_version):
        return Err(str(PinViolation(attr_path, new_version)))
    return Ok(None)


def ensure_compatible(attr_path: str, old_version: str, new_version: str) -> None:
    """Raise ``PinViolation`` where ``check_compatible`` would fail."""
    if isinstance(check_compatible(attr_path, old_version, new_version), Err):
        raise PinViolation(attr_path, new_version)
