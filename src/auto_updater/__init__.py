"""auto-updater core package.

Pin gating, update-proposal parsing and resilient command execution for an
automated package-update agent. The orchestrating workflow lives outside this
package and drives it through these entrypoints.
"""

__version__ = "0.1.0"

__all__ = [
    "core",
]
