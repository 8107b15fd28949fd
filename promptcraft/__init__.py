"""PromptCraft core package.

Exposes the package version so the CLI can report it without failing in
editable/dev installs.
"""

from __future__ import annotations

try:  # Prefer installed distribution metadata
	from importlib.metadata import version, PackageNotFoundError  # type: ignore

	try:
		__version__ = version("promptcraft")
	except PackageNotFoundError:
		__version__ = "0.0.0-dev"
except ImportError:  # pragma: no cover
	__version__ = "0.0.0-dev"

# Number of entries kept per history list
HISTORY_LIMIT = 10


def get_version() -> str:
	"""Return the resolved package version."""
	return __version__


__all__ = ["__version__", "get_version", "HISTORY_LIMIT"]
