"""Profile management for dinner-ideas storage and logs."""

import os
from pathlib import Path
from typing import Optional

STORE_FILE_NAME = "dinner-items.json"


class Profile:
    """Manages profile-specific paths for dinner-ideas.

    A profile determines where the recipe collection and logs live. The active
    profile is selected by the DINNER_IDEAS_PROFILE environment variable,
    defaulting to "default". DINNER_IDEAS_HOME overrides the data root
    entirely, which is how tests and embedders point the app at a scratch
    directory.
    """

    def __init__(self, name: Optional[str] = None, data_root: Optional[Path] = None):
        """Initialize profile with given name or from environment.

        Args:
            name: Profile name. If None, uses DINNER_IDEAS_PROFILE or "default".
            data_root: Explicit data root. If None, uses DINNER_IDEAS_HOME or
                ``<project root>/data/<name>``.
        """
        self.name = name or os.getenv("DINNER_IDEAS_PROFILE", "default")

        if data_root is None:
            home = os.getenv("DINNER_IDEAS_HOME")
            if home:
                data_root = Path(home).expanduser()
            else:
                data_root = self._find_project_root() / "data" / self.name
        self._data_root = Path(data_root)

        self._ensure_directories()

    def _find_project_root(self) -> Path:
        """Find project root by looking for pyproject.toml or .git."""
        current = Path(__file__).resolve().parent

        while current != current.parent:
            if (current / "pyproject.toml").exists() or (current / ".git").exists():
                return current
            current = current.parent

        # Fallback to parent of src directory
        return Path(__file__).parent.parent.parent

    def _ensure_directories(self) -> None:
        """Create profile directories if they don't exist."""
        self.documents_dir.mkdir(parents=True, exist_ok=True)
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    @property
    def data_root(self) -> Path:
        """Root directory for profile data."""
        return self._data_root

    @property
    def documents_dir(self) -> Path:
        """Private document storage area for the collection file."""
        return self._data_root / "documents"

    @property
    def logs_dir(self) -> Path:
        """Directory for log files."""
        return self._data_root / "logs"

    @property
    def store_file(self) -> Path:
        """The single file holding the persisted recipe collection."""
        return self.documents_dir / STORE_FILE_NAME

    @property
    def log_file(self) -> Path:
        """Path to the main log file."""
        return self.logs_dir / "dinner-ideas.log"

    @classmethod
    def current(cls) -> "Profile":
        """Get the current active profile.

        Returns:
            Profile instance for the current profile.
        """
        return cls()

    def __str__(self) -> str:
        return f"Profile({self.name})"

    def __repr__(self) -> str:
        return f"Profile(name={self.name!r}, data_root={self._data_root!s})"
