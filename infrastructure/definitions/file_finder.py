"""Find definition files by test id."""
from pathlib import Path
from typing import Optional


class DefinitionFileFinder:
    """Search definition files under the given base directory."""

    PRIORITY = (".json", ".yaml", ".yml")

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)

    def find_by_id(self, test_id: str) -> Optional[Path]:
        """
        Find a definition file by test ID.

        Args:
            test_id: Test ID (e.g., "login_valid_001")

        Returns:
            The Path if found, otherwise None.
        """
        candidates: list[Path] = []

        # .json wins over the YAML variants when one id has several files
        for ext in self.PRIORITY:
            filename = f"{test_id}{ext}"
            for file_path in self.base_dir.rglob(filename):
                if file_path.is_file():
                    candidates.append(file_path)

        if not candidates:
            return None

        candidates.sort(key=lambda path: (self.PRIORITY.index(path.suffix), str(path)))
        return candidates[0]
