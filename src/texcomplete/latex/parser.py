"""Project scanner for labels and bibliography entries."""

from __future__ import annotations

import re
from pathlib import Path

_LABEL = re.compile(r"\\label\{([^}]+)\}")
_BIB_ENTRY = re.compile(r"@(\w+)\{([^,]+),([^@]*)", re.DOTALL)
_BIB_FIELD = re.compile(r"(\w+)\s*=\s*[{\"]([^}\"]*)[}\"]")


class LatexParser:
    """Parser for the .tex and .bib files of a LaTeX project."""

    _SKIP_DIRS = {'_original', 'build', 'backup', '.git', '__pycache__'}

    def __init__(self, project_root: Path):
        self.project_root = project_root

    def _iter_files(self, pattern: str) -> list[Path]:
        """Iterate project files, filtering out build/backup dirs."""
        result = []
        for f in sorted(self.project_root.rglob(pattern)):
            rel = f.relative_to(self.project_root)
            if not any(part in self._SKIP_DIRS for part in rel.parts):
                result.append(f)
        return result

    def _iter_tex_files(self) -> list[Path]:
        return self._iter_files("*.tex")

    def _iter_bib_files(self) -> list[Path]:
        return self._iter_files("*.bib")

    def extract_labels(self) -> list[dict]:
        """Extract \\label definitions with file and line information."""
        labels = []
        seen: set[str] = set()

        for tex_file in self._iter_tex_files():
            content = tex_file.read_text(errors="ignore")
            rel_path = tex_file.relative_to(self.project_root)

            for i, line in enumerate(content.split("\n"), 1):
                for match in _LABEL.finditer(line):
                    label = match.group(1).strip()
                    # First definition wins
                    if label in seen:
                        continue
                    seen.add(label)
                    labels.append({
                        "label": label,
                        "file": str(rel_path),
                        "line": i,
                        "context": line.strip(),
                    })

        return labels

    def parse_bibliography(self) -> dict[str, dict]:
        """Parse bibliography files into a dictionary keyed by entry key."""
        entries = {}

        for bib_file in self._iter_bib_files():
            content = bib_file.read_text(errors="ignore")

            for match in _BIB_ENTRY.finditer(content):
                entry_type = match.group(1).lower()
                if entry_type in ("comment", "string", "preamble"):
                    continue
                key = match.group(2).strip()

                fields = {"type": entry_type}
                for field_match in _BIB_FIELD.finditer(match.group(3)):
                    fields[field_match.group(1).lower()] = field_match.group(2)

                entries[key] = fields

        return entries
