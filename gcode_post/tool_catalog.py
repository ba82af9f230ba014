"""Tool catalog built from tool-definition comments."""
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .utils.numbers import parse_leading_float

TOOL_DEFINITION_RE = re.compile(r'^\s*\(\s*T(\d+)\s+D=([\d.]+)', re.IGNORECASE)
UNKNOWN_DIAMETER = 'unknown'


@dataclass(frozen=True)
class ToolEntry:
    """Diameter of a tool and the file that defined it."""
    diameter: float
    definition_path: str


def scan_definition(lines: Iterable[str]) -> Optional[Tuple[str, float]]:
    """
    Find the first tool-definition comment, e.g. ``(T3 D=6.00 FLAT)``.

    Args:
        lines: Raw lines of one file

    Returns:
        (tool_id, diameter), or None if the file defines no tool
    """
    for raw in lines:
        match = TOOL_DEFINITION_RE.match(raw)
        if match:
            diameter = parse_leading_float(match.group(2))
            if diameter is None:
                continue
            return f"T{match.group(1)}", diameter
    return None


@dataclass
class ToolCatalog:
    """Tool id to ToolEntry, plus the set of definition files.

    Definition files are excluded from merging. When several files define
    the same tool, the first one in enumeration order wins.
    """
    entries: Dict[str, ToolEntry] = field(default_factory=dict)
    definition_paths: List[str] = field(default_factory=list)

    @classmethod
    def build(cls, sources: Iterable[Tuple[str, Iterable[str]]]) -> 'ToolCatalog':
        """
        Build the catalog from every available file.

        Args:
            sources: (path, raw lines) pairs in enumeration order

        Returns:
            The populated catalog
        """
        catalog = cls()
        for path, lines in sources:
            catalog.add_source(path, lines)
        return catalog

    def add_source(self, path: str, lines: Iterable[str]) -> bool:
        """Scan one file; returns True if it is a definition file."""
        found = scan_definition(lines)
        if found is None:
            return False
        tool_id, diameter = found
        if tool_id not in self.entries:
            self.entries[tool_id] = ToolEntry(diameter=diameter, definition_path=path)
        self.definition_paths.append(path)
        return True

    def is_definition(self, path: str) -> bool:
        return path in self.definition_paths

    def get(self, tool_id: str) -> Optional[ToolEntry]:
        return self.entries.get(tool_id)

    def format_diameter(self, tool_id: str) -> str:
        """Diameter to 2 decimals, or 'unknown' for uncatalogued tools."""
        entry = self.get(tool_id)
        if entry is None:
            return UNKNOWN_DIAMETER
        return f"{entry.diameter:.2f}"

    def __contains__(self, tool_id: str) -> bool:
        return tool_id in self.entries

    def __len__(self) -> int:
        return len(self.entries)
