"""
Scheme Loader - Builds pricing schemes from compiled_schemes.json.

Used to configure registers from the compiled scheme file.
"""
import json
from pathlib import Path
from typing import Optional

from .schemes import PricingScheme, scheme_from_config


class SchemeLoader:
    """
    Loads active scheme declarations from compiled JSON.

    A missing file is not an error: the loader simply reports nothing loaded.
    An unreadable file, or one declaring a scheme that cannot be built,
    leaves loaded False, builds no schemes and records the reason in `error`.
    """

    def __init__(self, compiled_schemes_path: Optional[Path] = None):
        """Load compiled schemes."""
        self.entries = []
        self.loaded = False
        self.error: Optional[str] = None

        if compiled_schemes_path and compiled_schemes_path.exists():
            self._load_entries(compiled_schemes_path)

    def _load_entries(self, path: Path):
        """Load scheme entries from JSON file."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.entries = []
            self.loaded = False
            self.error = f"Failed to read {path}: {e}"
            return

        entries = [s for s in data.get('schemes', []) if s.get('active', False)]

        for entry in entries:
            try:
                scheme_from_config(entry.get('config', {}))
            except ValueError as e:
                self.entries = []
                self.loaded = False
                self.error = f"Invalid scheme '{entry.get('scheme_id', 'unknown')}' in {path}: {e}"
                return

        # Stable: equal positions keep compiled order
        self.entries = sorted(entries, key=lambda s: s.get('position', 50))
        self.loaded = True

    def build_schemes(self) -> list[PricingScheme]:
        """
        Build fresh scheme instances in register order.

        Each call returns new instances, so single-use schemes start unused.
        """
        return [scheme_from_config(entry.get('config', {})) for entry in self.entries]
