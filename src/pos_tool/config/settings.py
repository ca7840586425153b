"""
Centralized settings and path configuration for the POS tool.
"""
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


def get_package_dir() -> Path:
    """Get the installed pos_tool package directory."""
    return Path(__file__).resolve().parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Scheme files
    schemes_csv: Path
    compiled_schemes: Path

    # Receipt presentation
    currency_symbol: str = '$'
    receipt_header: str = 'Receipt:'
    receipt_rule: str = '-' * 18
    total_label: str = 'TOTAL'

    @classmethod
    def load(cls, rules_dir: Optional[Path] = None) -> 'Settings':
        """Load settings, reading scheme files from rules_dir (default: the packaged rules/)."""
        rules_dir = rules_dir or get_package_dir() / 'rules'

        return cls(
            schemes_csv=rules_dir / 'schemes.csv',
            compiled_schemes=rules_dir / 'compiled_schemes.json',
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
