"""
Scheme Compiler - Validates and compiles pricing schemes from CSV to JSON.

Reads schemes.csv, validates each row for its scheme type, and outputs
compiled_schemes.json in register order.
"""
import json
import pandas as pd
from pathlib import Path
from typing import Optional
from datetime import datetime
from dataclasses import dataclass, field

from ..engine.schemes import scheme_from_config


@dataclass
class SchemeConfig:
    """A compiled pricing scheme declaration."""
    scheme_id: str
    name: str
    active: bool
    position: int
    config: dict = field(default_factory=dict)
    notes: str = ""


# Required columns per scheme type (coupon discount_percent defaults to 15)
REQUIRED_FIELDS = {
    'bunched': ('item_name', 'buy', 'pay'),
    'grouped': ('group_names', 'discount_percent'),
    'coupon': ('item_name',),
    'rain_check': ('item_name', 'special_price'),
}

INT_FIELDS = ('buy', 'pay', 'special_price')
FLOAT_FIELDS = ('discount_percent',)


def parse_bool(value: str) -> bool:
    """Parse a boolean from CSV string."""
    return value.lower() in ('true', '1', 'yes', 'on')


def parse_optional_str(value: str) -> Optional[str]:
    """Parse optional string (empty = None)."""
    if not value or value.strip() == '':
        return None
    return value.strip()


def validate_scheme(row: dict, line_num: int) -> tuple[Optional[SchemeConfig], list[str]]:
    """
    Validate and parse a scheme from a CSV row.

    Returns (scheme, errors) - scheme is None if validation failed.
    """
    errors = []

    scheme_id = parse_optional_str(row.get('scheme_id', ''))
    if not scheme_id:
        errors.append(f"Line {line_num}: scheme_id is required")
        return None, errors

    name = parse_optional_str(row.get('name', '')) or scheme_id
    active = parse_bool(row.get('active', 'false'))

    try:
        position = int(row.get('position', '') or 50)
    except ValueError:
        errors.append(f"Line {line_num}: position must be an integer")
        return None, errors

    scheme_type = parse_optional_str(row.get('scheme_type', ''))
    if not scheme_type:
        errors.append(f"Line {line_num}: scheme_type is required")
        return None, errors

    if scheme_type not in REQUIRED_FIELDS:
        errors.append(
            f"Line {line_num}: invalid scheme_type '{scheme_type}', "
            f"must be one of: {sorted(REQUIRED_FIELDS)}"
        )
        return None, errors

    config = {'type': scheme_type}
    for column in REQUIRED_FIELDS[scheme_type]:
        if parse_optional_str(row.get(column, '')) is None:
            errors.append(f"Line {line_num}: {column} is required for {scheme_type}")

    # Item names keep their exact text; matching is case-sensitive
    if row.get('item_name'):
        config['item_name'] = row['item_name']

    group_names = parse_optional_str(row.get('group_names', ''))
    if group_names:
        config['group_names'] = [n.strip() for n in group_names.split('|') if n.strip()]

    for column in INT_FIELDS:
        value = parse_optional_str(row.get(column, ''))
        if value is None:
            continue
        try:
            config[column] = int(value)
        except ValueError:
            errors.append(f"Line {line_num}: {column} must be an integer")

    for column in FLOAT_FIELDS:
        value = parse_optional_str(row.get(column, ''))
        if value is None:
            continue
        try:
            config[column] = float(value)
        except ValueError:
            errors.append(f"Line {line_num}: {column} must be numeric")

    if scheme_type == 'bunched' and isinstance(config.get('buy'), int) and config['buy'] < 1:
        errors.append(f"Line {line_num}: buy must be at least 1")

    if errors:
        return None, errors

    # Reject anything the loader could not build
    try:
        scheme_from_config(config)
    except ValueError as e:
        return None, [f"Line {line_num}: {e}"]

    notes =parse_optional_str(row.get('notes', '')) or ""

    return SchemeConfig(
        scheme_id=scheme_id,
        name=name,
        active=active,
        position=position,
        config=config,
        notes=notes
    ), []


def compile_schemes(
    schemes_csv: Path,
    output_json: Path,
    verbose: bool = True
) -> tuple[bool, list[SchemeConfig], list[str]]:
    """
    Compile schemes from CSV to JSON.

    Returns (success, schemes, errors).
    """
    all_errors = []
    schemes = []

    if not schemes_csv.exists():
        all_errors.append(f"Schemes file not found: {schemes_csv}")
        return False, [], all_errors

    df = pd.read_csv(schemes_csv, dtype=str, keep_default_na=False)

    for line_num, row in enumerate(df.to_dict(orient='records'), start=2):  # +2 for 1-indexed header row
        scheme, errors = validate_scheme(row, line_num)

        if errors:
            all_errors.extend(errors)
        elif scheme:
            schemes.append(scheme)

    seen = set()
    for scheme in schemes:
        if scheme.scheme_id in seen:
            all_errors.append(f"Duplicate scheme_id '{scheme.scheme_id}'")
        seen.add(scheme.scheme_id)

    if all_errors:
        if verbose:
            print("Validation errors:")
            for err in all_errors:
                print(f"  ❌ {err}")
        return False, schemes, all_errors

    # Register order: position ascending, ties keep file order
    schemes.sort(key=lambda s: s.position)

    output_data = {
        "compiled_at": datetime.now().isoformat(),
        "source_file": str(schemes_csv),
        "total_schemes": len(schemes),
        "active_schemes": sum(1 for s in schemes if s.active),
        "schemes": []
    }

    for scheme in schemes:
        output_data["schemes"].append({
            "scheme_id": scheme.scheme_id,
            "name": scheme.name,
            "active": scheme.active,
            "position": scheme.position,
            "config": scheme.config,
            "notes": scheme.notes
        })

    output_json.parent.mkdir(parents=True, exist_ok=True)
    with open(output_json, 'w', encoding='utf-8') as f:
        json.dump(output_data, f, indent=2)

    if verbose:
        print(f"✅ Compiled {len(schemes)} schemes ({output_data['active_schemes']} active)")
        print(f"   Output: {output_json}")

    return True, schemes, []


def main():
    """CLI entry point."""
    import sys

    from pos_tool.config.settings import get_settings

    settings = get_settings()

    print("Compiling pricing schemes...")
    success, schemes, errors = compile_schemes(settings.schemes_csv, settings.compiled_schemes)

    if not success:
        print(f"\n❌ Compilation failed with {len(errors)} errors")
        sys.exit(1)


if __name__ == "__main__":
    main()
