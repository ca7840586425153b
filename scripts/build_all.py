#!/usr/bin/env python
"""
Build pipeline - compiles pricing schemes and runs the test suite.

Usage:
    python scripts/build_all.py
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from pos_tool.config.settings import get_settings
from pos_tool.rules.compile_schemes import compile_schemes


def main():
    print("=" * 60)
    print("POS TOOL BUILD PIPELINE")
    print("=" * 60)
    print()

    settings = get_settings()

    # Compile schemes
    print("[1/2] Compiling pricing schemes...")
    success, schemes, errors = compile_schemes(settings.schemes_csv, settings.compiled_schemes)

    if not success:
        print("\n❌ BUILD FAILED")
        for error in errors:
            print(f"  ERROR: {error}")
        sys.exit(1)

    print()
    print("[2/2] Running tests...")

    # Run tests
    import subprocess
    test_result = subprocess.run(
        [sys.executable, '-m', 'pytest', 'tests', '-v', '--tb=short'],
        cwd=Path(__file__).parent.parent
    )

    if test_result.returncode != 0:
        print("\n❌ TESTS FAILED")
        sys.exit(1)

    print()
    print("=" * 60)
    print("✅ BUILD COMPLETE")
    print("=" * 60)
    print()
    print("Register order:")
    for position, scheme in enumerate(sorted(schemes, key=lambda s: s.position), start=1):
        state = "active" if scheme.active else "inactive"
        print(f"  {position}. {scheme.scheme_id} ({scheme.config['type']}, {state})")


if __name__ == "__main__":
    main()
