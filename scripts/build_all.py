#!/usr/bin/env python
"""
Build pipeline - validates the tariff tables and runs the test suite.

Usage:
    python scripts/build_all.py
"""
import subprocess
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from tariff_tool.data.build_catalog import build_catalog_report


def main():
    print("=" * 60)
    print("MEAL TARIFF BUILD PIPELINE")
    print("=" * 60)
    print()
    
    print("[1/2] Validating tariff tables...")
    report = build_catalog_report(verbose=True)
    
    if report["status"] != "success":
        print("\n❌ BUILD FAILED")
        for error in report["errors"]:
            print(f"  ERROR: {error}")
        sys.exit(1)
    
    print()
    print("[2/2] Running tests...")
    
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
    print("Summary:")
    print(f"  Catalog hash: {report['catalog_hash']}")
    for table, count in report['metrics'].items():
        print(f"  {table}: {count}")


if __name__ == "__main__":
    main()
