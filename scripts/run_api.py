#!/usr/bin/env python
"""
Run the Meal Tariff API with uvicorn.

Usage:
    python scripts/run_api.py --port 8000 --reload
    python scripts/run_api.py --catalog-dir ./my_tables
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Start the Meal Tariff API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument("--catalog-dir", type=Path, default=None, help="Directory with the tariff CSV tables")
    args = parser.parse_args()

    project_root = Path(__file__).parent.parent

    # Ensure src is in python path
    env = os.environ.copy()
    src_path = str(project_root / "src")
    env["PYTHONPATH"] = os.pathsep.join(p for p in (src_path, env.get("PYTHONPATH")) if p)
    if args.catalog_dir:
        env["TARIFF_CATALOG_DIR"] = str(args.catalog_dir.resolve())

    cmd = [
        sys.executable, "-m", "uvicorn",
        "tariff_tool.api.main:app",
        "--host", args.host,
        "--port", str(args.port),
    ]
    if args.reload:
        cmd.append("--reload")

    print(f"Starting Meal Tariff API: {' '.join(cmd)}")
    try:
        subprocess.run(cmd, cwd=str(project_root), env=env)
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
