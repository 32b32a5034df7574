#!/usr/bin/env python3
"""
Package Lambda functions together with the rest_api adapter.

Usage: python scripts/build.py [function_name ...]
"""
import os
import shutil
import subprocess
import sys
import zipfile
from pathlib import Path

LIBRARY_PACKAGE = "rest_api"
IGNORED_PATTERNS = shutil.ignore_patterns("test_*.py", "__pycache__", "*.pyc")


def discover_functions(src_dir: Path, names):
    """Return function directories under src/, optionally filtered by name."""
    functions = [
        d for d in sorted(src_dir.iterdir())
        if d.is_dir() and d.name != LIBRARY_PACKAGE and (d / "lambda_function.py").exists()
    ]
    if names:
        unknown = set(names) - {f.name for f in functions}
        if unknown:
            raise SystemExit(f"Unknown function(s): {', '.join(sorted(unknown))}")
        functions = [f for f in functions if f.name in names]
    return functions


def build_function(function_dir: Path, src_dir: Path, build_dir: Path) -> Path:
    """Build one deployment zip and return its path."""
    function_name = function_dir.name
    zip_path = build_dir / f"{function_name}.zip"

    print(f"Building {function_name}...")

    temp_dir = build_dir / f"temp_{function_name}"
    if temp_dir.exists():
        shutil.rmtree(temp_dir)

    # Handler module sits at the archive root, the adapter package beside it
    shutil.copytree(function_dir, temp_dir, ignore=IGNORED_PATTERNS)
    shutil.copytree(src_dir / LIBRARY_PACKAGE, temp_dir / LIBRARY_PACKAGE, ignore=IGNORED_PATTERNS)

    requirements_file = function_dir / "requirements.txt"
    if requirements_file.exists():
        print(f"Installing dependencies for {function_name}...")
        subprocess.run([
            sys.executable, "-m", "pip", "install",
            "-r", str(requirements_file),
            "-t", str(temp_dir),
        ], check=True)

    with zipfile.ZipFile(zip_path, 'w', zipfile.ZIP_DEFLATED) as zipf:
        for root, _, files in os.walk(temp_dir):
            for file in files:
                file_path = Path(root) / file
                zipf.write(file_path, file_path.relative_to(temp_dir))

    shutil.rmtree(temp_dir)

    print(f"{function_name}.zip created ({zip_path.stat().st_size} bytes)")
    return zip_path


def main(argv=None):
    """Main build function"""
    project_root = Path(__file__).parent.parent
    src_dir = project_root / "src"
    build_dir = project_root / "build"
    build_dir.mkdir(exist_ok=True)

    functions = discover_functions(src_dir, argv if argv is not None else sys.argv[1:])
    print(f"Building Lambda functions: {[f.name for f in functions]}")

    for function_dir in functions:
        build_function(function_dir, src_dir, build_dir)

    print("Build complete!")


if __name__ == "__main__":
    main()
