#!/usr/bin/env python3
"""
Export every versioned OpenAPI document of an application to disk.

The application is loaded from an import path ("module:attribute"). The
attribute may be a FastAPI instance or a zero-argument factory. Each
document registered by publish_documentation() is written as
<output>/<group_name>.json.

Usage:
    uv run python scripts/export_openapi.py
    uv run python scripts/export_openapi.py myservice.main:create_app -o docs/openapi
"""

import argparse
import importlib
import json
import sys
from pathlib import Path

from fastapi import FastAPI


def load_app(import_path: str) -> FastAPI:
    """Import "module:attribute" and return the FastAPI application."""
    module_name, _, attribute = import_path.partition(":")
    module = importlib.import_module(module_name)
    target = getattr(module, attribute or "app")
    app = target if isinstance(target, FastAPI) else target()
    if not isinstance(app, FastAPI):
        raise TypeError(f"{import_path} did not produce a FastAPI application")
    return app


def export_documents(app: FastAPI, output_dir: Path) -> list[Path]:
    """Write one JSON file per document group and return the written paths."""
    generator = getattr(app.state, "documentation_generator", None)
    if generator is None:
        raise RuntimeError("Documentation was not published on this application")

    output_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for group_name in generator.group_names:
        path = output_dir / f"{group_name}.json"
        document = generator.generate(group_name)
        path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
        written.append(path)
    return written


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument(
        "app",
        nargs="?",
        default="apidocs.main:create_app",
        help="Application import path (default: apidocs.main:create_app)",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("docs/openapi"),
        help="Output directory (default: docs/openapi)",
    )
    args = parser.parse_args(argv)

    app = load_app(args.app)
    written = export_documents(app, args.output)
    if not written:
        print("No API documents registered", file=sys.stderr)
        return 1

    for path in written:
        print(f"Wrote {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
