"""ghost-static command line."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import sys
from pathlib import Path

from .client import install_client
from .config import ExportConfig, load_config
from .errors import ExportError
from .indexer import build_index, write_index
from .normalize import normalize_tree
from .pipeline import run
from .query import load_corpus, search
from .verify import verify_tree


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """CLI options."""
    parser = argparse.ArgumentParser(prog="ghost-static", description="Export a Ghost blog to a static, searchable site")
    parser.add_argument("--config", default=None, help="Path to config YAML file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("export", help="Wait for the source, mirror it, normalize and index the result")

    p = sub.add_parser("normalize", help="Normalize an already mirrored tree and build its index")
    p.add_argument("output_dir", nargs="?", help="Mirrored tree (default: configured output_dir)")
    p.add_argument("--no-client", action="store_true", help="Do not install search.js")

    p = sub.add_parser("index", help="Rebuild search.json for a tree")
    p.add_argument("output_dir", nargs="?", help="Site tree (default: configured output_dir)")

    p = sub.add_parser("search", help="Query a search.json from the terminal")
    p.add_argument("index", help="search.json, or a tree containing it")
    p.add_argument("query")

    p = sub.add_parser("verify", help="Check an exported tree")
    p.add_argument("output_dir", nargs="?", help="Site tree (default: configured output_dir)")
    return parser.parse_args(argv)


def _with_output(config: ExportConfig, output_dir: str | None) -> ExportConfig:
    if output_dir is None:
        return config
    return dataclasses.replace(config, output_dir=output_dir)


def cmd_normalize(config: ExportConfig, no_client: bool) -> int:
    root = config.output_path
    if not root.is_dir():
        raise SystemExit(f"output directory not found: {root}")
    normalize_tree(root, config.host_names, config.domain, config.site_title)
    if config.install_client and not no_client:
        install_client(root)
    write_index(build_index(root), config.index_path)
    return 0


def cmd_index(config: ExportConfig) -> int:
    root = config.output_path
    if not root.is_dir():
        raise SystemExit(f"output directory not found: {root}")
    write_index(build_index(root), config.index_path)
    return 0


def cmd_search(index: str, query: str) -> int:
    path = Path(index)
    if path.is_dir():
        path = path / "search.json"
    results = search(load_corpus(path), query)
    for entry in results:
        print(f"{entry.get('title', '')}  {entry.get('url', '')}")
        excerpt = entry.get("excerpt") or ""
        if excerpt:
            print(f"    {excerpt}")
    print(f"{len(results)} result(s)")
    return 0


def cmd_verify(config: ExportConfig) -> int:
    report = verify_tree(config.output_path, config)
    for line in report.ng:
        print(f"[NG] {line}")
    for line in report.ok:
        print(f"[OK] {line}")
    print(f"OK: {len(report.ok)}")
    print(f"NG: {len(report.ng)}")
    if report.residual_url_files:
        print("Residual URL files:")
        for rel in sorted(report.residual_url_files):
            print(f"- {rel}")
    return 0 if report.passed else 1


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )
    config_path = Path(args.config) if args.config else None
    if config_path is not None and not config_path.exists():
        raise SystemExit(f"config file not found: {config_path}")
    try:
        config = load_config(config_path)
    except ValueError as exc:
        raise SystemExit(f"invalid configuration: {exc}") from exc

    try:
        if args.command == "export":
            code = asyncio.run(run(config))
        elif args.command == "normalize":
            code = cmd_normalize(_with_output(config, args.output_dir), args.no_client)
        elif args.command == "index":
            code = cmd_index(_with_output(config, args.output_dir))
        elif args.command == "search":
            code = cmd_search(args.index, args.query)
        else:
            code = cmd_verify(_with_output(config, args.output_dir))
    except ExportError as exc:
        logging.error("Export failed: %s", exc)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
