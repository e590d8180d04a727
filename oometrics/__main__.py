"""CLI entry point for the OO design metrics collector.

Usage:
    oomc [options] MODEL [MODEL ...]
    python -m oometrics [options] MODEL [MODEL ...]

Options:
    MODEL               Class model document (.json/.yaml) or a directory of them
    --config PATH       Path to metrics.yaml config file
    --root DIR          Project root used for relative paths and output (default: cwd)
    --format LIST       Comma-separated output formats: json,csv,markdown
    --output DIR        Override output directory
    --workers N         Compute class metrics on N threads
    --project-name NAME Name shown in reports (default: root directory name)
    --verbose / -v      Verbose output (default: on)
    --quiet / -q        Suppress output
    --help / -h         Show this help
"""

from __future__ import annotations

import argparse
import os
import sys


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="oomc",
        description="Collect object-oriented design metrics from a class model",
    )
    parser.add_argument(
        "models",
        nargs="+",
        help="Class model documents (.json/.yaml/.yml) or directories containing them",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to metrics.yaml configuration file",
    )
    parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Project root (default: current directory)",
    )
    parser.add_argument(
        "--format",
        type=str,
        default=None,
        help="Comma-separated output formats (json,csv,markdown)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory for results",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of threads for per-class metrics",
    )
    parser.add_argument(
        "--project-name",
        type=str,
        default=None,
        help="Project name used in reports",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=True,
        help="Verbose output (default)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress output",
    )

    args = parser.parse_args(argv)

    # Determine project root
    if args.root:
        repo_root = os.path.abspath(args.root)
    else:
        repo_root = os.getcwd()

    if not os.path.isdir(repo_root):
        print(f"Error: project root not found: {repo_root}", file=sys.stderr)
        return 1

    missing = [p for p in args.models if not os.path.exists(p)]
    if missing:
        for p in missing:
            print(f"Error: model path not found: {p}", file=sys.stderr)
        return 1

    # Load config
    from .config import load_config, validate_config
    try:
        config = load_config(config_path=args.config, repo_root=repo_root)

        # Apply CLI overrides
        if args.format:
            config.output.formats = [f.strip() for f in args.format.split(",") if f.strip()]
        if args.output:
            config.output.directory = args.output
        if args.workers is not None:
            config.analysis.workers = max(1, args.workers)
        if args.project_name:
            config.analysis.project_name = args.project_name

        validate_config(config)
    except (OSError, ValueError) as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    verbose = not args.quiet

    if verbose:
        print("=" * 60)
        print("  OO Design Metrics Collector v1.0")
        print("=" * 60)
        print(f"  Models: {', '.join(args.models)}")
        print(f"  Formats: {', '.join(config.output.formats)}")
        print(f"  Workers: {config.analysis.workers}")
        print("=" * 60)
        print()

    # Run collection
    from .collector import collect_metrics, write_output

    result = collect_metrics(
        config=config,
        model_paths=[os.path.abspath(p) for p in args.models],
        verbose=verbose,
    )

    if result.project_metrics is None:
        return 1

    # Write output
    written = write_output(result, config, verbose=verbose)

    if verbose:
        print(f"\n{'=' * 60}")
        print(f"  Done! Wrote {len(written)} files.")
        print(f"  Time: {result.duration_seconds:.1f}s")
        print(f"{'=' * 60}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
