"""
Command-line interface for logic circuit project files.

Check, summarize and browse saved projects without the GUI.

Usage::

    python -m cli validate project.json
    python -m cli inspect project.json
    python -m cli inspect project.json --format json
    python -m cli folders project.json --circuit <circuit id>
    python -m cli batch projects/ --fail-fast
"""

import argparse
import glob
import json
import logging
import sys
from pathlib import Path

from controllers.file_controller import validate_project_data
from controllers.project_loader import ProjectLoader
from models.errors import CorruptDocumentError
from models.folder import FolderNode
from models.project import ProjectSession
from models.scope import Scope

__version__ = "0.1.0"


def try_load_project(filepath: str) -> tuple[ProjectSession | None, str]:
    """Load, validate and restore a project JSON file without exiting.

    Args:
        filepath: Path to the project JSON file.

    Returns:
        (session, "") on success, or (None, error_message) on failure.
    """
    path = Path(filepath)
    if not path.exists():
        return None, f"file not found: {filepath}"

    try:
        with open(path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        return None, f"invalid JSON in {filepath}: {e}"

    try:
        validate_project_data(data)
    except ValueError as e:
        return None, f"invalid project file: {e}"

    try:
        session = ProjectLoader().load(data)
    except CorruptDocumentError as e:
        return None, f"corrupt project: {e}"

    return session, ""


def load_project(filepath: str) -> ProjectSession:
    """Load a project JSON file.

    Raises:
        SystemExit: On file read, validation or restore errors.
    """
    session, error = try_load_project(filepath)
    if session is None:
        print(f"Error: {error}", file=sys.stderr)
        sys.exit(1)
    return session


def scope_summary(scope: Scope) -> dict:
    """Describe one restored circuit."""
    return {
        "id": scope.scope_id,
        "name": scope.name,
        "nodes": len(scope.all_nodes),
        "wires": len(scope.wires),
        "elements": scope.element_counts(),
        "layout": scope.layout.to_dict(),
        "folders": len(scope.folder_tree.folders),
    }


def project_summary(session: ProjectSession) -> dict:
    return {
        "name": session.name,
        "clock_time_period": session.clock_time_period,
        "clock_enabled": session.clock_enabled,
        "focussed": session.active_scope.scope_id if session.active_scope else None,
        "tabs": list(session.tab_order),
        "scopes": [scope_summary(scope) for scope in session.scopes],
    }


def cmd_validate(args: argparse.Namespace) -> int:
    """Check that a project can be restored."""
    session, error = try_load_project(args.project)
    if session is None:
        print(f"Project has errors: {args.project}", file=sys.stderr)
        print(f"  - {error}", file=sys.stderr)
        return 1
    print(f"Project is valid: {args.project} ({len(session.scopes)} circuits)")
    return 0


def _format_text(summary: dict) -> str:
    lines = [
        f"Project: {summary['name']}",
        f"Clock: {summary['clock_time_period']} ({'enabled' if summary['clock_enabled'] else 'disabled'})",
    ]
    for scope in summary["scopes"]:
        marker = "*" if scope["id"] == summary["focussed"] else " "
        lines.append(f"{marker} {scope['name']} [{scope['id']}]")
        lines.append(f"    nodes: {scope['nodes']}  wires: {scope['wires']}  folders: {scope['folders']}")
        for tag, count in scope["elements"].items():
            lines.append(f"    {tag}: {count}")
    return "\n".join(lines)


def cmd_inspect(args: argparse.Namespace) -> int:
    """Print a summary of every circuit in a project."""
    session = load_project(args.project)
    summary = project_summary(session)
    if args.format == "json":
        print(json.dumps(summary, indent=2))
    else:
        print(_format_text(summary))
    return 0


def format_folder_tree(node: FolderNode, depth: int = 0) -> list[str]:
    """Render a folder tree as indented lines, folders before subcircuits."""
    indent = "  " * depth
    lines = [f"{indent}{node.name}/"]
    for child in node.folders:
        lines.extend(format_folder_tree(child, depth + 1))
    for entry in node.subcircuits:
        lines.append(f"{indent}  {entry.name} [{entry.subcircuit_id}]")
    return lines


def cmd_folders(args: argparse.Namespace) -> int:
    """Print the subcircuit folder tree of one circuit (the focussed one by default)."""
    session = load_project(args.project)
    if args.circuit:
        scope = session.get_scope(args.circuit)
        if scope is None:
            print(f"Error: no circuit with id '{args.circuit}'", file=sys.stderr)
            return 1
    else:
        scope = session.active_scope
    if scope is None:
        print("Error: project has no circuits", file=sys.stderr)
        return 1

    tree = scope.folder_tree.build_tree(session.subcircuit_names(exclude=scope))
    print(f"Circuit: {scope.name}")
    print("\n".join(format_folder_tree(tree)))
    return 0


def cmd_batch(args: argparse.Namespace) -> int:
    """Validate multiple project files."""
    pattern = args.path
    path = Path(pattern)
    if path.is_dir():
        files = sorted(path.glob("*.json"))
    elif "*" in pattern or "?" in pattern:
        files = sorted(Path(p) for p in glob.glob(pattern))
    else:
        print(f"Error: {pattern} is not a directory or glob pattern", file=sys.stderr)
        return 1

    if not files:
        print(f"No .json project files found matching: {pattern}", file=sys.stderr)
        return 1

    results_summary = []
    any_failed = False
    for filepath in files:
        session, error = try_load_project(str(filepath))
        if session is None:
            results_summary.append({"file": filepath.name, "status": "ERROR", "details": error})
            any_failed = True
            if args.fail_fast:
                break
            continue
        results_summary.append({"file": filepath.name, "status": "OK", "details": f"{len(session.scopes)} circuits"})

    print(f"\n{'File':<40} {'Status':<12} {'Details'}")
    print("-" * 70)
    for entry in results_summary:
        print(f"{entry['file']:<40} {entry['status']:<12} {entry['details']}")

    total = len(results_summary)
    passed = sum(1 for e in results_summary if e["status"] == "OK")
    print(f"\n{passed}/{total} valid, {total - passed} failed")

    return 1 if any_failed else 0


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="logic-circuits-cli",
        description="Check, summarize and browse logic circuit project files from the command line.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log restore details to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # validate
    val_parser = subparsers.add_parser("validate", help="Check that a project file can be restored")
    val_parser.add_argument("project", help="Path to project JSON file")

    # inspect
    ins_parser = subparsers.add_parser("inspect", help="Summarize the circuits in a project")
    ins_parser.add_argument("project", help="Path to project JSON file")
    ins_parser.add_argument("--format", choices=["text", "json"], default="text", help="Output format (default: text)")

    # folders
    fold_parser = subparsers.add_parser("folders", help="Show a circuit's subcircuit folder tree")
    fold_parser.add_argument("project", help="Path to project JSON file")
    fold_parser.add_argument("--circuit", "-c", help="Circuit id (default: the focussed circuit)")

    # batch
    batch_parser = subparsers.add_parser("batch", help="Validate multiple project files")
    batch_parser.add_argument("path", help="Directory or glob pattern matching project JSON files")
    batch_parser.add_argument("--fail-fast", action="store_true", help="Stop on first error")

    return parser


def main(argv=None) -> int:
    """CLI entry point. Returns exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    handlers = {
        "validate": cmd_validate,
        "inspect": cmd_inspect,
        "folders": cmd_folders,
        "batch": cmd_batch,
    }

    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
