"""
Unix artifact extractor for captured filesystem images.

Reads a mounted image or extracted tree as if it were ``/`` and exports:
- snapshot.json (or <user>.json with --user): identities, groups, shell config,
  history, SSH keys, cron tasks and services
- history_timeline.csv: every user's shell history, oldest first
- _index.json: what was written and from where

Outputs to artifact_dump/unix/ unless --out is given.
"""
import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from .aggregator import ArtifactAggregator
from .chroot import ChRootFileSystem
from .config import settings
from .errors import UnixArtifactsError
from .models import SystemSnapshot, UserArtifact
from .timeline import build_history_timeline
from .vfs import StdVirtualFS

console = Console()
logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Extract shell, SSH, cron and service artifacts from a Unix evidence tree.")
    parser.add_argument("evidence_root", nargs="?", default=settings.EVIDENCE_ROOT, help="directory standing in for /")
    parser.add_argument("--user", help="extract a single user")
    parser.add_argument("--out", default=settings.OUTPUT_DIR, help="output directory")
    parser.add_argument("--workers", type=int, default=settings.MAX_WORKERS)
    parser.add_argument("--strict", action="store_true", default=settings.STRICT_PARSING)
    parser.add_argument("--isolate-failures", action="store_true", default=settings.ISOLATE_USER_FAILURES)
    parser.add_argument("--skip-malformed", action="store_true", default=settings.SKIP_MALFORMED_RECORDS)
    return parser.parse_args(argv)


def summary_table(users: List[UserArtifact]) -> Table:
    table = Table(title="Unix user artifacts")
    for column in ("User", "UID", "Shell", "Groups", "bash hist", "zsh hist", "Keys", "Cron", "Units"):
        table.add_column(column)
    for artifact in users:
        info = artifact.user_info
        table.add_row(
            info.name,
            str(info.user_id),
            info.shell,
            ",".join(g.name for g in artifact.groups),
            str(len(artifact.bash_history.commands)),
            str(len(artifact.zsh_history.commands)),
            str(len(artifact.authorized_keys)),
            str(len(artifact.crontab_tasks)),
            str(len(artifact.systemd_user_services)),
        )
    return table


def write(path: Path, content: str):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=settings.LOG_LEVEL)

    root = Path(args.evidence_root).resolve()
    out = Path(args.out).resolve()
    if not root.is_dir():
        console.print(f"[bold red]Evidence root not found:[/bold red] {root}")
        return 2

    config = settings.model_copy(
        update={
            "STRICT_PARSING": args.strict,
            "ISOLATE_USER_FAILURES": args.isolate_failures,
            "SKIP_MALFORMED_RECORDS": args.skip_malformed,
            "MAX_WORKERS": args.workers,
        }
    )
    vfs = ChRootFileSystem(root, StdVirtualFS())
    aggregator = ArtifactAggregator(vfs, config)

    t0 = time.time()
    written = []
    try:
        if args.user:
            artifact = aggregator.collect_user(args.user)
            if artifact.user_info.is_empty:
                console.print(f"[yellow]User not found in /etc/passwd:[/yellow] {args.user}")
                return 1
            snapshot = SystemSnapshot(evidence_root=str(root), users=[artifact], groups=list(artifact.groups))
            target = out / f"{args.user}.json"
            write(target, artifact.model_dump_json(indent=2))
        else:
            snapshot = aggregator.collect_system()
            target = out / "snapshot.json"
            write(target, snapshot.model_dump_json(indent=2))
    except UnixArtifactsError as e:
        console.print(f"[bold red]Extraction aborted:[/bold red] {e}")
        return 1
    written.append(str(target))

    timeline_path = out / "history_timeline.csv"
    out.mkdir(parents=True, exist_ok=True)
    build_history_timeline(snapshot).to_csv(timeline_path, index=False)
    written.append(str(timeline_path))

    index = {
        "root": str(root),
        "outputs": written,
        "users": [a.user_info.name for a in snapshot.users],
        "failures": snapshot.failures,
        "elapsed_sec": round(time.time() - t0, 2),
    }
    write(out / "_index.json", json.dumps(index, indent=2, ensure_ascii=False))

    console.print(summary_table(snapshot.users))
    if snapshot.failures:
        for name, error in snapshot.failures.items():
            console.print(f"  [red]❌ {name}:[/red] {error}")
    console.print(f"[bold green]✅ Wrote {len(written)} file(s) to[/bold green] {out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
