"""dockertask command line interface.

Usage:
  dockertask task pull-alpine build-app     # Run targets from dockertask.json
  dockertask targets                        # List targets of the task file
  dockertask call pull --repo-tag alpine:3.20
  dockertask call stop --id web
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
from rich.console import Console
from rich.table import Table
from rich import box

from .config import settings
from .models.errors import DockerTaskException
from .models.invocation import InvocationContext, SUPPORTED_COMMANDS
from .services.dispatcher import CommandDispatcher
from .services.tasks import context_for_target, load_task_file
from .utils.logging import setup_logging

logger = structlog.get_logger(__name__)

console = Console()
err_console = Console(stderr=True)


def parse_pairs(pairs: Optional[List[str]]) -> Dict[str, Any]:
    """Parse ``KEY=VALUE`` arguments; values are decoded as JSON when possible."""
    parsed: Dict[str, Any] = {}
    for pair in pairs or []:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Expected KEY=VALUE, got '{pair}'")
        try:
            parsed[key] = json.loads(raw)
        except json.JSONDecodeError:
            parsed[key] = raw
    return parsed


async def cmd_task(args, dispatcher: CommandDispatcher) -> None:
    """Run the named targets in order, stopping at the first failure."""
    path = Path(args.file or settings.task_file)
    task_file = load_task_file(path)
    for name in args.targets:
        context = context_for_target(task_file, name, base_dir=path.parent)
        logger.info("Running target", target=name, command=context.command)
        await dispatcher.run(context)


async def cmd_targets(args, dispatcher: CommandDispatcher) -> None:
    """List the targets of the task file."""
    task_file = load_task_file(args.file)
    table = Table(title="Targets", box=box.ROUNDED)
    table.add_column("Target", style="cyan")
    table.add_column("Command")
    table.add_column("Identity", style="dim")
    for name, task in task_file.targets.items():
        table.add_row(name, task.command or "[red]none[/red]", task.identity() or "")
    if not task_file.targets:
        table.add_row("[dim]No targets[/dim]", "", "")
    console.print(table)


async def cmd_call(args, dispatcher: CommandDispatcher) -> None:
    """Dispatch one ad-hoc invocation."""
    params: Dict[str, Any] = {"image": args.image, "cmd": args.cmd}
    if args.context:
        params["context"] = args.context
    context = InvocationContext(
        command=args.command,
        target=args.id or args.repo_tag or args.name or args.image,
        options=parse_pairs(args.opt),
        daemon_options=parse_pairs(args.daemon),
        params=params,
    )
    await dispatcher.run(context)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dockertask",
        description="Run Docker commands from task files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Supported commands:
  {", ".join(sorted(SUPPORTED_COMMANDS))}

Examples:
  %(prog)s task pull-alpine            # Run one target
  %(prog)s -f ci.json task build push  # Run targets from another file
  %(prog)s call tag --name app --opt repo=registry/app --opt tag=v1
""",
    )
    parser.add_argument("-f", "--file", help=f"Task file (default: {settings.task_file})")
    parser.add_argument("--log-level", help="Log level (default from LOG_LEVEL)")
    parser.add_argument("--log-format", choices=["console", "json"], help="Log format")

    subparsers = parser.add_subparsers(dest="action")

    task_p = subparsers.add_parser("task", help="Run targets from the task file")
    task_p.add_argument("targets", nargs="+", help="Target names")

    subparsers.add_parser("targets", help="List targets of the task file")

    call_p = subparsers.add_parser("call", help="Run a single command")
    call_p.add_argument("command", help="Docker command")
    call_p.add_argument("--id", help="Container id or name")
    call_p.add_argument("--image", help="Image for run or create-container")
    call_p.add_argument("--repo-tag", help="Image reference for pull")
    call_p.add_argument("--name", help="Image name for push or tag")
    call_p.add_argument("--cmd", nargs="+", help="Command for run or exec")
    call_p.add_argument("--context", help="Build context directory")
    call_p.add_argument("--opt", action="append", metavar="KEY=VALUE", help="Command option")
    call_p.add_argument(
        "--daemon", action="append", metavar="KEY=VALUE", help="Daemon client option"
    )

    return parser


ACTIONS = {
    "task": cmd_task,
    "targets": cmd_targets,
    "call": cmd_call,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.action:
        parser.print_help()
        return 2

    setup_logging(level=args.log_level, log_format=args.log_format)
    dispatcher = CommandDispatcher()

    try:
        asyncio.run(ACTIONS[args.action](args, dispatcher))
    except DockerTaskException as e:
        if e.exit_code == 2:
            err_console.print(f"[red]Error:[/red] {e.message}")
        return e.exit_code
    except argparse.ArgumentTypeError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        return 2
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
