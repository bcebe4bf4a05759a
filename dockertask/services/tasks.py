"""Task files: named targets turned into invocation contexts.

A task file is a JSON object. Its optional ``options`` key holds daemon
client options shared by all targets; every other key names a target:

    {
      "options": {"base_url": "unix:///var/run/docker.sock"},
      "pull-alpine": {"command": "pull", "repo_tag": "alpine:3.20"},
      "image": {"command": "build", "context": ".", "src": ["Dockerfile", "app/**/*.py"],
                "opts": {"t": "app:dev"}}
    }
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TextIO, Union

import structlog
from pydantic import ValidationError

from ..config import settings
from ..models.errors import InvalidInvocation
from ..models.invocation import InvocationContext
from ..models.tasks import TaskDefinition, TaskFile
from ..utils.files import collect_files

logger = structlog.get_logger(__name__)


def _first(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


COLUMN_TRANSFORMS: Dict[str, Callable[[Any], Any]] = {
    "upper": lambda v: v.upper() if isinstance(v, str) else v,
    "lower": lambda v: v.lower() if isinstance(v, str) else v,
    "short_id": lambda v: v[:12] if isinstance(v, str) else v,
    "first": _first,
    "json": lambda v: json.dumps(v, default=str),
}


def resolve_columns(cols: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Replace transform names in a ``cols`` mapping with their functions.

    Non-string values (``true``, ``null``) select the column unchanged.
    """
    if cols is None:
        return None
    resolved = {}
    for column, spec in cols.items():
        if isinstance(spec, str):
            if spec not in COLUMN_TRANSFORMS:
                raise InvalidInvocation(
                    f"Unknown column transform '{spec}' for column '{column}'"
                )
            resolved[column] = COLUMN_TRANSFORMS[spec]
        else:
            resolved[column] = spec
    return resolved


def load_task_file(path: Union[str, Path, None] = None) -> TaskFile:
    """Read and validate a task file.

    Raises:
        InvalidInvocation: the file is missing, not JSON or not a valid task file
    """
    path = Path(path or settings.task_file)
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise InvalidInvocation(f"Task file not found: {path}")
    except json.JSONDecodeError as e:
        raise InvalidInvocation(f"Task file {path} is not valid JSON: {e}")

    if not isinstance(document, dict):
        raise InvalidInvocation(f"Task file {path} must contain a JSON object")
    try:
        task_file = TaskFile.from_document(document)
    except ValidationError as e:
        raise InvalidInvocation(f"Invalid task file {path}: {e}")

    logger.debug("Loaded task file", path=str(path), targets=len(task_file.targets))
    return task_file


def build_context(
    task: TaskDefinition,
    shared_options: Optional[Dict[str, Any]] = None,
    base_dir: Union[str, Path] = ".",
    stream: Optional[TextIO] = None,
) -> InvocationContext:
    """Turn a task definition into an invocation context.

    Target daemon options are merged over the shared ones. Build file
    patterns are resolved relative to the build context directory.
    """
    daemon_options = {**(shared_options or {}), **task.options}

    context_dir = None
    files: List[str] = []
    if task.context is not None:
        context_dir = str(Path(base_dir) / task.context)
        if task.src:
            files = collect_files(task.src, context_dir)

    params = {
        "image": task.image,
        "cmd": task.cmd,
        "auth": task.auth,
        "cols": resolve_columns(task.cols),
        "col_opts": task.col_opts,
        "context": context_dir,
        "create_options": task.create_options,
        "start_options": task.start_options,
    }
    return InvocationContext(
        command=task.command,
        target=task.identity(),
        options=task.opts,
        daemon_options=daemon_options,
        params=params,
        files=files,
        stream=stream,
    )


def context_for_target(
    task_file: TaskFile,
    name: str,
    base_dir: Union[str, Path] = ".",
    stream: Optional[TextIO] = None,
) -> InvocationContext:
    """Build the invocation context of a named target."""
    task = task_file.targets.get(name)
    if task is None:
        raise InvalidInvocation(f"Unknown target: {name}")
    return build_context(task, task_file.options, base_dir=base_dir, stream=stream)
