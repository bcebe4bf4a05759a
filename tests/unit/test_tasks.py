"""Unit tests for task files."""

import json

import pytest

from dockertask.models.errors import InvalidInvocation
from dockertask.models.tasks import TaskDefinition, TaskFile
from dockertask.services.tasks import (
    COLUMN_TRANSFORMS,
    build_context,
    context_for_target,
    load_task_file,
    resolve_columns,
)


@pytest.fixture
def task_path(tmp_path):
    document = {
        "options": {"base_url": "unix:///var/run/docker.sock", "timeout": 30},
        "pull-alpine": {"command": "pull", "repo_tag": "alpine:3.20"},
        "remote-ps": {
            "command": "ps",
            "options": {"base_url": "tcp://10.0.0.5:2375"},
            "cols": {"Id": "short_id", "Image": True},
        },
        "image": {
            "command": "build",
            "context": "app",
            "src": ["Dockerfile", "src/*.py"],
            "opts": {"t": "app:dev"},
        },
    }
    app = tmp_path / "app"
    (app / "src" / "pkg").mkdir(parents=True)
    (app / "Dockerfile").write_text("FROM python:3.12\n")
    (app / "src" / "main.py").write_text("print('hi')\n")
    (app / "src" / "util.py").write_text("\n")
    path = tmp_path / "dockertask.json"
    path.write_text(json.dumps(document))
    return path


class TestLoadTaskFile:
    """Test reading and validating task files."""

    def test_targets_parsed(self, task_path):
        task_file = load_task_file(task_path)
        assert set(task_file.targets) == {"pull-alpine", "remote-ps", "image"}
        assert task_file.options["timeout"] == 30
        assert task_file.targets["pull-alpine"].identity() == "alpine:3.20"

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidInvocation, match="not found"):
            load_task_file(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(InvalidInvocation, match="not valid JSON"):
            load_task_file(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]")
        with pytest.raises(InvalidInvocation, match="JSON object"):
            load_task_file(path)

    def test_unknown_field_rejected(self, tmp_path):
        path = tmp_path / "typo.json"
        path.write_text(json.dumps({"t": {"command": "pull", "repoTagg": "alpine"}}))
        with pytest.raises(InvalidInvocation, match="Invalid task file"):
            load_task_file(path)


class TestBuildContext:
    """Test turning targets into invocation contexts."""

    def test_daemon_options_merged(self, task_path):
        task_file = load_task_file(task_path)
        ctx = context_for_target(task_file, "remote-ps", base_dir=task_path.parent)
        assert ctx.daemon_options == {"base_url": "tcp://10.0.0.5:2375", "timeout": 30}

    def test_shared_options_used(self, task_path):
        task_file = load_task_file(task_path)
        ctx = context_for_target(task_file, "pull-alpine", base_dir=task_path.parent)
        assert ctx.command == "pull"
        assert ctx.target == "alpine:3.20"
        assert ctx.daemon_options["base_url"] == "unix:///var/run/docker.sock"

    def test_build_files_resolved(self, task_path):
        task_file = load_task_file(task_path)
        ctx = context_for_target(task_file, "image", base_dir=task_path.parent)
        assert ctx.files == ("Dockerfile", "src/main.py", "src/util.py")
        assert ctx.param("context") == str(task_path.parent / "app")
        assert ctx.options == {"t": "app:dev"}

    def test_columns_resolved(self, task_path):
        task_file = load_task_file(task_path)
        ctx = context_for_target(task_file, "remote-ps", base_dir=task_path.parent)
        cols = ctx.param("cols")
        assert cols["Id"] is COLUMN_TRANSFORMS["short_id"]
        assert cols["Image"] is True

    def test_unknown_target(self, task_path):
        task_file = load_task_file(task_path)
        with pytest.raises(InvalidInvocation, match="Unknown target"):
            context_for_target(task_file, "deploy")

    def test_context_without_build_fields(self):
        ctx = build_context(TaskDefinition(command="logs", id="web"))
        assert ctx.target == "web"
        assert ctx.files == ()
        assert ctx.param("context") is None


class TestColumnTransforms:
    """Test column transform resolution."""

    def test_named_transforms(self):
        resolved = resolve_columns({"Names": "first", "Image": "upper"})
        assert resolved["Names"](["/web", "/alias"]) == "/web"
        assert resolved["Image"]("nginx") == "NGINX"

    def test_short_id(self):
        assert COLUMN_TRANSFORMS["short_id"]("0123456789abcdef0123") == "0123456789ab"

    def test_unknown_transform(self):
        with pytest.raises(InvalidInvocation, match="reverse"):
            resolve_columns({"Names": "reverse"})

    def test_no_columns(self):
        assert resolve_columns(None) is None


class TestTaskFileModel:
    """Test the task file model."""

    def test_options_key_is_not_a_target(self):
        task_file = TaskFile.from_document({"options": {"version": "1.43"}})
        assert task_file.targets == {}
        assert task_file.options == {"version": "1.43"}

    def test_single_src_pattern(self):
        task = TaskDefinition(command="build", context=".", src="Dockerfile")
        assert task.src == ["Dockerfile"]
