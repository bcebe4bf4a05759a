"""Task file models."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskDefinition(BaseModel):
    """One named target in a task file."""

    model_config = ConfigDict(extra="forbid")

    command: Optional[str] = Field(None, description="Docker command to run")

    # Identity fields; which one a command reads depends on the command
    id: Optional[str] = Field(None, description="Container id or name")
    image: Optional[str] = Field(None, description="Image used by run")
    repo_tag: Optional[str] = Field(None, description="Image reference to pull")
    name: Optional[str] = Field(None, description="Image name for push and tag")

    opts: Dict[str, Any] = Field(
        default_factory=dict, description="Keyword arguments for the daemon call"
    )
    options: Dict[str, Any] = Field(
        default_factory=dict,
        description="Daemon client options, merged over the file-level options",
    )
    cmd: Optional[Union[str, List[str]]] = Field(None, description="Command for run and exec")
    auth: Optional[Dict[str, Any]] = Field(None, description="Registry auth config for push")
    cols: Optional[Dict[str, Any]] = Field(None, description="ps column selection")
    col_opts: Dict[str, Any] = Field(default_factory=dict, description="ps table options")
    context: Optional[str] = Field(None, description="Build context directory")
    src: List[str] = Field(default_factory=list, description="Build file patterns")
    create_options: Dict[str, Any] = Field(default_factory=dict)
    start_options: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("src", mode="before")
    @classmethod
    def _single_pattern(cls, v):
        """Allow a single pattern string in place of a list."""
        if isinstance(v, str):
            return [v]
        return v

    def identity(self) -> Optional[str]:
        """The target identity the command acts on."""
        return self.id or self.repo_tag or self.name or self.image


class TaskFile(BaseModel):
    """A parsed task file: shared daemon options plus named targets."""

    options: Dict[str, Any] = Field(default_factory=dict)
    targets: Dict[str, TaskDefinition] = Field(default_factory=dict)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "TaskFile":
        """Build from the raw JSON document; every key but ``options`` is a target."""
        targets = {name: body for name, body in document.items() if name != "options"}
        return cls(options=document.get("options") or {}, targets=targets)
