"""Generator settings shared by the compiler, emitter and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_INTERFACE_NAME = "Handlers"
DEFAULT_HANDLERS_OUTPUT = "handlers.py"
DEFAULT_MODELS_OUTPUT = "models.py"


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings for one generation run.

    ``package`` is the dotted package the generated modules live in; when
    unset the handlers module imports the models module as a top-level
    module.
    """

    interface_name: str = DEFAULT_INTERFACE_NAME
    package: str | None = None
    output_dir: Path = Path(".")
    handlers_output: str = DEFAULT_HANDLERS_OUTPUT
    models_output: str = DEFAULT_MODELS_OUTPUT
    qualify_nested_names: bool = True

    @property
    def models_module(self) -> str:
        """Import path of the generated models module."""
        stem = Path(self.models_output).stem
        return f"{self.package}.{stem}" if self.package else stem

    @property
    def handlers_path(self) -> Path:
        return Path(self.output_dir) / self.handlers_output

    @property
    def models_path(self) -> Path:
        return Path(self.output_dir) / self.models_output
