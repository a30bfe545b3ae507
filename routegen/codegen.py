"""Render templates and write generated output.

Takes a Compilation, builds the template context and produces the models
and handlers modules. Rendering is a pure function of the context; files
are only written once both modules rendered successfully.
"""

from __future__ import annotations

import keyword
import logging
from pathlib import Path
from typing import Any

import jinja2

from .config import GeneratorConfig
from .context_builder import Compilation, build_context
from .model import ARRAY, OBJECT, SCALAR, UNION
from .naming import camel_to_snake

logger = logging.getLogger(__name__)

# Representation -> isinstance-style check on a decoded JSON value
_VALUE_CHECKS: dict[str, str] = {
    "string": "isinstance(value, str)",
    "bool": "isinstance(value, bool)",
    "int": "_is_integer(value)",
    "int32": "_is_integer(value)",
    "int64": "_is_integer(value)",
    "float": "_is_number(value)",
    "float32": "_is_number(value)",
    "float64": "_is_number(value)",
    "null": "value is None",
}

# Representation -> Python annotation
_PYTHON_TYPES: dict[str, str] = {
    "string": "str",
    "bool": "bool",
    "int": "int",
    "int32": "int",
    "int64": "int",
    "float": "float",
    "float32": "float",
    "float64": "float",
    "null": "None",
}

# Attribute names the generated dataclasses define themselves
_RESERVED_ATTRIBUTES = {"validate", "check", "to_dict", "from_dict", "dataclasses"}

# Module-level names of the generated modules a type must not shadow
_RESERVED_TYPE_NAMES = {"Any", "Union", "Protocol", "ValidationError", "ROUTES"}


def python_identifier(name: str) -> str:
    """Make a name usable as a Python identifier."""
    if name and name[0].isdigit():
        name = "_" + name
    if keyword.iskeyword(name) or name in _RESERVED_ATTRIBUTES:
        name += "_"
    return name


def type_identifier(name: str) -> str:
    """Class/alias name for a type; digits cannot start an identifier."""
    if name and name[0].isdigit():
        name = "T" + name
    if name in _RESERVED_TYPE_NAMES:
        name += "_"
    return python_identifier(name)


def snake_identifier(name: str) -> str:
    return python_identifier(camel_to_snake(name))


def docstring(text: str) -> str:
    """Escape text for use inside a triple-quoted docstring."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.PackageLoader("routegen", "templates"),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters["ident"] = python_identifier
    env.filters["type_ident"] = type_identifier
    env.filters["snake"] = snake_identifier
    env.filters["pyrepr"] = repr
    env.filters["docstring"] = docstring
    env.filters["python_type"] = lambda representation: _PYTHON_TYPES[representation]
    env.filters["value_check"] = lambda representation: _VALUE_CHECKS[representation]
    env.globals.update(SCALAR=SCALAR, OBJECT=OBJECT, ARRAY=ARRAY, UNION=UNION)
    return env


def render_models(context: dict[str, Any]) -> str:
    """Render the models module source."""
    return _environment().get_template("models.py.j2").render(**context)


def render_handlers(context: dict[str, Any]) -> str:
    """Render the handlers module source."""
    return _environment().get_template("handlers.py.j2").render(**context)


def generate(compilation: Compilation, config: GeneratorConfig | None = None) -> list[Path]:
    """Render both modules and write them into ``config.output_dir``."""
    config = config or GeneratorConfig()
    context = build_context(compilation, config)
    rendered = {
        config.models_path: render_models(context),
        config.handlers_path: render_handlers(context),
    }

    Path(config.output_dir).mkdir(parents=True, exist_ok=True)
    for output_path, source in rendered.items():
        output_path.write_text(source, encoding="utf-8")
        logger.info("wrote %s", output_path)

    return list(rendered)
