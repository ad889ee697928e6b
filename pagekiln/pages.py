"""Page components and datasets for pagekiln.

The build engine only needs a callable that turns a record into HTML. This
module supplies those callables from outside the engine: by importing them
from a dotted reference, or by wrapping a Jinja2 template file. It also
loads datasets from YAML or JSON files.

Key pieces:
- load_page: Resolve ``"package.module:attribute"`` to a page callable.
- TemplatePage: Page callable rendering a Jinja2 template.
- load_dataset: Read a list of records from a data file.
"""

from __future__ import annotations

import importlib
import inspect
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import mistune
import yaml
from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape
from markupsafe import Markup

from .errors import InvalidCapability

_markdown = mistune.create_markdown(escape=False)


def markdown_filter(text: str) -> Markup:
    """Render Markdown to HTML for use inside templates.

    Args:
        text: Markdown source.

    Returns:
        Markup-safe HTML.
    """
    if not text:
        return Markup("")
    return Markup(_markdown(str(text)))


def load_page(reference: str) -> Any:
    """Resolve a page component from a dotted reference.

    Classes are instantiated without arguments; the resulting object must be
    callable.

    Args:
        reference: Reference of the form ``"package.module:attribute"``.

    Returns:
        The page callable.

    Raises:
        InvalidCapability: If the reference cannot be imported or the object
            is not callable.
    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise InvalidCapability(
            f"Page reference '{reference}' must look like 'package.module:name'."
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise InvalidCapability(
            f"Cannot import module '{module_name}': {exc}", exc
        ) from exc
    target: Any = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise InvalidCapability(
                f"Module '{module_name}' has no page named '{attribute}'.", exc
            ) from exc
    if inspect.isclass(target):
        try:
            target = target()
        except TypeError as exc:
            raise InvalidCapability(
                f"Page class '{reference}' cannot be created without arguments.",
                exc,
            ) from exc
    if not callable(target):
        raise InvalidCapability(f"Page '{reference}' is not callable.")
    return target


class TemplatePage:
    """Page component rendering a Jinja2 template.

    Mapping records are spread into the template context; the record itself
    is always available as ``data``.

    Attributes:
        template_name: Template file name relative to the search path.
        env: Jinja2 environment.
    """

    def __init__(
        self,
        template: Path | str,
        search_path: Path | None = None,
        context: Mapping[str, Any] | None = None,
    ):
        """Initialize the template page.

        Args:
            template: Template file, absolute or relative to search_path.
            search_path: Directory templates and includes are loaded from;
                defaults to the template's directory.
            context: Extra values available to every render.

        Raises:
            InvalidCapability: If the template does not exist.
        """
        template = Path(template)
        if search_path is None:
            search_path = template.parent
            template = Path(template.name)
        self.template_name = template.as_posix()
        self.env = Environment(
            loader=FileSystemLoader([str(search_path)]),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
        )
        self.env.filters["markdown"] = markdown_filter
        self.env.globals.update(context or {})
        try:
            self._template = self.env.get_template(self.template_name)
        except TemplateNotFound as exc:
            raise InvalidCapability(
                f"Template '{self.template_name}' not found in {search_path}.", exc
            ) from exc

    def __repr__(self) -> str:
        return f"TemplatePage({self.template_name!r})"

    def __call__(self, data: Any) -> str:
        context = dict(data) if isinstance(data, Mapping) else {}
        context["data"] = data
        return self._template.render(context)


def load_dataset(path: Path) -> list[Any]:
    """Load records from a YAML or JSON data file.

    Args:
        path: Data file. A list yields one record per item; a single
            mapping yields one record.

    Returns:
        List of records.

    Raises:
        ValueError: If the file holds neither a list nor a mapping.
    """
    with open(path, encoding="utf-8") as f:
        payload = yaml.safe_load(f)
    if payload is None:
        return []
    if isinstance(payload, dict):
        return [payload]
    if isinstance(payload, list):
        return payload
    raise ValueError(
        f"{path}: expected a list of records or a mapping, "
        f"got {type(payload).__name__}"
    )
