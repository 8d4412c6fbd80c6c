"""
Named-template renderer.

Templates are callables producing source text from one value. They are
registered by name so that the top-level `module` template and the type
mapper can compose the `struct`, `enum` and `encoder` sub-templates without
knowing which generator provides them. Formatters turn one value into text;
predicates answer yes/no questions about a value.

For ink! to Solidity rendering the `type`, `encode` and `mapped` callbacks
reach the type registry through a SharedRegistry, borrowing it only for the
duration of the callback.
"""

from functools import partial
from typing import Any, Callable, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .diagnostics import BridgeDiagnostics

from ..errors import TemplateError
from ..metadata import InkProject
from ..type_system import EvmTypeMapper, MAPPED_TYPE_SLOTS, SharedRegistry
from . import formatters


Template = Callable[[Any], str]
Formatter = Callable[..., str]
Predicate = Callable[[Any], bool]


class Renderer:
    """
    Registry of templates, formatters and predicates.

    Usage:
        renderer = Renderer()
        renderer.add_template('module', generator.generate)
        source = renderer.render('module', module)
    """

    def __init__(self):
        self._templates: Dict[str, Template] = {}
        self._formatters: Dict[str, Formatter] = {}
        self._predicates: Dict[str, Predicate] = {}

    def add_template(self, name: str, template: Template) -> None:
        self._templates[name] = template

    def add_formatter(self, name: str, formatter: Formatter) -> None:
        self._formatters[name] = formatter

    def add_predicate(self, name: str, predicate: Predicate) -> None:
        self._predicates[name] = predicate

    def render(self, name: str, value: Any) -> str:
        """Expand the named template against value."""
        template = self._templates.get(name)
        if template is None:
            raise TemplateError(f"template '{name}' is not registered")
        return template(value)

    def format(self, name: str, value: Any, *args: Any) -> str:
        """Apply the named formatter to value."""
        formatter = self._formatters.get(name)
        if formatter is None:
            raise TemplateError(f"formatter '{name}' is not registered")
        return formatter(value, *args)

    def test(self, name: str, value: Any) -> bool:
        """Evaluate the named predicate on value."""
        predicate = self._predicates.get(name)
        if predicate is None:
            raise TemplateError(f"predicate '{name}' is not registered")
        return predicate(value)

    # =========================================================================
    # DEFAULT SETS
    # =========================================================================

    def add_default_formatters(self, path_separator: str) -> None:
        """Register the case, path and debug formatters."""
        self.add_formatter('snake', formatters.snake)
        self.add_formatter('upper_snake', formatters.upper_snake)
        self.add_formatter('upper_camel', formatters.upper_camel)
        self.add_formatter('capitalize', formatters.capitalize)
        self.add_formatter('path', partial(formatters.path, separator=path_separator))
        self.add_formatter('debug', formatters.debug)

    def add_type_callbacks(
        self,
        project: InkProject,
        shared: SharedRegistry,
        diagnostics: Optional['BridgeDiagnostics'] = None,
    ) -> EvmTypeMapper:
        """
        Register the registry-backed `type`, `encode` and `mapped` callbacks.

        Args:
            project: The ink! project whose type ids templates refer to
            shared: Handle on the registry the callbacks fill
            diagnostics: Optional collector for mapper warnings

        Returns:
            The mapper the callbacks translate types with
        """
        mapper = EvmTypeMapper(project.registry, self, diagnostics)
        self.add_formatter('type', TypeFormatter(project, shared, mapper))
        self.add_formatter('encode', EncodeFormatter(project, shared, mapper))
        self.add_predicate('mapped', MappedPredicate(shared))
        return mapper


# =============================================================================
# REGISTRY CALLBACKS
# =============================================================================

def _expect_type_id(project: InkProject, value: Any, callback: str) -> int:
    # bool is an int subclass but never a type id
    if isinstance(value, bool) or not isinstance(value, int):
        raise TemplateError(f"'{callback}': invalid type id {value!r}")
    if value not in project.registry:
        raise TemplateError(f"'{callback}': unknown type id {value}")
    return value


class TypeFormatter:
    """`type(id, slot)`: the requested slot of the mapped type for id."""

    def __init__(self, project: InkProject, shared: SharedRegistry, mapper: EvmTypeMapper):
        self._project = project
        self._shared = shared
        self._mapper = mapper

    def __call__(self, value: Any, slot: Optional[str] = None) -> str:
        type_id = _expect_type_id(self._project, value, 'type')
        if slot is None:
            raise TemplateError('type formatter must come with an argument')
        if slot not in MAPPED_TYPE_SLOTS:
            raise TemplateError(
                f"type formatter: unknown slot '{slot}', expected one of {', '.join(MAPPED_TYPE_SLOTS)}"
            )

        with self._shared.borrow() as registry:
            mapped = self._mapper.map_type(registry, type_id)
        return mapped.slot(slot)


class EncodeFormatter:
    """`encode(id, expr)`: an expression SCALE-encoding expr of type id."""

    def __init__(self, project: InkProject, shared: SharedRegistry, mapper: EvmTypeMapper):
        self._project = project
        self._shared = shared
        self._mapper = mapper

    def __call__(self, value: Any, expr: Optional[str] = None) -> str:
        type_id = _expect_type_id(self._project, value, 'encode')
        if not expr:
            raise TemplateError('encode formatter must come with an argument')

        with self._shared.borrow() as registry:
            return self._mapper.encode_call(registry, type_id, expr)


class MappedPredicate:
    """`mapped(id)`: whether id is in the registry already."""

    def __init__(self, shared: SharedRegistry):
        self._shared = shared

    def __call__(self, value: Any) -> bool:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TemplateError(f"'mapped': invalid type id {value!r}")
        with self._shared.borrow() as registry:
            return registry.has_mapping(value)
