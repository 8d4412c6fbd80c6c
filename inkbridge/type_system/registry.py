"""
Registry of translated types.

The TypeRegistry maps ink! type ids to MappedType values produced by the
I->E mapper. It is filled on demand while the Solidity output is rendered
and is the only mutable state of a rendering run.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from ..errors import TemplateError


# Slots a template may ask for through the `type` formatter
MAPPED_TYPE_SLOTS = ('reference', 'definition', 'modifier', 'encoder')


@dataclass(frozen=True)
class MappedType:
    """
    A translated type.

    Attributes:
        reference: How the type is written where a type name is expected
        definition: Source declaring the type (struct, enum), if it needs one
        modifier: Data location to write after the reference (``memory``)
        encoder: Source of a function serialising the type to SCALE bytes
    """
    reference: str
    definition: Optional[str] = None
    modifier: Optional[str] = None
    encoder: Optional[str] = None

    def __post_init__(self):
        if not self.reference:
            raise ValueError('MappedType.reference must not be empty')

    @property
    def type_name(self) -> str:
        """The reference without an inline data location."""
        return self.reference.split(' ', 1)[0]

    def slot(self, name: str) -> str:
        """Return a slot by name, absent slots rendering as an empty string."""
        if name not in MAPPED_TYPE_SLOTS:
            raise KeyError(name)
        return getattr(self, name) or ''


class TypeRegistry:
    """
    Mapping from ink! type id to MappedType.

    Entries are kept in insertion order, which is leaves-first because the
    mapper inserts a type only after all the types it refers to.
    """

    def __init__(self):
        self._mapping: Dict[int, MappedType] = {}

    def lookup(self, type_id: int) -> Optional[MappedType]:
        """Return the mapped type for type_id, if already translated."""
        return self._mapping.get(type_id)

    def has_mapping(self, type_id: int) -> bool:
        """Check whether type_id has been translated."""
        return type_id in self._mapping

    def lookup_or_insert(
        self,
        type_id: int,
        make_type: Callable[[int], MappedType],
    ) -> MappedType:
        """
        Return the mapped type for type_id, translating it first if needed.

        The call is atomic: if make_type raises, every entry it added while
        recursing is removed again before the error propagates.

        Args:
            type_id: The ink! type id
            make_type: Translates a type id; may recurse into this registry

        Returns:
            The registered MappedType
        """
        existing = self._mapping.get(type_id)
        if existing is not None:
            return existing

        known = set(self._mapping)
        try:
            mapped = make_type(type_id)
        except Exception:
            for added in [key for key in self._mapping if key not in known]:
                del self._mapping[added]
            raise

        self._mapping[type_id] = mapped
        return mapped

    def ids(self) -> List[int]:
        """Type ids in insertion order."""
        return list(self._mapping)

    def items(self) -> Iterator[Tuple[int, MappedType]]:
        """(id, mapped type) pairs in insertion order."""
        return iter(list(self._mapping.items()))

    def __contains__(self, type_id: int) -> bool:
        return type_id in self._mapping

    def __len__(self) -> int:
        return len(self._mapping)


class SharedRegistry:
    """
    Handle giving template callbacks exclusive access to one TypeRegistry.

    A callback borrows the registry for the duration of its own work and
    must release it before invoking any further template logic; a nested
    borrow is reported as a TemplateError.
    """

    def __init__(self, registry: Optional[TypeRegistry] = None):
        self._registry = registry if registry is not None else TypeRegistry()
        self._borrowed = False

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    @contextmanager
    def borrow(self) -> Iterator[TypeRegistry]:
        """Borrow the registry exclusively."""
        if self._borrowed:
            raise TemplateError('type registry is already borrowed by another template callback')
        self._borrowed = True
        try:
            yield self._registry
        finally:
            self._borrowed = False
