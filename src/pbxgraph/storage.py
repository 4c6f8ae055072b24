# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Object storage for a project graph.

Components:
- ObjectsView: Read-only mapping over the objects of one kind
- ObjectStore: The flat identifier -> object table with per-kind indices
- PBXProj: An ObjectStore plus the file header (versions, root object)

Limitations:
- NOT thread-safe: Designed for single-threaded use only. Hosts that share a
  store across threads must hold one lock around every query, mutation and write.
"""

import logging
from pathlib import Path
from typing import (
    TYPE_CHECKING,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from pbxgraph.errors import DanglingReferenceError, DuplicateReferenceError
from pbxgraph.identifiers import ReferenceGenerator
from pbxgraph.models import (
    OBJECT_TYPES,
    PBXBuildFile,
    PBXCopyFilesBuildPhase,
    PBXFileReference,
    PBXFrameworksBuildPhase,
    PBXGroup,
    PBXHeadersBuildPhase,
    PBXObject,
    PBXResourcesBuildPhase,
    PBXShellScriptBuildPhase,
    PBXSourcesBuildPhase,
    PBXVariantGroup,
    PlistValue,
    XCVersionGroup,
    isa_of,
)

if TYPE_CHECKING:
    from pbxgraph.config import Config
    from pbxgraph.resolver import ReferenceResolver

logger = logging.getLogger(__name__)

ObjectT = TypeVar("ObjectT", bound=PBXObject)

# An object kind given either as a model class or as an isa string
ObjectKind = Union[Type[PBXObject], str]


def kind_name(kind: ObjectKind) -> str:
    """Return the isa name for a model class or isa string."""
    if isinstance(kind, str):
        return kind
    if not kind.isa:
        raise ValueError(f"{kind.__name__} is not a concrete object kind")
    return kind.isa


class ObjectsView(Mapping[str, ObjectT]):
    """Read-only live view of the objects of one kind.

    Backed by the store's per-kind index, so membership and iteration never
    scan the whole store. The index is looked up on every access, so a view
    taken before any object of its kind exists still sees later inserts.
    """

    def __init__(self, indices: Dict[str, Dict[str, ObjectT]], isa: str) -> None:
        self._indices = indices
        self._isa = isa

    @property
    def _index(self) -> Dict[str, ObjectT]:
        return self._indices.get(self._isa, {})

    def __getitem__(self, reference: str) -> ObjectT:
        return self._index[reference]

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def contains(self, reference: str) -> bool:
        return reference in self._index

    def objects(self) -> List[ObjectT]:
        """Objects of this kind in insertion order."""
        return list(self._index.values())


class ObjectStore:
    """Flat table of project objects addressed by identifier.

    Features:
    - O(1) lookup by identifier and O(1) membership per kind
    - Identifiers are unique across all kinds
    - Insertion order is kept for iteration

    Data Structure:
    - _objects: identifier -> object, for every object
    - _by_isa: isa -> (identifier -> object), filled at insertion time

    Both tables are updated together in add() and remove(), after all
    validation has passed, so no caller sees one without the other.
    """

    def __init__(self, scrub_on_remove: bool = True) -> None:
        self._objects: Dict[str, PBXObject] = {}
        self._by_isa: Dict[str, Dict[str, PBXObject]] = {}
        self._scrub_on_remove = scrub_on_remove
        self._generator = ReferenceGenerator()

    @classmethod
    def from_config(cls, config: "Config") -> "ObjectStore":
        return cls(scrub_on_remove=config.scrub_references_on_remove)

    # Lookup

    def get(self, reference: str) -> Optional[PBXObject]:
        """Return the object for ``reference``, or None if absent."""
        return self._objects.get(reference)

    def contains(self, reference: str) -> bool:
        return reference in self._objects

    def __contains__(self, reference: object) -> bool:
        return reference in self._objects

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[PBXObject]:
        return iter(list(self._objects.values()))

    def references(self) -> List[str]:
        """All identifiers, in insertion order."""
        return list(self._objects)

    def isa_names(self) -> List[str]:
        """Kinds currently present in the store."""
        return [isa for isa, index in self._by_isa.items() if index]

    def objects_of(self, kind: ObjectKind) -> ObjectsView:
        """Return a live read-only view of every object of ``kind``.

        Args:
            kind: Model class (e.g. PBXFileReference) or isa string
                  (e.g. "PBXNativeTarget" for generic objects).
        """
        return ObjectsView(self._by_isa, kind_name(kind))

    @property
    def file_references(self) -> ObjectsView[PBXFileReference]:
        return self.objects_of(PBXFileReference)

    @property
    def groups(self) -> ObjectsView[PBXGroup]:
        return self.objects_of(PBXGroup)

    @property
    def variant_groups(self) -> ObjectsView[PBXVariantGroup]:
        return self.objects_of(PBXVariantGroup)

    @property
    def version_groups(self) -> ObjectsView[XCVersionGroup]:
        return self.objects_of(XCVersionGroup)

    @property
    def build_files(self) -> ObjectsView[PBXBuildFile]:
        return self.objects_of(PBXBuildFile)

    @property
    def sources_build_phases(self) -> ObjectsView[PBXSourcesBuildPhase]:
        return self.objects_of(PBXSourcesBuildPhase)

    @property
    def frameworks_build_phases(self) -> ObjectsView[PBXFrameworksBuildPhase]:
        return self.objects_of(PBXFrameworksBuildPhase)

    @property
    def resources_build_phases(self) -> ObjectsView[PBXResourcesBuildPhase]:
        return self.objects_of(PBXResourcesBuildPhase)

    @property
    def copy_files_build_phases(self) -> ObjectsView[PBXCopyFilesBuildPhase]:
        return self.objects_of(PBXCopyFilesBuildPhase)

    @property
    def headers_build_phases(self) -> ObjectsView[PBXHeadersBuildPhase]:
        return self.objects_of(PBXHeadersBuildPhase)

    @property
    def shell_script_build_phases(self) -> ObjectsView[PBXShellScriptBuildPhase]:
        return self.objects_of(PBXShellScriptBuildPhase)

    # Mutation

    def add(self, obj: PBXObject) -> PBXObject:
        """Insert an object.

        Args:
            obj: Object to insert. Its references need not resolve yet, so a
                 decoder may insert in file order; use check_integrity() after.

        Returns:
            The inserted object.

        Raises:
            DuplicateReferenceError: If the identifier is used by any object,
                whatever its kind.
            ValueError: If the identifier is empty, or if the object's isa is a
                modeled kind but the object is not an instance of that model.
        """
        if not obj.reference:
            raise ValueError("Object identifier cannot be empty")
        isa = isa_of(obj)
        model = OBJECT_TYPES.get(isa)
        if model is not None and not isinstance(obj, model):
            raise ValueError(
                f"Object {obj.reference} has isa {isa} but is a {type(obj).__name__}, "
                f"not a {model.__name__}"
            )
        existing = self._objects.get(obj.reference)
        if existing is not None:
            raise DuplicateReferenceError(obj.reference, isa_of(existing))

        self._objects[obj.reference] = obj
        self._by_isa.setdefault(isa, {})[obj.reference] = obj
        logger.debug(f"Added {isa} {obj.reference}")
        return obj

    def remove(self, reference: str) -> Optional[PBXObject]:
        """Remove an object and, if enabled, scrub it from every ordered list.

        Scrubbing covers group children, version group members, build phase
        files and the list fields of generic objects (target buildPhases,
        project targets, ...). Single-valued references such as a build
        file's fileRef are left for check_integrity() to report.

        Returns:
            The removed object, or None if no object had that identifier.
        """
        obj = self._objects.get(reference)
        if obj is None:
            return None

        del self._objects[reference]
        del self._by_isa[isa_of(obj)][reference]

        if self._scrub_on_remove:
            scrubbed = sum(1 for other in self._objects.values() if other.scrub_reference(reference))
            if scrubbed:
                logger.debug(f"Scrubbed {reference} from {scrubbed} object(s)")
        logger.debug(f"Removed {isa_of(obj)} {reference}")
        return obj

    def clear(self) -> None:
        """Remove every object."""
        self._objects.clear()
        self._by_isa.clear()

    # Identifiers and integrity

    def generate_reference(self, kind: ObjectKind) -> str:
        """Return a new identifier for ``kind`` that no object currently uses."""
        return self._generator.generate(kind_name(kind), self._objects)

    def dangling_references(self) -> List[Tuple[str, str]]:
        """List cross-references between objects that point at nothing.

        Returns:
            (owner identifier, missing identifier) pairs in store order.
        """
        dangling = []
        for obj in self._objects.values():
            for _field_name, target in obj.referenced_ids():
                if target not in self._objects:
                    dangling.append((obj.reference, target))
        return dangling

    def check_integrity(self) -> None:
        """Raise DanglingReferenceError if any cross-reference is unresolved."""
        dangling = self.dangling_references()
        if dangling:
            raise DanglingReferenceError(dangling)


class PBXProj:
    """A whole project file: the object store plus the root table fields."""

    def __init__(
        self,
        objects: Optional[ObjectStore] = None,
        root_object: Optional[str] = None,
        archive_version: str = "1",
        object_version: str = "46",
        classes: Optional[Dict[str, PlistValue]] = None,
        name: Optional[str] = None,
    ) -> None:
        self.objects = objects if objects is not None else ObjectStore()
        self.root_object = root_object
        self.archive_version = archive_version
        self.object_version = object_version
        self.classes: Dict[str, PlistValue] = classes if classes is not None else {}
        self.name = name

    def dangling_references(self) -> List[Tuple[str, str]]:
        """Store-level dangling references, plus ("rootObject", id) if the root is missing."""
        dangling = self.objects.dangling_references()
        if self.root_object is not None and self.root_object not in self.objects:
            dangling.append(("rootObject", self.root_object))
        return dangling

    def check_integrity(self) -> None:
        """Raise DanglingReferenceError if any reference, the root included, is unresolved."""
        dangling = self.dangling_references()
        if dangling:
            raise DanglingReferenceError(dangling)

    @property
    def resolver(self) -> "ReferenceResolver":
        from pbxgraph.resolver import ReferenceResolver

        return ReferenceResolver(self.objects, project_name=self.name)

    def write(self, path: Union[str, Path], overwrite: bool = False) -> None:
        """Encode and write the project to ``path``. See pbxgraph.writer.write."""
        from pbxgraph.writer import write

        write(self, path, overwrite=overwrite)
