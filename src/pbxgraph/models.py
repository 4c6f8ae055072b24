# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Object models for the entries of a project file's ``objects`` table.

The on-disk format is a flat table keyed by identifier, so objects never hold
each other directly. Every cross-reference is an identifier string that is
resolved through the ObjectStore:
- PBXFileReference: a file on disk
- PBXGroup / PBXVariantGroup / XCVersionGroup: ordered containers of references
- PBXBuildFile: binds one file reference or variant group into a build phase
- Build phases: Sources, Frameworks, Resources, CopyFiles, Headers, ShellScript
- PBXGenericObject: any other isa, kept as a raw field table

Each class names the fields the graph logic needs and keeps every other key in
``extra_fields`` so that decoding then encoding loses nothing.

Design: plist scalars stay strings, except the two integer flags every build
phase carries (buildActionMask, runOnlyForDeploymentPostprocessing).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type

from pbxgraph.identifiers import is_valid_reference

logger = logging.getLogger(__name__)

# Plist value: str, list of values, or dict of str -> value
PlistValue = Any

DEFAULT_BUILD_ACTION_MASK = 2147483647

# Fields naming objects that may live in another project file
EXTERNAL_REFERENCE_KEYS = frozenset({"remoteGlobalIDString"})


class SourceTree:
    """Values of the sourceTree field.

    Design: Using class constants (not Enum) because sourceTree is free text in
    the file format and unknown values must survive a round-trip.
    """

    GROUP = "<group>"  # relative to the enclosing group
    ABSOLUTE = "<absolute>"
    SOURCE_ROOT = "SOURCE_ROOT"  # relative to the project directory
    BUILT_PRODUCTS_DIR = "BUILT_PRODUCTS_DIR"
    DEVELOPER_DIR = "DEVELOPER_DIR"
    SDKROOT = "SDKROOT"


class BuildPhaseKind(Enum):
    """The closed set of build phase kinds."""

    SOURCES = "sources"
    FRAMEWORKS = "frameworks"
    RESOURCES = "resources"
    COPY_FILES = "copy_files"
    HEADERS = "headers"
    RUN_SCRIPT = "run_script"


def last_path_component(path: str) -> str:
    """Return the final component of a slash-separated path.

    Trailing slashes are ignored, so ``"Sources/App/"`` gives ``"App"``.
    """
    return PurePosixPath(path).name


def _pop_str(data: Dict[str, PlistValue], key: str) -> Optional[str]:
    value = data.pop(key, None)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"Field '{key}' must be a string, got {type(value).__name__}")
    return value


def _pop_str_or(data: Dict[str, PlistValue], key: str, default: str) -> str:
    # Only an absent key falls back; an empty string is a value
    value = _pop_str(data, key)
    return default if value is None else value


def _pop_list(data: Dict[str, PlistValue], key: str) -> List[str]:
    value = data.pop(key, None)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"Field '{key}' must be a list, got {type(value).__name__}")
    return list(value)


def _pop_int(data: Dict[str, PlistValue], key: str, default: int) -> int:
    value = data.pop(key, None)
    if value is None:
        return default
    return int(value)


def _put(result: Dict[str, PlistValue], key: str, value: Optional[PlistValue]) -> None:
    if value is not None:
        result[key] = value


@dataclass
class PBXObject:
    """Base class for every entry of the objects table.

    Subclasses declare ``isa`` as a class attribute, so an object's kind is
    fixed by its class and cannot change after construction.
    """

    isa: ClassVar[str] = ""

    reference: str

    def to_dict(self) -> Dict[str, PlistValue]:
        """Serialize to a plist field table, ``isa`` included."""
        raise NotImplementedError

    @classmethod
    def from_dict(cls, reference: str, data: Dict[str, PlistValue]) -> "PBXObject":
        """Build an object from its plist field table (``isa`` may be present)."""
        raise NotImplementedError

    def referenced_ids(self) -> List[Tuple[str, str]]:
        """Return (field name, identifier) pairs this object points at."""
        return []

    def scrub_reference(self, reference: str) -> bool:
        """Drop ``reference`` from this object's ordered lists.

        Returns:
            True if anything was removed.
        """
        return False


@dataclass
class PBXFileReference(PBXObject):
    """A file on disk, located by path relative to its source tree."""

    isa: ClassVar[str] = "PBXFileReference"

    source_tree: str = SourceTree.GROUP
    path: Optional[str] = None
    name: Optional[str] = None
    file_encoding: Optional[str] = None
    explicit_file_type: Optional[str] = None
    last_known_file_type: Optional[str] = None
    include_in_index: Optional[str] = None
    extra_fields: Dict[str, PlistValue] = field(default_factory=dict)

    @property
    def display_name(self) -> Optional[str]:
        """Last path component if a path is set, else the explicit name."""
        if self.path is not None:
            return last_path_component(self.path)
        return self.name

    def to_dict(self) -> Dict[str, PlistValue]:
        result: Dict[str, PlistValue] = {"isa": self.isa, "sourceTree": self.source_tree}
        _put(result, "path", self.path)
        _put(result, "name", self.name)
        _put(result, "fileEncoding", self.file_encoding)
        _put(result, "explicitFileType", self.explicit_file_type)
        _put(result, "lastKnownFileType", self.last_known_file_type)
        _put(result, "includeInIndex", self.include_in_index)
        result.update(self.extra_fields)
        return result

    @classmethod
    def from_dict(cls, reference: str, data: Dict[str, PlistValue]) -> "PBXFileReference":
        data = dict(data)
        data.pop("isa", None)
        return cls(
            reference=reference,
            source_tree=_pop_str_or(data, "sourceTree", SourceTree.GROUP),
            path=_pop_str(data, "path"),
            name=_pop_str(data, "name"),
            file_encoding=_pop_str(data, "fileEncoding"),
            explicit_file_type=_pop_str(data, "explicitFileType"),
            last_known_file_type=_pop_str(data, "lastKnownFileType"),
            include_in_index=_pop_str(data, "includeInIndex"),
            extra_fields=data,
        )


@dataclass
class PBXGroup(PBXObject):
    """An ordered folder of file references and nested groups."""

    isa: ClassVar[str] = "PBXGroup"

    children: List[str] = field(default_factory=list)
    name: Optional[str] = None
    path: Optional[str] = None
    source_tree: str = SourceTree.GROUP
    extra_fields: Dict[str, PlistValue] = field(default_factory=dict)

    @property
    def display_name(self) -> Optional[str]:
        return self.name if self.name is not None else self.path

    def to_dict(self) -> Dict[str, PlistValue]:
        result: Dict[str, PlistValue] = {
            "isa": self.isa,
            "children": list(self.children),
            "sourceTree": self.source_tree,
        }
        _put(result, "name", self.name)
        _put(result, "path", self.path)
        result.update(self.extra_fields)
        return result

    @classmethod
    def from_dict(cls, reference: str, data: Dict[str, PlistValue]) -> "PBXGroup":
        data = dict(data)
        data.pop("isa", None)
        return cls(
            reference=reference,
            children=_pop_list(data, "children"),
            name=_pop_str(data, "name"),
            path=_pop_str(data, "path"),
            source_tree=_pop_str_or(data, "sourceTree", SourceTree.GROUP),
            extra_fields=data,
        )

    def referenced_ids(self) -> List[Tuple[str, str]]:
        return [("children", child) for child in self.children]

    def scrub_reference(self, reference: str) -> bool:
        before = len(self.children)
        self.children = [child for child in self.children if child != reference]
        return len(self.children) != before


@dataclass
class PBXVariantGroup(PBXGroup):
    """Localized variants of one resource, shown under a single name.

    The display name is the group's own ``name``; member paths never feed it.
    """

    isa: ClassVar[str] = "PBXVariantGroup"

    @property
    def display_name(self) -> Optional[str]:
        return self.name


@dataclass
class XCVersionGroup(PBXObject):
    """A versioned resource (e.g. a Core Data model) with one current member."""

    isa: ClassVar[str] = "XCVersionGroup"

    current_version: Optional[str] = None
    path: Optional[str] = None
    name: Optional[str] = None
    source_tree: str = SourceTree.GROUP
    version_group_type: Optional[str] = None
    children: List[str] = field(default_factory=list)
    extra_fields: Dict[str, PlistValue] = field(default_factory=dict)

    @property
    def display_name(self) -> Optional[str]:
        if self.name is not None:
            return self.name
        if self.path is not None:
            return last_path_component(self.path)
        return None

    def to_dict(self) -> Dict[str, PlistValue]:
        result: Dict[str, PlistValue] = {
            "isa": self.isa,
            "children": list(self.children),
            "sourceTree": self.source_tree,
        }
        _put(result, "currentVersion", self.current_version)
        _put(result, "path", self.path)
        _put(result, "name", self.name)
        _put(result, "versionGroupType", self.version_group_type)
        result.update(self.extra_fields)
        return result

    @classmethod
    def from_dict(cls, reference: str, data: Dict[str, PlistValue]) -> "XCVersionGroup":
        data = dict(data)
        data.pop("isa", None)
        return cls(
            reference=reference,
            current_version=_pop_str(data, "currentVersion"),
            path=_pop_str(data, "path"),
            name=_pop_str(data, "name"),
            source_tree=_pop_str_or(data, "sourceTree", SourceTree.GROUP),
            version_group_type=_pop_str(data, "versionGroupType"),
            children=_pop_list(data, "children"),
            extra_fields=data,
        )

    def referenced_ids(self) -> List[Tuple[str, str]]:
        refs = [("children", child) for child in self.children]
        if self.current_version is not None:
            refs.append(("currentVersion", self.current_version))
        return refs

    def scrub_reference(self, reference: str) -> bool:
        before = len(self.children)
        self.children = [child for child in self.children if child != reference]
        changed = len(self.children) != before
        if self.current_version == reference:
            self.current_version = None
            changed = True
        return changed


@dataclass
class PBXBuildFile(PBXObject):
    """Entry of a build phase; its subject is ``file_ref``."""

    isa: ClassVar[str] = "PBXBuildFile"

    file_ref: Optional[str] = None
    settings: Optional[Dict[str, PlistValue]] = None
    extra_fields: Dict[str, PlistValue] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, PlistValue]:
        result: Dict[str, PlistValue] = {"isa": self.isa}
        _put(result, "fileRef", self.file_ref)
        _put(result, "settings", self.settings)
        result.update(self.extra_fields)
        return result

    @classmethod
    def from_dict(cls, reference: str, data: Dict[str, PlistValue]) -> "PBXBuildFile":
        data = dict(data)
        data.pop("isa", None)
        settings = data.pop("settings", None)
        if settings is not None and not isinstance(settings, dict):
            raise ValueError("Field 'settings' must be a dictionary")
        return cls(
            reference=reference,
            file_ref=_pop_str(data, "fileRef"),
            settings=settings,
            extra_fields=data,
        )

    def referenced_ids(self) -> List[Tuple[str, str]]:
        return [("fileRef", self.file_ref)] if self.file_ref is not None else []


@dataclass
class PBXBuildPhase(PBXObject):
    """Shared shape of the build phases that hold an ordered list of build files."""

    kind: ClassVar[BuildPhaseKind]

    files: List[str] = field(default_factory=list)
    build_action_mask: int = DEFAULT_BUILD_ACTION_MASK
    run_only_for_deployment_postprocessing: int = 0
    extra_fields: Dict[str, PlistValue] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, PlistValue]:
        result: Dict[str, PlistValue] = {
            "isa": self.isa,
            "buildActionMask": str(self.build_action_mask),
            "files": list(self.files),
            "runOnlyForDeploymentPostprocessing": str(self.run_only_for_deployment_postprocessing),
        }
        result.update(self.extra_fields)
        return result

    @classmethod
    def _common_fields(cls, data: Dict[str, PlistValue]) -> Dict[str, Any]:
        return {
            "files": _pop_list(data, "files"),
            "build_action_mask": _pop_int(data, "buildActionMask", DEFAULT_BUILD_ACTION_MASK),
            "run_only_for_deployment_postprocessing": _pop_int(
                data, "runOnlyForDeploymentPostprocessing", 0
            ),
        }

    @classmethod
    def from_dict(cls, reference: str, data: Dict[str, PlistValue]) -> "PBXBuildPhase":
        data = dict(data)
        data.pop("isa", None)
        common = cls._common_fields(data)
        return cls(reference=reference, extra_fields=data, **common)

    def referenced_ids(self) -> List[Tuple[str, str]]:
        return [("files", build_file) for build_file in self.files]

    def scrub_reference(self, reference: str) -> bool:
        before = len(self.files)
        self.files = [build_file for build_file in self.files if build_file != reference]
        return len(self.files) != before


@dataclass
class PBXSourcesBuildPhase(PBXBuildPhase):
    isa: ClassVar[str] = "PBXSourcesBuildPhase"
    kind: ClassVar[BuildPhaseKind] = BuildPhaseKind.SOURCES


@dataclass
class PBXFrameworksBuildPhase(PBXBuildPhase):
    isa: ClassVar[str] = "PBXFrameworksBuildPhase"
    kind: ClassVar[BuildPhaseKind] = BuildPhaseKind.FRAMEWORKS


@dataclass
class PBXResourcesBuildPhase(PBXBuildPhase):
    isa: ClassVar[str] = "PBXResourcesBuildPhase"
    kind: ClassVar[BuildPhaseKind] = BuildPhaseKind.RESOURCES


@dataclass
class PBXHeadersBuildPhase(PBXBuildPhase):
    isa: ClassVar[str] = "PBXHeadersBuildPhase"
    kind: ClassVar[BuildPhaseKind] = BuildPhaseKind.HEADERS


@dataclass
class PBXCopyFilesBuildPhase(PBXBuildPhase):
    """Copies build files into a destination folder of the product."""

    isa: ClassVar[str] = "PBXCopyFilesBuildPhase"
    kind: ClassVar[BuildPhaseKind] = BuildPhaseKind.COPY_FILES

    name: Optional[str] = None
    dst_path: str = ""
    dst_subfolder_spec: str = "0"

    def to_dict(self) -> Dict[str, PlistValue]:
        result = super().to_dict()
        _put(result, "name", self.name)
        result["dstPath"] = self.dst_path
        result["dstSubfolderSpec"] = self.dst_subfolder_spec
        return result

    @classmethod
    def from_dict(cls, reference: str, data: Dict[str, PlistValue]) -> "PBXCopyFilesBuildPhase":
        data = dict(data)
        data.pop("isa", None)
        common = cls._common_fields(data)
        return cls(
            reference=reference,
            name=_pop_str(data, "name"),
            dst_path=_pop_str_or(data, "dstPath", ""),
            dst_subfolder_spec=_pop_str_or(data, "dstSubfolderSpec", "0"),
            extra_fields=data,
            **common,
        )


@dataclass
class PBXShellScriptBuildPhase(PBXObject):
    """Runs a shell script. Holds no build files of its own."""

    isa: ClassVar[str] = "PBXShellScriptBuildPhase"
    kind: ClassVar[BuildPhaseKind] = BuildPhaseKind.RUN_SCRIPT

    name: Optional[str] = None
    input_paths: List[str] = field(default_factory=list)
    output_paths: List[str] = field(default_factory=list)
    shell_path: str = "/bin/sh"
    shell_script: str = ""
    build_action_mask: int = DEFAULT_BUILD_ACTION_MASK
    run_only_for_deployment_postprocessing: int = 0
    extra_fields: Dict[str, PlistValue] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, PlistValue]:
        result: Dict[str, PlistValue] = {
            "isa": self.isa,
            "buildActionMask": str(self.build_action_mask),
            "inputPaths": list(self.input_paths),
            "outputPaths": list(self.output_paths),
            "runOnlyForDeploymentPostprocessing": str(self.run_only_for_deployment_postprocessing),
            "shellPath": self.shell_path,
            "shellScript": self.shell_script,
        }
        _put(result, "name", self.name)
        result.update(self.extra_fields)
        return result

    @classmethod
    def from_dict(cls, reference: str, data: Dict[str, PlistValue]) -> "PBXShellScriptBuildPhase":
        data = dict(data)
        data.pop("isa", None)
        return cls(
            reference=reference,
            name=_pop_str(data, "name"),
            input_paths=_pop_list(data, "inputPaths"),
            output_paths=_pop_list(data, "outputPaths"),
            shell_path=_pop_str_or(data, "shellPath", "/bin/sh"),
            shell_script=_pop_str_or(data, "shellScript", ""),
            build_action_mask=_pop_int(data, "buildActionMask", DEFAULT_BUILD_ACTION_MASK),
            run_only_for_deployment_postprocessing=_pop_int(
                data, "runOnlyForDeploymentPostprocessing", 0
            ),
            extra_fields=data,
        )


@dataclass
class PBXGenericObject(PBXObject):
    """Any object kind the graph logic does not model (PBXProject, targets, ...).

    The raw field table is kept as-is, ``isa`` included, in its original key order.
    """

    fields: Dict[str, PlistValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.fields.get("isa"), str) or not self.fields["isa"]:
            raise ValueError(f"Object {self.reference} has no isa")

    @property
    def object_isa(self) -> str:
        return str(self.fields["isa"])

    def to_dict(self) -> Dict[str, PlistValue]:
        return dict(self.fields)

    @classmethod
    def from_dict(cls, reference: str, data: Dict[str, PlistValue]) -> "PBXGenericObject":
        return cls(reference=reference, fields=dict(data))

    def referenced_ids(self) -> List[Tuple[str, str]]:
        """Identifier-shaped strings held directly by a field or by a list field.

        Nested tables (buildSettings, attributes) are not searched, and
        remoteGlobalIDString is skipped since it may name an object in
        another project file.
        """
        refs = []
        for key, value in self.fields.items():
            if key == "isa" or key in EXTERNAL_REFERENCE_KEYS:
                continue
            values = value if isinstance(value, list) else [value]
            refs.extend(
                (key, item) for item in values if isinstance(item, str) and is_valid_reference(item)
            )
        return refs

    def scrub_reference(self, reference: str) -> bool:
        changed = False
        for key, value in self.fields.items():
            if isinstance(value, list) and reference in value:
                self.fields[key] = [item for item in value if item != reference]
                changed = True
        return changed


# Modeled kinds, keyed by isa
OBJECT_TYPES: Dict[str, Type[PBXObject]] = {
    cls.isa: cls
    for cls in (
        PBXFileReference,
        PBXGroup,
        PBXVariantGroup,
        XCVersionGroup,
        PBXBuildFile,
        PBXSourcesBuildPhase,
        PBXFrameworksBuildPhase,
        PBXResourcesBuildPhase,
        PBXCopyFilesBuildPhase,
        PBXHeadersBuildPhase,
        PBXShellScriptBuildPhase,
    )
}

# Phases holding build files, in the precedence used to resolve a build file's phase
FILE_PHASE_TYPES: Tuple[Type[PBXBuildPhase], ...] = (
    PBXSourcesBuildPhase,
    PBXFrameworksBuildPhase,
    PBXResourcesBuildPhase,
    PBXCopyFilesBuildPhase,
    PBXHeadersBuildPhase,
)

# All phases, in the precedence used to resolve a phase identifier
PHASE_TYPES: Tuple[Type[PBXObject], ...] = (
    PBXSourcesBuildPhase,
    PBXFrameworksBuildPhase,
    PBXResourcesBuildPhase,
    PBXCopyFilesBuildPhase,
    PBXShellScriptBuildPhase,
    PBXHeadersBuildPhase,
)


def isa_of(obj: PBXObject) -> str:
    """Return the isa of any object, generic ones included."""
    if isinstance(obj, PBXGenericObject):
        return obj.object_isa
    return obj.isa


def object_from_dict(reference: str, data: Dict[str, PlistValue]) -> PBXObject:
    """Build the modeled object for a field table, or a generic one.

    Raises:
        ValueError: If the table has no isa or a modeled field has the wrong shape.
    """
    isa = data.get("isa")
    if not isinstance(isa, str) or not isa:
        raise ValueError(f"Object {reference} has no isa")
    object_type = OBJECT_TYPES.get(isa)
    if object_type is None:
        logger.debug(f"Keeping {isa} object {reference} as a generic field table")
        return PBXGenericObject.from_dict(reference, data)
    return object_type.from_dict(reference, data)
