# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Read-only reference resolution over an ObjectStore.

API Methods:
- file_name(build_file_reference): Display name of a build file's subject
- file_reference_name(file_reference): Display name of a file reference
- build_phase_kind(build_file_reference): Kind of the phase holding a build file
- build_phase_reference(build_file_reference): Identifier of that phase
- build_phase_kind_of_phase(phase_reference): Kind of a phase by its identifier
- build_phase_name(phase_reference): Display name of a phase
- object_comment(reference): Comment written next to an identifier in project text

Every query is a pure function of the store's current contents. Missing or
inconsistent references give None, never an exception; callers decide whether
an unresolved name matters.
"""

import logging
from typing import Optional, Tuple

from pbxgraph.models import (
    FILE_PHASE_TYPES,
    PHASE_TYPES,
    BuildPhaseKind,
    PBXBuildFile,
    PBXBuildPhase,
    PBXCopyFilesBuildPhase,
    PBXFileReference,
    PBXGenericObject,
    PBXGroup,
    PBXShellScriptBuildPhase,
    PBXVariantGroup,
    XCVersionGroup,
)
from pbxgraph.storage import ObjectStore

logger = logging.getLogger(__name__)

# Fixed display names of the phases that have no name field
_PHASE_NAMES = {
    BuildPhaseKind.SOURCES: "Sources",
    BuildPhaseKind.FRAMEWORKS: "Frameworks",
    BuildPhaseKind.RESOURCES: "Resources",
    BuildPhaseKind.HEADERS: "Headers",
}
_DEFAULT_COPY_FILES_NAME = "CopyFiles"
_DEFAULT_SHELL_SCRIPT_NAME = "ShellScript"


class ReferenceResolver:
    """Answers naming and membership questions about a project graph.

    Usage:
        resolver = ReferenceResolver(proj.objects)
        resolver.file_name(build_file_id)          # "Main.swift"
        resolver.build_phase_kind(build_file_id)   # BuildPhaseKind.SOURCES
    """

    def __init__(self, store: ObjectStore, project_name: Optional[str] = None) -> None:
        """Initialize the resolver.

        Args:
            store: Store to resolve against. Not copied; queries see later mutations.
            project_name: Name of the project (the .xcodeproj bundle stem), used
                in the comment of the project's configuration list.
        """
        self._store = store
        self._project_name = project_name

    def file_name(self, build_file_reference: str) -> Optional[str]:
        """Return the display name of a build file's subject.

        A variant group answers with its own name, never its members' paths.
        A file reference answers with its last path component, falling back to
        its explicit name.

        Returns:
            The name, or None if the build file is missing, has no subject, or
            its subject is neither a variant group nor a file reference.
        """
        build_file = self._store.build_files.get(build_file_reference)
        if build_file is None or build_file.file_ref is None:
            return None

        subject = build_file.file_ref
        variant_group = self._store.variant_groups.get(subject)
        if variant_group is not None:
            return variant_group.name
        if self._store.file_references.contains(subject):
            return self.file_reference_name(subject)

        logger.debug(
            f"Build file {build_file_reference} points at {subject}, "
            f"which is neither a file reference nor a variant group"
        )
        return None

    def file_reference_name(self, file_reference: str) -> Optional[str]:
        """Return a file reference's display name, or None if it is missing."""
        file_ref = self._store.file_references.get(file_reference)
        if file_ref is None:
            return None
        return file_ref.display_name

    def _containing_phase(self, build_file_reference: str) -> Optional[PBXBuildPhase]:
        # First match in FILE_PHASE_TYPES order wins when a build file is
        # listed by several phases.
        for phase_type in FILE_PHASE_TYPES:
            for phase in self._store.objects_of(phase_type).values():
                if build_file_reference in phase.files:
                    return phase
        return None

    def build_phase_kind(self, build_file_reference: str) -> Optional[BuildPhaseKind]:
        """Return the kind of the phase listing ``build_file_reference``.

        Phases are scanned as Sources, Frameworks, Resources, CopyFiles, Headers.
        """
        phase = self._containing_phase(build_file_reference)
        return phase.kind if phase is not None else None

    def build_phase_reference(self, build_file_reference: str) -> Optional[str]:
        """Return the identifier of the phase listing ``build_file_reference``."""
        phase = self._containing_phase(build_file_reference)
        return phase.reference if phase is not None else None

    def _phase(self, phase_reference: str) -> Tuple[Optional[BuildPhaseKind], Optional[object]]:
        for phase_type in PHASE_TYPES:
            phase = self._store.objects_of(phase_type).get(phase_reference)
            if phase is not None:
                return phase_type.kind, phase  # type: ignore[attr-defined]
        return None, None

    def build_phase_kind_of_phase(self, phase_reference: str) -> Optional[BuildPhaseKind]:
        """Return the kind of the phase with identifier ``phase_reference``.

        Checked as Sources, Frameworks, Resources, CopyFiles, ShellScript, Headers.
        """
        kind, _phase = self._phase(phase_reference)
        return kind

    def build_phase_name(self, phase_reference: str) -> Optional[str]:
        """Return a phase's display name.

        Copy-files and shell-script phases use their own name when set and
        "CopyFiles" / "ShellScript" otherwise.
        """
        kind, phase = self._phase(phase_reference)
        if kind is None:
            return None
        if kind is BuildPhaseKind.COPY_FILES:
            assert isinstance(phase, PBXCopyFilesBuildPhase)
            return phase.name if phase.name is not None else _DEFAULT_COPY_FILES_NAME
        if kind is BuildPhaseKind.RUN_SCRIPT:
            assert isinstance(phase, PBXShellScriptBuildPhase)
            return phase.name if phase.name is not None else _DEFAULT_SHELL_SCRIPT_NAME
        return _PHASE_NAMES[kind]

    def object_comment(self, reference: str) -> Optional[str]:
        """Return the comment written after ``reference`` in project text.

        Comments are cosmetic: decoding ignores them.
        """
        obj = self._store.get(reference)
        if obj is None:
            return None

        if isinstance(obj, PBXBuildFile):
            name = self.file_name(reference)
            phase_reference = self.build_phase_reference(reference)
            phase_name = self.build_phase_name(phase_reference) if phase_reference else None
            if name is not None and phase_name is not None:
                return f"{name} in {phase_name}"
            return name
        if isinstance(obj, PBXFileReference):
            return obj.display_name
        if isinstance(obj, (PBXGroup, PBXVariantGroup, XCVersionGroup)):
            return obj.display_name
        if isinstance(obj, (PBXBuildPhase, PBXShellScriptBuildPhase)):
            return self.build_phase_name(reference)
        if isinstance(obj, PBXGenericObject):
            return self._generic_comment(obj)
        return None

    def _generic_comment(self, obj: PBXGenericObject) -> str:
        isa = obj.object_isa
        if isa == "PBXProject":
            return "Project object"
        if isa == "XCConfigurationList":
            owner = self._configuration_list_owner(obj.reference)
            if owner is not None:
                owner_name = owner.fields.get("name")
                if owner_name is None and owner.object_isa == "PBXProject":
                    owner_name = self._project_name
                if isinstance(owner_name, str):
                    return f'Build configuration list for {owner.object_isa} "{owner_name}"'
        name = obj.fields.get("name")
        if isinstance(name, str):
            return name
        path = obj.fields.get("path")
        if isinstance(path, str):
            return path
        return isa

    def _configuration_list_owner(self, list_reference: str) -> Optional[PBXGenericObject]:
        for obj in self._store:
            if (
                isinstance(obj, PBXGenericObject)
                and obj.fields.get("buildConfigurationList") == list_reference
            ):
                return obj
        return None

