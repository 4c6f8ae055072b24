# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Object graph, reference resolution and canonical writer for Xcode project files.

Library modules log through ``logging.getLogger(__name__)`` and install no
handlers. A host application calls ``pbxgraph.setup_logging()`` once at startup
to get JSON-line logs under ``.pbxgraph_logs/``.
"""

from .config import Config
from .decoder import PBXProjDecoder, load, parse_plist
from .encoder import PBXProjEncoder, encode
from .errors import (
    DanglingReferenceError,
    DestinationExistsError,
    DuplicateReferenceError,
    ParseError,
    PBXGraphError,
    ReferenceGenerationError,
)
from .identifiers import ReferenceGenerator
from .logging_setup import StructuredFormatter, setup_logging
from .models import (
    BuildPhaseKind,
    PBXBuildFile,
    PBXCopyFilesBuildPhase,
    PBXFileReference,
    PBXFrameworksBuildPhase,
    PBXGenericObject,
    PBXGroup,
    PBXHeadersBuildPhase,
    PBXObject,
    PBXResourcesBuildPhase,
    PBXShellScriptBuildPhase,
    PBXSourcesBuildPhase,
    PBXVariantGroup,
    SourceTree,
    XCVersionGroup,
)
from .resolver import ReferenceResolver
from .storage import ObjectStore, ObjectsView, PBXProj
from .writer import write

__version__ = "0.1.0"

__all__ = [
    "Config",
    "PBXProjDecoder",
    "load",
    "parse_plist",
    "PBXProjEncoder",
    "encode",
    "PBXGraphError",
    "DanglingReferenceError",
    "DestinationExistsError",
    "DuplicateReferenceError",
    "ParseError",
    "ReferenceGenerationError",
    "ReferenceGenerator",
    "setup_logging",
    "StructuredFormatter",
    "BuildPhaseKind",
    "SourceTree",
    "PBXObject",
    "PBXFileReference",
    "PBXGroup",
    "PBXVariantGroup",
    "XCVersionGroup",
    "PBXBuildFile",
    "PBXSourcesBuildPhase",
    "PBXFrameworksBuildPhase",
    "PBXResourcesBuildPhase",
    "PBXCopyFilesBuildPhase",
    "PBXHeadersBuildPhase",
    "PBXShellScriptBuildPhase",
    "PBXGenericObject",
    "ReferenceResolver",
    "ObjectStore",
    "ObjectsView",
    "PBXProj",
    "write",
]
