# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Error taxonomy for pbxgraph.

Missing identifiers are never errors: store and resolver lookups return None.
Everything below is a distinct failure a caller may want to handle on its own.
"""

from typing import List, Optional, Tuple


class PBXGraphError(Exception):
    """Base class for all pbxgraph errors."""

    pass


class DuplicateReferenceError(PBXGraphError):
    """Raised when inserting an object whose identifier is already in the store."""

    def __init__(self, reference: str, existing_isa: str):
        self.reference = reference
        self.existing_isa = existing_isa
        super().__init__(f"Identifier {reference} is already used by a {existing_isa} object")


class DanglingReferenceError(PBXGraphError):
    """Raised by integrity checks when cross-references point at missing objects."""

    def __init__(self, dangling: List[Tuple[str, str]]):
        # (owner reference, missing reference) pairs
        self.dangling = dangling
        preview = ", ".join(f"{owner} -> {missing}" for owner, missing in dangling[:5])
        more = f" (+{len(dangling) - 5} more)" if len(dangling) > 5 else ""
        super().__init__(f"{len(dangling)} dangling reference(s): {preview}{more}")


class DestinationExistsError(PBXGraphError, FileExistsError):
    """Raised when a write would replace an existing file without overwrite."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Destination already exists and overwrite is disabled: {path}")


class ReferenceGenerationError(PBXGraphError):
    """Raised when the identifier generator cannot find a free identifier."""

    pass


class ParseError(PBXGraphError):
    """Raised when project text is not a well-formed ASCII property list."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
