# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Serialization of a PBXProj into canonical project-file text.

Output layout:
- "// !$*UTF8*$!" header line, then the root table
- Objects grouped by isa in lexical order, one "Begin/End <isa> section" each
- Within a section, identifiers in lexical order
- Inside an object, isa first and the remaining keys sorted

The layout depends only on store contents, so encoding an unmodified store
twice gives byte-identical text.
"""

import logging
import re
from typing import Dict, List, Optional

from pbxgraph.models import EXTERNAL_REFERENCE_KEYS, PlistValue, isa_of
from pbxgraph.resolver import ReferenceResolver
from pbxgraph.storage import PBXProj

logger = logging.getLogger(__name__)

HEADER = "// !$*UTF8*$!"

# Objects Xcode writes on a single line
SINGLE_LINE_ISAS = frozenset({"PBXBuildFile", "PBXFileReference"})

_BARE_STRING = re.compile(r"^[A-Za-z0-9_$/:.]+$")


def quote_string(value: str) -> str:
    """Return ``value`` bare if the format allows it, else quoted and escaped."""
    if _BARE_STRING.match(value) and "___" not in value and "//" not in value:
        return value
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def _comment(text: str) -> str:
    return f"/* {text.replace('*/', '* /')} */"


def _sorted_keys(table: Dict[str, PlistValue]) -> List[str]:
    keys = sorted(key for key in table if key != "isa")
    if "isa" in table:
        keys.insert(0, "isa")
    return keys


class PBXProjEncoder:
    """Renders a PBXProj as project-file text.

    Usage:
        text = PBXProjEncoder().encode(proj)
    """

    def __init__(self, section_comments: bool = True, reference_comments: bool = True) -> None:
        """Initialize the encoder.

        Args:
            section_comments: Write "/* Begin <isa> section */" markers.
            reference_comments: Write "/* name */" after object identifiers.
        """
        self.section_comments = section_comments
        self.reference_comments = reference_comments
        self._comments: Dict[str, Optional[str]] = {}

    def encode(self, proj: PBXProj) -> str:
        """Return the full text of ``proj``."""
        store = proj.objects
        resolver = ReferenceResolver(store, project_name=proj.name)
        if self.reference_comments:
            self._comments = {ref: resolver.object_comment(ref) for ref in store.references()}
        else:
            self._comments = {}

        lines = [HEADER, "{"]
        lines.append(f"\tarchiveVersion = {quote_string(proj.archive_version)};")
        lines.append(f"\tclasses = {self._value(proj.classes, 1, False)};")
        lines.append(f"\tobjectVersion = {quote_string(proj.object_version)};")
        lines.append("\tobjects = {")

        for isa in sorted(store.isa_names()):
            view = store.objects_of(isa)
            lines.append("")
            if self.section_comments:
                lines.append(f"/* Begin {isa} section */")
            for reference in sorted(view):
                lines.append(self._object(reference, view[reference].to_dict(), isa))
            if self.section_comments:
                lines.append(f"/* End {isa} section */")

        lines.append("\t};")
        if proj.root_object is not None:
            lines.append(f"\trootObject = {self._reference(proj.root_object)};")
        lines.append("}")

        logger.debug(f"Encoded {len(store)} objects")
        return "\n".join(lines) + "\n"

    def _reference(self, reference: str) -> str:
        comment = self._comments.get(reference)
        if comment is None:
            return quote_string(reference)
        return f"{quote_string(reference)} {_comment(comment)}"

    def _object(self, reference: str, table: Dict[str, PlistValue], isa: str) -> str:
        key = self._reference(reference)
        if isa in SINGLE_LINE_ISAS:
            parts = [
                f"{quote_string(name)} = {self._field(name, table[name], 2, True)}; "
                for name in _sorted_keys(table)
            ]
            return f"\t\t{key} = {{{''.join(parts)}}};"

        lines = [f"\t\t{key} = {{"]
        for name in _sorted_keys(table):
            lines.append(f"\t\t\t{quote_string(name)} = {self._field(name, table[name], 3, False)};")
        lines.append("\t\t};")
        return "\n".join(lines)

    def _field(self, name: str, value: PlistValue, depth: int, single_line: bool) -> str:
        # Identifiers directly under an object, or directly in one of its
        # lists, get the referenced object's comment.
        commented = name not in EXTERNAL_REFERENCE_KEYS
        if commented and isinstance(value, str) and value in self._comments:
            return self._reference(value)
        if commented and isinstance(value, list):
            items = [
                self._reference(item)
                if isinstance(item, str) and item in self._comments
                else self._value(item, depth + 1, single_line)
                for item in value
            ]
            return self._join_list(items, depth, single_line)
        return self._value(value, depth, single_line)

    def _value(self, value: PlistValue, depth: int, single_line: bool) -> str:
        if isinstance(value, str):
            return quote_string(value)
        if isinstance(value, bool):
            raise TypeError("Boolean values are not representable; use 'YES' or 'NO'")
        if isinstance(value, int):
            return str(value)
        if isinstance(value, list):
            items = [self._value(item, depth + 1, single_line) for item in value]
            return self._join_list(items, depth, single_line)
        if isinstance(value, dict):
            return self._join_dict(value, depth, single_line)
        raise TypeError(f"Unsupported value type: {type(value)!r}")

    def _join_list(self, items: List[str], depth: int, single_line: bool) -> str:
        if single_line:
            return "(" + "".join(f"{item}, " for item in items) + ")"
        indent = "\t" * depth
        body = "".join(f"{indent}\t{item},\n" for item in items)
        return f"(\n{body}{indent})"

    def _join_dict(self, table: Dict[str, PlistValue], depth: int, single_line: bool) -> str:
        if single_line:
            parts = [
                f"{quote_string(key)} = {self._value(table[key], depth + 1, True)}; "
                for key in _sorted_keys(table)
            ]
            return "{" + "".join(parts) + "}"
        indent = "\t" * depth
        body = "".join(
            f"{indent}\t{quote_string(key)} = {self._value(table[key], depth + 1, False)};\n"
            for key in _sorted_keys(table)
        )
        return f"{{\n{body}{indent}}}"


def encode(proj: PBXProj, section_comments: bool = True, reference_comments: bool = True) -> str:
    """Encode ``proj`` with a fresh PBXProjEncoder."""
    encoder = PBXProjEncoder(section_comments=section_comments, reference_comments=reference_comments)
    return encoder.encode(proj)
