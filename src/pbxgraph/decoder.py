# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Reading project-file text into a PBXProj.

Two layers:
- parse_plist(): ASCII (OpenStep) property list -> nested str/list/dict values
- PBXProjDecoder: root table -> PBXProj with a populated ObjectStore

Supported syntax is what project files use: ``{ key = value; }`` tables,
``( a, b, )`` arrays, bare and quoted strings, ``/* */`` and ``//`` comments.
Comments are discarded, so the names the encoder writes in them carry no data.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Union

from pbxgraph.errors import DuplicateReferenceError, ParseError
from pbxgraph.models import PlistValue, object_from_dict
from pbxgraph.storage import ObjectStore, PBXProj

if TYPE_CHECKING:
    from pbxgraph.config import Config

logger = logging.getLogger(__name__)

PROJECT_FILE_NAME = "project.pbxproj"

_BARE_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_$+/:.-")

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    '"': '"',
    "'": "'",
    "\\": "\\",
}


class _PlistParser:
    """Recursive-descent parser over one text buffer."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def _error(self, message: str) -> ParseError:
        line = self._text.count("\n", 0, self._pos) + 1
        return ParseError(message, line=line)

    def _skip_ignorable(self) -> None:
        text = self._text
        while self._pos < len(text):
            char = text[self._pos]
            if char.isspace():
                self._pos += 1
            elif text.startswith("/*", self._pos):
                end = text.find("*/", self._pos + 2)
                if end == -1:
                    raise self._error("Unterminated comment")
                self._pos = end + 2
            elif text.startswith("//", self._pos):
                end = text.find("\n", self._pos)
                self._pos = len(text) if end == -1 else end + 1
            else:
                return

    def _peek(self) -> str:
        self._skip_ignorable()
        if self._pos >= len(self._text):
            raise self._error("Unexpected end of input")
        return self._text[self._pos]

    def _expect(self, char: str) -> None:
        if self._peek() != char:
            raise self._error(f"Expected '{char}', found '{self._text[self._pos]}'")
        self._pos += 1

    def parse_document(self) -> Dict[str, PlistValue]:
        root = self._parse_value()
        self._skip_ignorable()
        if self._pos != len(self._text):
            raise self._error("Unexpected content after root table")
        if not isinstance(root, dict):
            raise ParseError("Root value must be a table")
        return root

    def _parse_value(self) -> PlistValue:
        char = self._peek()
        if char == "{":
            return self._parse_dict()
        if char == "(":
            return self._parse_array()
        if char == '"' or char == "'":
            return self._parse_quoted()
        if char in _BARE_CHARS:
            return self._parse_bare()
        raise self._error(f"Unexpected character '{char}'")

    def _parse_dict(self) -> Dict[str, PlistValue]:
        self._expect("{")
        table: Dict[str, PlistValue] = {}
        while self._peek() != "}":
            key = self._parse_value()
            if not isinstance(key, str):
                raise self._error("Table keys must be strings")
            self._expect("=")
            table[key] = self._parse_value()
            self._expect(";")
        self._pos += 1
        return table

    def _parse_array(self) -> List[PlistValue]:
        self._expect("(")
        items: List[PlistValue] = []
        while self._peek() != ")":
            items.append(self._parse_value())
            if self._peek() == ",":
                self._pos += 1
            elif self._peek() != ")":
                raise self._error("Expected ',' or ')' in array")
        self._pos += 1
        return items

    def _parse_bare(self) -> str:
        start = self._pos
        text = self._text
        while self._pos < len(text) and text[self._pos] in _BARE_CHARS:
            self._pos += 1
        return text[start : self._pos]

    def _parse_quoted(self) -> str:
        quote = self._text[self._pos]
        self._pos += 1
        text = self._text
        chunks: List[str] = []
        while True:
            if self._pos >= len(text):
                raise self._error("Unterminated string")
            char = text[self._pos]
            if char == quote:
                self._pos += 1
                return "".join(chunks)
            if char == "\\":
                self._pos += 1
                if self._pos >= len(text):
                    raise self._error("Unterminated escape sequence")
                escape = text[self._pos]
                if escape == "U":
                    digits = text[self._pos + 1 : self._pos + 5]
                    try:
                        chunks.append(chr(int(digits, 16)))
                    except ValueError:
                        raise self._error(f"Invalid unicode escape '\\U{digits}'") from None
                    self._pos += 5
                    continue
                chunks.append(_ESCAPES.get(escape, escape))
                self._pos += 1
                continue
            chunks.append(char)
            self._pos += 1


def parse_plist(text: str) -> Dict[str, PlistValue]:
    """Parse ASCII property-list text whose root value is a table.

    Raises:
        ParseError: If the text is malformed; ``line`` tells where.
    """
    return _PlistParser(text).parse_document()


class PBXProjDecoder:
    """Builds a PBXProj from project-file text.

    Objects are inserted in file order; references are not required to
    resolve during decoding. Call ``proj.check_integrity()`` to verify.
    """

    def __init__(self, scrub_on_remove: bool = True) -> None:
        self._scrub_on_remove = scrub_on_remove

    @classmethod
    def from_config(cls, config: "Config") -> "PBXProjDecoder":
        return cls(scrub_on_remove=config.scrub_references_on_remove)

    def decode(self, text: str, name: Optional[str] = None) -> PBXProj:
        """Decode project-file text.

        Args:
            text: Full project-file text.
            name: Project name, normally the .xcodeproj bundle stem.

        Raises:
            ParseError: If the text is malformed, an object table is invalid,
                or an identifier appears twice.
        """
        root = parse_plist(text)

        objects = root.get("objects", {})
        if not isinstance(objects, dict):
            raise ParseError("'objects' must be a table")

        store = ObjectStore(scrub_on_remove=self._scrub_on_remove)
        for reference, table in objects.items():
            if not isinstance(table, dict):
                raise ParseError(f"Object {reference} must be a table")
            try:
                store.add(object_from_dict(reference, table))
            except (ValueError, DuplicateReferenceError) as e:
                raise ParseError(f"Invalid object {reference}: {e}") from e

        root_object = root.get("rootObject")
        classes = root.get("classes", {})
        if root_object is not None and not isinstance(root_object, str):
            raise ParseError("'rootObject' must be a string")
        if not isinstance(classes, dict):
            raise ParseError("'classes' must be a table")

        proj = PBXProj(
            objects=store,
            root_object=root_object,
            archive_version=str(root.get("archiveVersion", "1")),
            object_version=str(root.get("objectVersion", "46")),
            classes=classes,
            name=name,
        )
        logger.debug(f"Decoded {len(store)} objects")
        return proj


def load(path: Union[str, Path], config: Optional["Config"] = None) -> PBXProj:
    """Read a project file.

    Args:
        path: A ``project.pbxproj`` file or the ``.xcodeproj`` bundle holding it.
        config: Optional configuration for the resulting store.

    Raises:
        ParseError: If the file content is malformed.
        OSError: If the file cannot be read.
    """
    file_path = Path(path)
    if file_path.suffix == ".xcodeproj":
        file_path = file_path / PROJECT_FILE_NAME

    name = file_path.parent.stem if file_path.parent.suffix == ".xcodeproj" else None
    decoder = PBXProjDecoder.from_config(config) if config is not None else PBXProjDecoder()
    text = file_path.read_text(encoding="utf-8")
    proj = decoder.decode(text, name=name)
    logger.info(f"Loaded {len(proj.objects)} objects from {file_path}")
    return proj
