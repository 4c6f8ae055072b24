# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Persisting a PBXProj to disk with explicit overwrite control."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from pbxgraph.encoder import PBXProjEncoder
from pbxgraph.errors import DestinationExistsError

if TYPE_CHECKING:
    from pbxgraph.config import Config
    from pbxgraph.storage import PBXProj

logger = logging.getLogger(__name__)


def write(
    proj: "PBXProj",
    path: Union[str, Path],
    overwrite: Optional[bool] = None,
    config: Optional["Config"] = None,
) -> None:
    """Encode ``proj`` and write it to ``path``.

    The whole text is built in memory before the destination is touched, so an
    encoding failure leaves any existing file as it was.

    Args:
        proj: Project to write.
        path: Destination file (usually ``<Name>.xcodeproj/project.pbxproj``).
        overwrite: Replace an existing destination. When False an existing
                   destination is left unchanged and DestinationExistsError raised.
                   None means the config's ``overwrite`` value, or False.
        config: Optional configuration; controls the integrity check and comments.

    Raises:
        DanglingReferenceError: If integrity checking is enabled and the graph
            has unresolved references.
        DestinationExistsError: If the destination exists and overwrite is False.
        OSError: If removing the old file or writing the new one fails.
    """
    destination = Path(path)
    if overwrite is None:
        overwrite = config.overwrite if config is not None else False

    check_integrity = config.check_integrity_on_write if config is not None else True
    if check_integrity:
        proj.check_integrity()

    if config is not None:
        encoder = PBXProjEncoder(
            section_comments=config.section_comments,
            reference_comments=config.reference_comments,
        )
    else:
        encoder = PBXProjEncoder()
    output = encoder.encode(proj)

    if destination.exists():
        if not overwrite:
            logger.warning(f"Refusing to overwrite existing project file {destination}")
            raise DestinationExistsError(str(destination))
        destination.unlink()

    destination.write_text(output, encoding="utf-8")
    logger.info(f"Wrote {len(proj.objects)} objects to {destination}")
