"""File identifier for uniquely identifying directories by device and inode."""

import os
from typing import Any, Optional

from dirwalk.types import PathType


class FileIdentifier:
    """Class for uniquely identifying files and directories by their device and inode.

    This class is used for symlink loop detection during traversal. The combination of
    device ID and inode number identifies a directory no matter which path (direct or
    through symbolic links) leads to it.

    Attributes:
        device_id (int): The device ID from stat information.
        inode_number (int): The inode number from stat information.

    Note:
        On Windows, inode numbers might be handled differently than on Unix systems,
        but Python's os.stat implementation provides values that can be used
        for uniquely identifying files.
    """

    def __init__(self, device_id: int, inode_number: int):
        self.device_id = device_id
        self.inode_number = inode_number

    @classmethod
    def of(cls, path: PathType) -> Optional["FileIdentifier"]:
        """Build the identifier of the file or directory a path resolves to.

        Symbolic links are followed, so a link and its target share an identifier.

        Args:
            path: Path to identify.

        Returns:
            The identifier, or None if the path cannot be stat'ed.
        """
        try:
            stat_info = os.stat(path)
        except OSError:
            return None
        return cls(stat_info.st_dev, stat_info.st_ino)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, FileIdentifier):
            return False
        return self.device_id == other.device_id and self.inode_number == other.inode_number

    def __hash__(self) -> int:
        return hash((self.device_id, self.inode_number))

    def __repr__(self) -> str:
        return f"FileIdentifier(device_id={self.device_id}, inode_number={self.inode_number})"
