"""
Capture time index.

Image captures are stored next to the pose log, one JPEG per capture, with
the capture time encoded in the file name:

    image_<timestamp>.jpg      e.g. image_1462.95.jpg, image_0001463.11.jpg

The index lists a directory once, keeps every file whose name matches that
pattern and sorts the captures by timestamp. Other files are ignored.
"""

import os
import re
from pathlib import Path
from typing import List, NamedTuple, Optional
import logging

from .errors import DirectoryAccessError

logger = logging.getLogger(__name__)

CAPTURE_PATTERN = re.compile(r'^image_(\d+\.\d+)\.jpg$')


class CaptureEntry(NamedTuple):
    """A capture file and the timestamp parsed from its name."""
    timestamp: float
    path: Path


def parse_capture_timestamp(filename: str) -> Optional[float]:
    """
    Extract the capture timestamp from a file name.
    
    Returns:
        The timestamp, or None if the name is not a capture file name
    """
    match = CAPTURE_PATTERN.match(filename)
    if match is None:
        return None
    return float(match.group(1))


class CaptureIndex:
    """
    Sorted capture timestamps of one directory.
    
    Timestamps are strictly ascending. If two file names encode the same
    timestamp, only the first one (in name order) is indexed.
    """
    
    def __init__(self, entries: List[CaptureEntry], directory: str = '.'):
        self.directory = directory
        self.entries: List[CaptureEntry] = []
        
        for entry in sorted(entries, key=lambda e: (e.timestamp, e.path.name)):
            if self.entries and entry.timestamp == self.entries[-1].timestamp:
                logger.warning(
                    f"Duplicate capture timestamp {entry.timestamp}: "
                    f"keeping {self.entries[-1].path.name}, ignoring {entry.path.name}"
                )
                continue
            self.entries.append(entry)
    
    @classmethod
    def scan(cls, directory: str = '.') -> "CaptureIndex":
        """
        Build the index from a directory listing.
        
        Args:
            directory: Directory holding the capture files
            
        Returns:
            CaptureIndex over all matching files, however many there are
            
        Raises:
            DirectoryAccessError: If the directory cannot be listed
        """
        try:
            names = os.listdir(directory)
        except OSError as e:
            raise DirectoryAccessError(
                f"Couldn't open capture directory {directory}: {e}"
            ) from e
        
        base = Path(directory)
        entries = []
        for name in sorted(names):
            timestamp = parse_capture_timestamp(name)
            if timestamp is not None:
                entries.append(CaptureEntry(timestamp, base / name))
        
        index = cls(entries, directory=directory)
        logger.info(f"Found {len(index)} capture files in {directory}")
        return index
    
    @property
    def timestamps(self) -> List[float]:
        """Capture timestamps, ascending."""
        return [e.timestamp for e in self.entries]
    
    def __len__(self) -> int:
        return len(self.entries)
    
    def __getitem__(self, index: int) -> CaptureEntry:
        return self.entries[index]
    
    def __iter__(self):
        return iter(self.entries)
