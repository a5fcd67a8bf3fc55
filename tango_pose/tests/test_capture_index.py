"""
Tests for the capture time index.
"""

import pytest
from pathlib import Path

from tango_pose.capture_index import CaptureIndex, CaptureEntry, parse_capture_timestamp
from tango_pose.errors import DirectoryAccessError, FileAccessError


def touch(directory: Path, *names):
    for name in names:
        (directory / name).write_bytes(b'')


class TestParseCaptureTimestamp:
    
    def test_zero_padded(self):
        assert parse_capture_timestamp("image_0001462.95.jpg") == pytest.approx(1462.95)
    
    def test_unpadded(self):
        assert parse_capture_timestamp("image_2.00.jpg") == pytest.approx(2.0)
    
    @pytest.mark.parametrize("name", [
        "image_5.jpg",
        "image_abc.jpg",
        "image_1.25.png",
        "img_1.25.jpg",
        "image_1.25.jpg.bak",
        "000.jpg",
        "notes.txt",
    ])
    def test_non_capture_names(self, name):
        assert parse_capture_timestamp(name) is None


class TestCaptureIndex:
    """Tests for directory scanning."""
    
    @pytest.fixture
    def capture_dir(self, tmp_path):
        touch(
            tmp_path,
            "image_0000003.50.jpg",
            "image_0000001.25.jpg",
            "image_2.00.jpg",
            "notes.txt",
            "image_abc.jpg",
            "image_1.25.png",
            "000.txt",
        )
        return tmp_path
    
    def test_timestamps_sorted(self, capture_dir):
        index = CaptureIndex.scan(str(capture_dir))
        assert index.timestamps == pytest.approx([1.25, 2.0, 3.5])
    
    def test_other_files_ignored(self, capture_dir):
        index = CaptureIndex.scan(str(capture_dir))
        assert len(index) == 3
    
    def test_entries_keep_scanned_path(self, capture_dir):
        index = CaptureIndex.scan(str(capture_dir))
        assert index[0].path == capture_dir / "image_0000001.25.jpg"
        assert index[0].path.exists()
        assert index[1].path.name == "image_2.00.jpg"
    
    def test_iteration(self, capture_dir):
        index = CaptureIndex.scan(str(capture_dir))
        assert [e.path.name for e in index] == [
            "image_0000001.25.jpg",
            "image_2.00.jpg",
            "image_0000003.50.jpg",
        ]
    
    def test_size_follows_directory(self, tmp_path):
        """No fixed capacity: every matching file is indexed."""
        names = [f"image_{i:07d}.{i % 100:02d}.jpg" for i in range(250)]
        touch(tmp_path, *names)
        
        index = CaptureIndex.scan(str(tmp_path))
        assert len(index) == 250
    
    def test_empty_directory(self, tmp_path):
        index = CaptureIndex.scan(str(tmp_path))
        assert len(index) == 0
        assert index.timestamps == []
    
    def test_missing_directory(self, tmp_path):
        with pytest.raises(DirectoryAccessError):
            CaptureIndex.scan(str(tmp_path / "missing"))
    
    def test_directory_error_is_file_access_error(self, tmp_path):
        with pytest.raises(FileAccessError):
            CaptureIndex.scan(str(tmp_path / "missing"))
    
    def test_duplicate_timestamps_strictly_ascending(self, tmp_path):
        touch(tmp_path, "image_1.50.jpg", "image_01.50.jpg", "image_0.50.jpg")
        
        index = CaptureIndex.scan(str(tmp_path))
        
        assert index.timestamps == pytest.approx([0.5, 1.5])
        assert index[1].path.name == "image_01.50.jpg"
    
    def test_from_entries(self):
        entries = [
            CaptureEntry(3.0, Path("c.jpg")),
            CaptureEntry(1.0, Path("a.jpg")),
        ]
        index = CaptureIndex(entries)
        assert index.timestamps == [1.0, 3.0]
