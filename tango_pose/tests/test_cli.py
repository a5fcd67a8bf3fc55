"""
Tests for the command-line interface.
"""

import pytest

from tango_pose.cli import main


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "poses.txt").write_text("0.0 0 0 0 1 1.5 2.5 3.5\n")
    (tmp_path / "image_0000000.00.jpg").write_bytes(b"")
    return tmp_path


class TestMain:
    
    def test_success(self, workspace, capsys):
        code = main([str(workspace / "poses.txt"), "blue", "--capture-dir", str(workspace)])
        
        assert code == 0
        assert (workspace / "000.txt").exists()
        assert (workspace / "000.jpg").exists()
        assert "Frames written:       1" in capsys.readouterr().out
    
    def test_unknown_device(self, workspace):
        code = main([str(workspace / "poses.txt"), "green", "--capture-dir", str(workspace)])
        
        assert code == 1
        assert not (workspace / "000.txt").exists()
    
    def test_missing_pose_file(self, workspace):
        code = main([str(workspace / "missing.txt"), "blue", "--capture-dir", str(workspace)])
        assert code == 1
    
    def test_binary_pose_file(self, workspace, caplog):
        (workspace / "poses.txt").write_bytes(b"\xff\xfe\x00 1 2 3")
        
        code = main([str(workspace / "poses.txt"), "blue", "--capture-dir", str(workspace)])
        
        assert code == 1
        assert "PoseFileFormatError" in caplog.text
        assert "Configuration error" not in caplog.text
        assert not (workspace / "000.txt").exists()
    
    @pytest.mark.parametrize("argv", [[], ["poses.txt"], ["poses.txt", "blue", "extra"]])
    def test_wrong_argument_count(self, argv):
        with pytest.raises(SystemExit) as excinfo:
            main(argv)
        assert excinfo.value.code != 0
    
    def test_config_file_and_outputs(self, workspace):
        (workspace / "run.yaml").write_text("capture_dir: .\noutput_dir: frames\n")
        
        code = main([
            str(workspace / "poses.txt"), "black",
            "--config", str(workspace / "run.yaml"),
            "--report", str(workspace / "report.json"),
            "--associations-csv", str(workspace / "pairs.csv"),
        ])
        
        assert code == 0
        assert (workspace / "frames" / "000.txt").exists()
        assert (workspace / "report.json").exists()
        assert (workspace / "pairs.csv").exists()
