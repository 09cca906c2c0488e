"""Tests for the pointbin-inspect entry point."""

import struct

from pointbin.cli.main import main
from pointbin.domain.interfaces import DecodeMode


class TestInspectCli:
    """main() return codes and output."""

    def test_prints_summary(self, three_points, temp_dir, capsys):
        from pointbin.infrastructure.formats.binary import write_points

        path = temp_dir / "scene.bin"
        write_points(path, three_points)

        code = main(path, mode=DecodeMode.STREAMED, show=2)

        out = capsys.readouterr().out
        assert code == 0
        assert "PointCollection: 3 points" in out
        assert "min: (-1.0, 0.0, 0.0)" in out
        assert "decoder: streamed" in out
        assert out.count("Point(") == 2

    def test_missing_file(self, temp_dir, capsys):
        code = main(temp_dir / "missing.bin")

        assert code == 1
        assert "Failed to load" in capsys.readouterr().err

    def test_warning_is_printed(self, write_point_file, capsys):
        path = write_point_file(raw=struct.pack("<I", 4) + struct.pack("<fffI", 1.0, 1.0, 1.0, 1))

        assert main(path, show=0) == 0
        assert "size_mismatch" in capsys.readouterr().out

    def test_limit_option(self, write_point_file, capsys):
        path = write_point_file(records=[(0.0, 0.0, 0.0, 0)] * 3)

        assert main(path, max_point_count=2) == 1
        assert "Point count exceeds maximum" in capsys.readouterr().err
