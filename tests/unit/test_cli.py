"""Tests for the command-line interface."""

import json
import logging

import pytest
from typer.testing import CliRunner

from glyphmesh import __version__
from glyphmesh.cli.app import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolate_logging():
    """Keep handlers added by the CLI from leaking into other tests."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


class TestTessellateCommand:
    """Tests for the tessellate command."""

    def test_version(self):
        """Test --version prints the version and exits."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_file(self, tmp_path):
        """Test a missing font file exits with an error."""
        result = runner.invoke(app, [str(tmp_path / "missing.ttf"), "o"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_verbose_and_quiet(self, ttf_path):
        """Test --verbose and --quiet cannot be combined."""
        result = runner.invoke(app, [str(ttf_path), "o", "-v", "-q"])
        assert result.exit_code == 1

    def test_invalid_normals(self, ttf_path):
        """Test unknown normal modes are rejected."""
        result = runner.invoke(app, [str(ttf_path), "o", "--normals", "phong"])

        assert result.exit_code == 1
        assert "Invalid normals" in result.output

    def test_invalid_orphan_policy(self, ttf_path):
        """Test unknown orphan hole policies are rejected."""
        result = runner.invoke(app, [str(ttf_path), "o", "--orphan-holes", "keep"])
        assert result.exit_code == 1

    def test_not_a_font(self, tmp_path):
        """Test a file that is not a font exits with an error."""
        path = tmp_path / "broken.ttf"
        path.write_bytes(b"definitely not a font")

        result = runner.invoke(app, [str(path), "o", "-q"])

        assert result.exit_code == 1
        assert "Could not load font" in result.output

    def test_json_output(self, ttf_path, tmp_path):
        """Test meshes and the character map are written as JSON."""
        output = tmp_path / "meshes.json"

        result = runner.invoke(
            app, [str(ttf_path), "oio z", "-q", "--workers", "1", "--output", str(output)]
        )

        assert result.exit_code == 0, result.output
        document = json.loads(output.read_text(encoding="utf-8"))
        assert document["version"] == __version__
        assert document["characters"] == {
            "o": "o",
            "i": "i",
            " ": "space",
            "z": ".notdef",
        }
        assert set(document["glyphs"]) == {"o", "i", "space", ".notdef"}
        assert document["glyphs"]["o"]["mesh"]["triangles"]
        assert document["glyphs"]["space"]["mesh"]["triangles"] == []
        assert document["config"]["outer_winding"] == "cw"

    def test_extruded_output(self, otf_path, tmp_path):
        """Test --depth writes 3D meshes with normals."""
        output = tmp_path / "meshes.json"

        result = runner.invoke(
            app,
            [
                str(otf_path),
                "o",
                "-q",
                "-j",
                "1",
                "--depth",
                "0.2",
                "--normalize",
                "--normals",
                "smooth",
                "-o",
                str(output),
            ],
        )

        assert result.exit_code == 0, result.output
        mesh = json.loads(output.read_text(encoding="utf-8"))["glyphs"]["o"]["mesh"]
        assert mesh["dimension"] == 3
        assert mesh["vertex_normals"] is not None
        assert max(v[2] for v in mesh["vertices"]) == pytest.approx(0.2)

    def test_verbose_table(self, ttf_path):
        """Test verbose output lists every character."""
        result = runner.invoke(app, [str(ttf_path), "il", "-v", "--workers", "1"])

        assert result.exit_code == 0, result.output
        assert "Complete" in result.output
        assert "'i'" in result.output
        assert "'l'" in result.output
