"""
Integration tests for generate_storyboard.py

Builds a small project on disk and runs the CLI entry point end to end.
"""

import json

import pytest
from generate_storyboard import main, generate_project
from storyboard_types import InvalidConfigError


SRT_CONTENT = """1
00:00:00,500 --> 00:00:02,000
Hello there
"""


@pytest.fixture
def project_dir(tmp_path):
    """Project folder with spectrum, lyrics and hit object inputs"""
    (tmp_path / "spectrum.json").write_text(json.dumps({
        "fps": 10,
        "spectrumFrames": [[0.1, 0.5], [0.1, 0.5], [0.4, 0.5], [0.4, 0.2]] * 5,
    }))
    (tmp_path / "lyrics.srt").write_text(SRT_CONTENT, encoding="utf-8")
    (tmp_path / "hitobjects.json").write_text(json.dumps({
        "circles": [{"time": 500, "position": [100, 100]}],
        "sliders": [{"startTime": 1000, "endTime": 1500, "path": [[0, 0], [100, 0]]}],
    }))
    return tmp_path


def write_project(directory, effects, output="out/storyboard.osb"):
    path = directory / "project.json"
    path.write_text(json.dumps({"output": output, "effects": effects}))
    return path


FULL_EFFECTS = [
    {"type": "particles", "start": 0, "end": 2000, "sprite": "sb/dot.png",
     "options": {"particle_count": 5, "angle_spread": [90, 60], "spawn_origin": [320, 240],
                 "speed": 100}},
    {"type": "spectrum", "start": 0, "end": 1500, "sprite": "sb/bar.png",
     "schema": "spectrum.json", "options": {"bar_count": 2}},
    {"type": "lyrics", "source": "lyrics.srt"},
    {"type": "highlight", "start": 0, "end": 2000, "sprite": "sb/hl.png",
     "hitobjects": "hitobjects.json"},
]


class TestMain:
    """Test the command line entry point"""

    def test_full_project(self, project_dir):
        project = write_project(project_dir, FULL_EFFECTS)

        assert main([str(project), "--seed", "7", "--quiet"]) == 0

        text = (project_dir / "out" / "storyboard.osb").read_text(encoding="utf-8")
        assert text.startswith("[Events]")
        assert '"sb/dot.png"' in text
        assert '"sb/bar.png"' in text
        assert '"sb/lyrics/_0.png"' in text
        assert '"sb/hl.png"' in text

    def test_explicit_output(self, project_dir):
        project = write_project(project_dir, [FULL_EFFECTS[1]])
        output = project_dir / "custom.osb"

        assert main([str(project), "-o", str(output), "--quiet"]) == 0
        assert output.exists()

    def test_spectrum_keyframes_follow_frame_times(self, project_dir):
        """A window starting between samples keyframes at the sample times"""
        effect = dict(FULL_EFFECTS[1], start=50)
        project = write_project(project_dir, [effect])

        assert main([str(project), "--quiet"]) == 0

        lines = (project_dir / "out" / "storyboard.osb").read_text(encoding="utf-8").splitlines()
        assert " F,0,50,,1" in lines
        assert " V,0,100,200,20,8,20,32" in lines

    def test_seed_is_reproducible(self, project_dir):
        project = write_project(project_dir, [FULL_EFFECTS[0]])
        first = project_dir / "a.osb"
        second = project_dir / "b.osb"

        main([str(project), "-o", str(first), "--seed", "3", "--quiet"])
        main([str(project), "-o", str(second), "--seed", "3", "--quiet"])

        assert first.read_text() == second.read_text()

    def test_missing_project(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.json")]) == 1
        assert "ERROR" in capsys.readouterr().out

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "project.json"
        path.write_text("{not json")
        assert main([str(path), "--quiet"]) == 1

    def test_unknown_effect(self, project_dir, capsys):
        project = write_project(project_dir, [{"type": "fireworks"}])
        assert main([str(project), "--quiet"]) == 1
        assert "fireworks" in capsys.readouterr().out

    def test_invalid_options(self, project_dir):
        effect = dict(FULL_EFFECTS[0], options={"particle_count": 5, "bogus": 1})
        project = write_project(project_dir, [effect])
        assert main([str(project), "--quiet"]) == 1

    @pytest.mark.parametrize("options,parameter", [
        ({"layer": "Bogus"}, "layer"),
        ({"easing": 99}, "easing"),
        ({"angle_range": [10]}, "angle_range"),
        ({"stage": {"width": 800}}, "stage"),
    ])
    def test_bad_option_values(self, project_dir, capsys, options, parameter):
        """Unconvertible option values are reported, not raised"""
        effect = dict(FULL_EFFECTS[0], options=options)
        project = write_project(project_dir, [effect])

        assert main([str(project), "--quiet"]) == 1
        out = capsys.readouterr().out
        assert "ERROR: [particles]" in out
        assert f"(parameter: {parameter})" in out

    def test_reversed_window(self, project_dir):
        effect = dict(FULL_EFFECTS[0], start=2000, end=1000)
        project = write_project(project_dir, [effect])
        assert main([str(project), "--quiet"]) == 1

    def test_missing_input_file(self, project_dir):
        effect = dict(FULL_EFFECTS[1], schema="nope.json")
        project = write_project(project_dir, [effect])
        assert main([str(project), "--quiet"]) == 1

    def test_missing_required_field(self, project_dir, capsys):
        project = write_project(project_dir, [{"type": "particles", "sprite": "sb/dot.png"}])
        assert main([str(project), "--quiet"]) == 1
        assert "start" in capsys.readouterr().out


class TestGenerateProject:
    """Test effect dispatch"""

    def test_effects_concatenated_in_order(self, project_dir):
        elements = generate_project({"effects": FULL_EFFECTS[1:3]}, project_dir, verbose=False)
        assert elements[0].asset == "sb/bar.png"
        assert elements[-1].asset == "sb/lyrics/_0.png"

    def test_unknown_type_parameter(self, project_dir):
        with pytest.raises(InvalidConfigError) as exc_info:
            generate_project({"effects": [FULL_EFFECTS[2], {"type": "x"}]}, project_dir, verbose=False)
        assert exc_info.value.parameter == "effects[1].type"

    def test_empty_project(self, project_dir):
        assert generate_project({}, project_dir, verbose=False) == []
