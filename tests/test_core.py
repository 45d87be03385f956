"""
Tests for VisionFlow core: configuration, data model, video input and CLI.
"""

import json

import cv2
import numpy as np
import pytest


class TestPackage:
    """Tests for package-level imports."""

    def test_package_level_import(self):
        """Test convenience imports."""
        import visionflow
        assert hasattr(visionflow, 'FeatureEngine')
        assert hasattr(visionflow, 'TrajectoryTracker')
        assert hasattr(visionflow, 'InvalidFrameSize')
        assert visionflow.__version__

    def test_project_readme(self):
        """Test that the package long description is the project README."""
        from pathlib import Path

        root = Path(__file__).resolve().parent.parent
        lines = (root / "pyproject.toml").read_text().splitlines()
        assert 'readme = "README.md"' in lines
        assert (root / "README.md").read_text().startswith("# VisionFlow")


class TestConfig:
    """Tests for configuration management."""

    def test_defaults(self):
        """Test default values."""
        from visionflow.core.config import Config

        config = Config()
        assert (config.engine.width, config.engine.height) == (480, 270)
        assert config.engine.frame_bytes == 480 * 270 * 4
        assert config.engine.max_features == 200
        assert config.tracker.max_history == 50
        assert config.tracker.max_inactive_frames is None
        assert config.params.persistence == 10

    def test_save_and_load(self, tmp_path):
        """Test JSON round trip."""
        from visionflow.core.config import Config, load_config

        config = Config()
        config.params.persistence = 4
        config.tracker.max_inactive_frames = 30
        path = tmp_path / "visionflow.json"
        config.save(path)

        loaded = load_config(path)
        assert loaded.params.persistence == 4
        assert loaded.tracker.max_inactive_frames == 30
        assert loaded.to_dict() == config.to_dict()

    def test_load_missing_file(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        from visionflow.core.config import load_config

        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.json")

    def test_partial_file_uses_defaults(self, tmp_path):
        """Test that omitted sections and unknown keys are tolerated."""
        from visionflow.core.config import load_config

        path = tmp_path / "partial.json"
        path.write_text(json.dumps({"params": {"sensitivity": 12, "bogus": 1}}))

        config = load_config(path)
        assert config.params.sensitivity == 12
        assert config.engine.patch_size == 7

    def test_invalid_values(self):
        """Test validation errors."""
        from visionflow.core.config import Config, EngineConfig, TrackerConfig
        from visionflow.core.errors import ConfigError

        with pytest.raises(ConfigError):
            EngineConfig(width=0).validate()
        with pytest.raises(ConfigError):
            EngineConfig(search_window=14).validate()
        with pytest.raises(ConfigError):
            TrackerConfig(max_history=0).validate()
        with pytest.raises(ConfigError):
            Config.from_dict({"tracker": {"max_inactive_frames": -1}})

    def test_env_overrides(self, monkeypatch):
        """Test VISIONFLOW_ environment overrides."""
        from visionflow.core.config import Config, apply_env_overrides, get_env_config

        monkeypatch.setenv("VISIONFLOW_PERSISTENCE", "3.5")
        monkeypatch.setenv("VISIONFLOW_SHOW_BOXES", "false")

        assert get_env_config()["persistence"] == "3.5"
        config = apply_env_overrides(Config())
        assert config.params.persistence == 3.5
        assert config.params.show_boxes is False

    def test_env_override_bad_value(self, monkeypatch):
        """Test that an unparsable override raises ConfigError."""
        from visionflow.core.config import Config, apply_env_overrides
        from visionflow.core.errors import ConfigError

        monkeypatch.setenv("VISIONFLOW_THRESHOLD", "high")
        with pytest.raises(ConfigError):
            apply_env_overrides(Config())

    def test_create_example_config(self, tmp_path):
        """Test writing an example config."""
        from visionflow.core.config import create_example_config, load_config

        path = tmp_path / "example.json"
        create_example_config(path)
        assert load_config(path).engine.search_window == 15


class TestTypes:
    """Tests for the data model."""

    def test_feature_speed(self):
        """Test L1 speed."""
        from visionflow.core.types import FeaturePoint

        assert FeaturePoint(id=0, x=0, y=0, vx=-3, vy=4).speed == 7

    def test_trajectory_to_dict(self):
        """Test trajectory serialisation."""
        from visionflow.core.types import Trajectory, TrajectoryPoint

        traj = Trajectory(id=2, points=[TrajectoryPoint(1.0, 2.0, 0.5)], color="#fff")
        d = traj.to_dict()

        assert d["id"] == 2
        assert d["points"] == [{"x": 1.0, "y": 2.0, "timestamp": 0.5}]
        assert d["active"] is True

    def test_stats_to_dict(self):
        """Test engine stats serialisation."""
        from visionflow.core.types import EngineStats

        d = EngineStats(frame=3, tracked=5, lost=1).to_dict()
        assert d == {"frame": 3, "tracked": 5, "lost": 1, "added": 0, "total": 0, "blobs": 0}


class TestVideo:
    """Tests for video input."""

    def test_to_analysis_frame(self):
        """Test resizing and RGBA conversion."""
        from visionflow.core.video import to_analysis_frame

        bgr = np.zeros((20, 40, 3), dtype=np.uint8)
        bgr[..., 0] = 255
        rgba = to_analysis_frame(bgr, (8, 4))

        assert rgba.shape == (4, 8, 4)
        assert (rgba[..., 2] == 255).all()
        assert (rgba[..., 0] == 0).all()
        assert (rgba[..., 3] == 255).all()

    def test_missing_file(self, tmp_path):
        """Test that opening a missing video raises."""
        from visionflow.core.video import VideoReader

        with pytest.raises(FileNotFoundError):
            VideoReader(tmp_path / "missing.avi").open()

    def test_properties_before_open(self, tmp_path):
        """Test that properties require an open reader."""
        from visionflow.core.video import VideoReader

        with pytest.raises(RuntimeError):
            VideoReader(tmp_path / "missing.avi").properties


def write_test_video(path, frames=6, size=(160, 90)):
    """Write a short MJPG video of a square moving right."""
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*'MJPG'), 10, size)
    rng = np.random.default_rng(3)
    square = rng.integers(0, 256, size=(30, 30, 3), dtype=np.uint8)
    for i in range(frames):
        frame = np.full((size[1], size[0], 3), 128, dtype=np.uint8)
        x = 20 + 3 * i
        frame[30:60, x:x + 30] = square
        writer.write(frame)
    writer.release()


class TestCLI:
    """Tests for the command line interface."""

    def test_parse_size(self):
        """Test WIDTHxHEIGHT parsing."""
        import argparse
        from visionflow.__main__ import parse_size

        assert parse_size("1920x1080") == (1920, 1080)
        with pytest.raises(argparse.ArgumentTypeError):
            parse_size("big")
        with pytest.raises(argparse.ArgumentTypeError):
            parse_size("0x10")

    def test_no_command(self, capsys):
        """Test that no command prints help."""
        from visionflow.__main__ import main

        assert main([]) == 0
        assert "track" in capsys.readouterr().out

    def test_config_command(self, tmp_path):
        """Test writing a config from the CLI."""
        from visionflow.__main__ import main

        path = tmp_path / "cfg.json"
        assert main(['config', '--create', str(path)]) == 0
        assert json.loads(path.read_text())["engine"]["width"] == 480

    def test_load_run_config(self, tmp_path):
        """Test that flags override the config file."""
        from visionflow.__main__ import build_parser, load_run_config
        from visionflow.core.config import Config

        path = tmp_path / "cfg.json"
        config = Config()
        config.params.sensitivity = 11
        config.params.persistence = 2
        config.save(path)

        args = build_parser().parse_args(['track', 'in.mp4', '-c', str(path), '-p', '5'])
        resolved = load_run_config(args)
        assert resolved.params.sensitivity == 11
        assert resolved.params.persistence == 5

    def test_track_command(self, tmp_path):
        """Test an end-to-end run over a small video."""
        from visionflow.__main__ import main

        video = tmp_path / "clip.avi"
        write_test_video(video)
        features = tmp_path / "features.csv"
        tracks = tmp_path / "tracks.csv"

        code = main([
            'track', str(video), '-q',
            '--features-csv', str(features),
            '--trajectories-csv', str(tracks),
        ])

        assert code == 0
        assert features.exists()
        header = features.read_text().splitlines()[0]
        assert header == "frame,timestamp,feature_id,x,y,vx,vy,score,age"
