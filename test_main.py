"""Tests for the command line entry point and the training-set builder."""
import cv2
import pytest
import yaml
from PIL import Image

import main
from database.training_set import load_label_names, load_training_set
from scripts.build_training_set import build_from_known

requires_cv2_face = pytest.mark.skipif(
    not hasattr(cv2, "face"), reason="cv2.face requires opencv-contrib-python"
)


@pytest.fixture
def config_path(tmp_path, processor_config):
    path = tmp_path / "processor.yaml"
    path.write_text(yaml.safe_dump(processor_config))
    return path


@pytest.fixture
def input_dir(tmp_path, make_face):
    root = tmp_path / "incoming"
    root.mkdir()
    Image.fromarray(make_face(0, seed=7000)).save(root / "a.png")
    Image.fromarray(make_face(2, seed=7002)).save(root / "b.png")
    (root / "c.png").write_bytes(b"broken")
    return root


def test_build_config_overrides(config_path):
    args = main.parse_args([
        "--config", str(config_path), "--input", "frames",
        "--algorithm", "LBPH", "--training-set", "elsewhere", "--no-save-images",
    ])

    config = main.build_config(args)

    assert config.get("processor.algorithm") == "LBPH"
    assert config.get("processor.training_set") == "elsewhere"
    assert config.get("processor.save_images") is False


def test_setup_failure_exits_non_zero(config_path, input_dir, tmp_path):
    status = main.main([
        "--config", str(config_path), "--input", str(input_dir),
        "--training-set", str(tmp_path / "missing"),
    ])

    assert status == 1


@requires_cv2_face
def test_cli_recognises_directory(config_path, input_dir, tmp_path, capsys):
    status = main.main([
        "--config", str(config_path), "--input", str(input_dir),
        "--algorithm", "LBPH", "--no-save-images",
    ])

    assert status == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("a.png: label=0 ")
    assert lines[1].startswith("b.png: label=2 ")
    assert lines[2].startswith("c.png: error=")
    assert not (tmp_path / "out").exists()


def test_build_training_set(tmp_path, make_face):
    known = tmp_path / "known"
    for person, label in (("alice", 0), ("bob-smith", 1)):
        (known / person).mkdir(parents=True)
        for n in range(2):
            Image.fromarray(make_face(label, seed=n)).save(known / person / f"{n}.jpg")
    (known / "alice" / "broken.png").write_bytes(b"broken")

    output = tmp_path / "training"
    names = build_from_known(known, output, size=(20, 24))

    assert names == {0: "alice", 1: "bob_smith"}
    assert load_label_names(output / "labels.yaml") == names

    training_set = load_training_set(output)
    assert training_set.labels == [0, 0, 1, 1]
    assert all(image.shape == (24, 20) for image in training_set.images)


def test_directory_session_reads_files_when_processed(processor_config, input_dir):
    from core.config import AppConfig
    from processor import REL_FAILURE, REL_SUCCESS, DirectorySession, FaceRecognitionProcessor
    from test_processor import ModelFactory

    session = DirectorySession(input_dir)
    (input_dir / "a.png").unlink()
    processor_config["processor"]["save_images"] = False
    processor = FaceRecognitionProcessor(AppConfig(processor_config), model_factory=ModelFactory())

    assert processor.run(session) == 3

    results = {item.attributes["filename"]: rel for item, rel in session.results()}
    assert results == {"a.png": REL_FAILURE, "b.png": REL_SUCCESS, "c.png": REL_FAILURE}
    [missing, _] = session.transferred(REL_FAILURE)
    assert missing.content == b""
    assert "Cannot read" in missing.attributes["face.error"]
