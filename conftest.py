import io
import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

# Get the project root directory
project_root = Path(__file__).parent.absolute()

# Add project root to Python path
sys.path.insert(0, str(project_root))

FACE_SIZE = 32


def synthetic_face(label: int, seed: int, size: int = FACE_SIZE) -> np.ndarray:
    """
    Creates a grayscale "face" whose structure depends on the label:
    horizontal stripes, vertical stripes or a checkerboard, plus mild noise.
    """
    rng = np.random.default_rng(seed)
    y, x = np.mgrid[0:size, 0:size]
    pattern = label % 3
    if pattern == 0:
        base = ((y // 4) % 2) * 200 + 20
    elif pattern == 1:
        base = ((x // 4) % 2) * 200 + 20
    else:
        base = (((x // 4) + (y // 4)) % 2) * 200 + 20
    noise = rng.integers(-10, 11, size=(size, size))
    return np.clip(base + noise, 0, 255).astype(np.uint8)


def png_bytes(matrix: np.ndarray) -> bytes:
    buffer = io.BytesIO()
    Image.fromarray(matrix).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def make_face():
    """Factory fixture for synthetic grayscale faces."""
    return synthetic_face


@pytest.fixture
def encode_png():
    """Factory fixture encoding a matrix as PNG bytes."""
    return png_bytes


@pytest.fixture
def training_dir(tmp_path):
    """
    Creates a flat training directory with 3 labels x 4 images named
    <label>-person<label>-<n>.png, plus a non-image file that must be ignored.
    Returns the directory path.
    """
    root = tmp_path / "training"
    root.mkdir()

    for label in range(3):
        for n in range(4):
            img = Image.fromarray(synthetic_face(label, seed=label * 100 + n))
            img.save(root / f"{label}-person{label}-{n}.png")

    (root / "notes.txt").write_text("not an image")
    return root


@pytest.fixture
def processor_config(training_dir, tmp_path):
    """
    Builds a processor config dict pointing at the synthetic training set,
    with saved frames going to tmp_path/out.
    """
    return {
        "processor": {
            "training_set": str(training_dir),
            "algorithm": "Fisher",
            "save_images": True,
            "output_directory": str(tmp_path / "out"),
        }
    }
