"""Tests for algorithm selection, the model registry and the OpenCV adapters."""
import cv2
import numpy as np
import pytest

from core.exceptions import ConfigurationError, PredictionError, TrainingDataError
from database.training_set import load_training_set
from recognition import Algorithm, ModelLoadError, registry
from recognition.opencv_adapters import EigenFaceAdapter, FisherFaceAdapter, LBPHFaceAdapter

requires_cv2_face = pytest.mark.skipif(
    not hasattr(cv2, "face"), reason="cv2.face requires opencv-contrib-python"
)

ADAPTERS = {
    Algorithm.FISHER: FisherFaceAdapter,
    Algorithm.EIGEN: EigenFaceAdapter,
    Algorithm.LBPH: LBPHFaceAdapter,
}


@pytest.mark.parametrize("name", ["Fisher", "Eigen", "LBPH"])
def test_algorithm_parse_exact_names(name):
    assert Algorithm.parse(name).value == name


@pytest.mark.parametrize("name", ["fisher", "lbph", "EIGEN", "", "SVM"])
def test_algorithm_parse_rejects_other_names(name):
    with pytest.raises(ConfigurationError):
        Algorithm.parse(name)


def test_every_algorithm_is_registered():
    models = registry.list_models()

    for algorithm, adapter in ADAPTERS.items():
        assert models[algorithm.value] is adapter
        assert registry.get_class(algorithm.value) is adapter


def test_registry_rejects_unknown_algorithm():
    with pytest.raises(ConfigurationError):
        registry.create("SVM")


@pytest.mark.parametrize("params", [{"radius": "abc"}, {"radious": 2}])
def test_registry_rejects_bad_model_params(params):
    with pytest.raises(ConfigurationError, match="Invalid parameters"):
        registry.create("LBPH", **params)


def test_load_without_contrib_module(monkeypatch):
    monkeypatch.delattr(cv2, "face", raising=False)

    with pytest.raises(ModelLoadError, match="opencv-contrib-python"):
        LBPHFaceAdapter().load()


def test_predict_before_training():
    with pytest.raises(PredictionError):
        FisherFaceAdapter().predict(np.zeros((32, 32), dtype=np.uint8))


def test_train_rejects_mismatched_inputs():
    images = [np.zeros((32, 32), dtype=np.uint8)] * 2

    with pytest.raises(TrainingDataError):
        EigenFaceAdapter().train(images, [0])

    with pytest.raises(TrainingDataError):
        EigenFaceAdapter().train([], [])


@requires_cv2_face
@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_registry_creates_requested_model_type(algorithm):
    model = registry.create(algorithm.value)

    assert isinstance(model, ADAPTERS[algorithm])
    assert model.info.algorithm is algorithm
    assert model.is_loaded
    assert not model.is_trained


@requires_cv2_face
def test_registry_returns_fresh_instances():
    assert registry.create("LBPH") is not registry.create("LBPH")


@requires_cv2_face
def test_registry_passes_model_parameters():
    model = registry.create(Algorithm.LBPH, radius=2, neighbors=4, grid_x=4, grid_y=4)

    assert model._recognizer.getRadius() == 2
    assert model._recognizer.getNeighbors() == 4
    assert model._recognizer.getGridX() == 4


@requires_cv2_face
@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_trained_model_predicts_training_labels(algorithm, training_dir, make_face):
    training_set = load_training_set(training_dir)
    model = registry.create(algorithm)
    model.train(training_set.images, training_set.labels)

    assert model.is_trained
    for label in (0, 1, 2):
        prediction = model.predict(make_face(label, seed=9000 + label))
        assert prediction.label == label


@requires_cv2_face
def test_lbph_differs_from_fisher(training_dir, make_face):
    training_set = load_training_set(training_dir)
    fisher = registry.create("Fisher")
    lbph = registry.create("LBPH")
    fisher.train(training_set.images, training_set.labels)
    lbph.train(training_set.images, training_set.labels)

    # Only LBPH keeps per-sample histograms, only Fisher has a projection
    assert len(lbph._recognizer.getHistograms()) == len(training_set)
    assert not hasattr(fisher._recognizer, "getHistograms")
    assert hasattr(fisher._recognizer, "getEigenVectors")
    assert not hasattr(lbph._recognizer, "getEigenVectors")

    query = make_face(1, seed=4242)
    assert fisher.predict(query).confidence != lbph.predict(query).confidence


@requires_cv2_face
def test_fisher_needs_two_labels(make_face):
    images = [make_face(0, seed=s) for s in range(3)]

    with pytest.raises(TrainingDataError):
        registry.create("Fisher").train(images, [0, 0, 0])


@requires_cv2_face
def test_eigen_needs_equal_sizes(make_face):
    images = [make_face(0, seed=1), make_face(1, seed=2, size=16)]

    with pytest.raises(TrainingDataError):
        registry.create("Eigen").train(images, [0, 1])


@requires_cv2_face
def test_prediction_failure_keeps_model_trained(training_dir, make_face):
    training_set = load_training_set(training_dir)
    model = registry.create("Fisher")
    model.train(training_set.images, training_set.labels)

    with pytest.raises(PredictionError):
        model.predict(make_face(0, seed=1, size=16))

    assert model.is_trained
    assert model.predict(make_face(0, seed=2)).label == 0


@requires_cv2_face
def test_unload_resets_model(training_dir):
    training_set = load_training_set(training_dir)
    model = registry.create("LBPH")
    model.train(training_set.images, training_set.labels)

    model.unload()
    model.unload()

    assert not model.is_loaded
    assert not model.is_trained
