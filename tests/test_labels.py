import pytest

from img_recognition.data.labels import load_labels
from img_recognition.errors import LabelLoadError


def test_load_labels_keeps_order(labels_file):
    assert load_labels(labels_file) == ["cat", "dog", "bird", "car", "plane", "tree"]


def test_load_labels_strips_line_endings(tmp_path):
    path = tmp_path / "labels.txt"
    path.write_bytes(b"dummy\r\nkit fox\r\nEnglish setter")
    assert load_labels(path) == ["dummy", "kit fox", "English setter"]


def test_load_labels_missing_file(tmp_path):
    with pytest.raises(LabelLoadError):
        load_labels(tmp_path / "missing.txt")


def test_load_labels_invalid_utf8(tmp_path):
    path = tmp_path / "labels.txt"
    path.write_bytes(b"\xff\xfe\xfa")
    with pytest.raises(LabelLoadError):
        load_labels(path)
