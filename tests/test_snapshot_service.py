import pytest

from cvenhancer.services.snapshot_service import SnapshotService


def test_empty_directory_lists_nothing(tmp_path):
    assert SnapshotService(tmp_path / "missing").get_file_list() == []


def test_save_list_and_read(tmp_path, sample_resume):
    service = SnapshotService(tmp_path)

    assert service.save_file("jane", sample_resume) == "jane.json"
    assert service.save_file("alex.json", {"personalInfo": {"name": "Alex"}}) == "alex.json"

    assert service.get_file_list() == [
        {"name": "alex.json", "displayName": "alex"},
        {"name": "jane.json", "displayName": "jane"},
    ]
    assert service.get_file_content("jane.json") == sample_resume


def test_missing_snapshot(tmp_path):
    with pytest.raises(FileNotFoundError):
        SnapshotService(tmp_path).get_file_content("nobody.json")


def test_paths_cannot_escape_directory(tmp_path):
    service = SnapshotService(tmp_path / "snapshots")

    assert service.save_file("../../evil", {"a": 1}) == "evil.json"
    assert (tmp_path / "snapshots" / "evil.json").exists()
    with pytest.raises(ValueError):
        service.get_file_content("..")
