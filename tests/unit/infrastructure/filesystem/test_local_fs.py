import asyncio

import pytest

from stardust.infrastructure.filesystem.local_fs import LocalFileSystem, load_catalog, load_repositories


@pytest.fixture
def fs():
    return LocalFileSystem()


def test_write_then_read(fs, tmp_path):
    target = tmp_path / "nested" / "file.txt"
    asyncio.run(fs.write_file(str(target), "hello"))
    assert asyncio.run(fs.read_file(str(target))) == "hello"


def test_read_missing_file(fs, tmp_path):
    with pytest.raises(FileNotFoundError):
        asyncio.run(fs.read_file(str(tmp_path / "nope.txt")))


def test_read_structured_json_and_yaml(fs, tmp_path):
    (tmp_path / "a.json").write_text('{"categories": [{"name": "X"}]}', encoding="utf-8")
    (tmp_path / "b.yaml").write_text("categories:\n  - name: X\n", encoding="utf-8")
    assert asyncio.run(fs.read_structured(str(tmp_path / "a.json"))) == {"categories": [{"name": "X"}]}
    assert asyncio.run(fs.read_structured(str(tmp_path / "b.yaml"))) == {"categories": [{"name": "X"}]}


def test_read_structured_invalid(fs, tmp_path):
    (tmp_path / "bad.yaml").write_text("key: [unclosed", encoding="utf-8")
    with pytest.raises(ValueError):
        asyncio.run(fs.read_structured(str(tmp_path / "bad.yaml")))


def test_load_repositories(fs, input_files):
    repos_file, _ = input_files
    repos = asyncio.run(load_repositories(fs, str(repos_file)))
    assert [r.id for r in repos] == ["owner/alpha", "owner/beta"]
    assert repos[0].language == "Python"
    assert repos[0].stars == 120


def test_load_repositories_from_mapping(fs, tmp_path):
    (tmp_path / "repos.yaml").write_text(
        "repositories:\n  - owner: pallets\n    name: flask\n", encoding="utf-8"
    )
    repos = asyncio.run(load_repositories(fs, str(tmp_path / "repos.yaml")))
    assert repos[0].id == "pallets/flask"


def test_load_catalog_accepts_plain_list_of_names(fs, tmp_path):
    (tmp_path / "catalog.yaml").write_text("- 'Lang: Rust'\n- name: 'AI: LLM'\n", encoding="utf-8")
    catalog = asyncio.run(load_catalog(fs, str(tmp_path / "catalog.yaml")))
    assert [c.name for c in catalog] == ["Lang: Rust", "AI: LLM"]


def test_load_catalog_rejects_other_shapes(fs, tmp_path):
    (tmp_path / "catalog.yaml").write_text("categories: 3\n", encoding="utf-8")
    with pytest.raises(ValueError):
        asyncio.run(load_catalog(fs, str(tmp_path / "catalog.yaml")))
