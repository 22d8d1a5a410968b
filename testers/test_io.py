# -*- coding: utf-8 -*-
"""Файлы: gzip, архивы, Include, фоновая загрузка, конфиг и командная строка."""

import gzip
import io
import json
import tarfile

import pytest

from pbrtscene.cli import main
from pbrtscene.errors import PbrtError, PbrtSyntaxError
from pbrtscene.io import copy_file, load_pbrt, load_pbrt_async
from pbrtscene.multithread.task_pool import TaskPool
from pbrtscene.parse import pbrt_parse_file
from pbrtscene.scene.components import SceneComponent, ShapeComponent
from pbrtscene.utils.config import DEFAULT_CONFIG, Config


def _shapes(root):
    return [n for n in root.traverse() if n.has_component(ShapeComponent)]


def test_gzip_scene(tmp_path, concrete_scene_text):
    path = tmp_path / "scene.pbrt.gz"
    with gzip.open(path, "wt", encoding="utf-8") as f:
        f.write(concrete_scene_text)
    root = load_pbrt(path)
    assert len(_shapes(root)) == 1
    scene = root.get_component(SceneComponent)
    assert scene.props.find_one_string("filename") == "scene.pbrt.gz"


def test_tar_archive(tmp_path, scene_file, resource_dir):
    archive = tmp_path / "scene.tar.gz"
    with tarfile.open(archive, "w:gz") as tar:
        for name in ("scene.pbrt", "bunny.ply", "checks.png"):
            tar.add(resource_dir / name, arcname=f"scene/{name}")
    root = load_pbrt(archive)
    assert len(_shapes(root)) == 2


def test_archive_without_scene(tmp_path, resource_dir):
    archive = tmp_path / "empty.tar.gz"
    with tarfile.open(archive, "w:gz") as tar:
        tar.add(resource_dir / "bunny.ply", arcname="bunny.ply")
    with pytest.raises(PbrtError):
        load_pbrt(archive)


def test_include_inlined_for_recording_target(tmp_path, recording_target):
    (tmp_path / "part.pbrt").write_text('Shape "sphere"\n')
    main_file = tmp_path / "main.pbrt"
    main_file.write_text('WorldBegin\nInclude "part.pbrt"\nWorldEnd\n')
    pbrt_parse_file(main_file, recording_target)
    names = recording_target.names()
    assert "include" not in names
    assert names.count("work_dir_begin") == 2
    assert names.count("work_dir_end") == 2
    assert names.index("shape") > names.index("world_begin")


def test_recursive_include(tmp_path, recording_target):
    (tmp_path / "a.pbrt").write_text('Include "b.pbrt"\n')
    (tmp_path / "b.pbrt").write_text('Include "a.pbrt"\n')
    with pytest.raises(PbrtError):
        pbrt_parse_file(tmp_path / "a.pbrt", recording_target)


def test_missing_file_raises(tmp_path, recording_target):
    with pytest.raises(OSError):
        pbrt_parse_file(tmp_path / "nope.pbrt", recording_target)


def test_load_async(scene_file):
    with TaskPool(max_workers=1) as pool:
        future = load_pbrt_async(scene_file, pool=pool)
        root = future.result(timeout=30)
    assert len(_shapes(root)) == 2


def test_load_async_propagates_errors(tmp_path):
    bad = tmp_path / "bad.pbrt"
    bad.write_text("WorldBegin\nTranslate 1 2\n")
    with TaskPool(max_workers=1) as pool:
        future = load_pbrt_async(bad, pool=pool)
        with pytest.raises(PbrtSyntaxError):
            future.result(timeout=30)


def test_task_pool_releases_finished_futures(scene_file):
    pool = TaskPool(max_workers=2)
    futures = [load_pbrt_async(scene_file, pool=pool) for _ in range(3)]
    pool.wait_all()
    pool.shutdown(wait=True)
    assert all(f.done() for f in futures)
    assert pool.pending_count == 0


def test_task_pool_wait_all_raises_task_error():
    def boom():
        raise ValueError("boom")

    with TaskPool(max_workers=1) as pool:
        pool.submit(boom)
        with pytest.raises(ValueError):
            pool.wait_all()


# ----------------------------------------------------------------------
# Копирование и конфиг
# ----------------------------------------------------------------------
def test_copy_file(tmp_path):
    src = tmp_path / "a.txt"
    src.write_text("x")
    dst = tmp_path / "deep" / "dir" / "a.txt"
    assert copy_file(src, dst) is True
    assert dst.read_text() == "x"
    assert copy_file(src, dst) is False
    with pytest.raises(FileNotFoundError):
        copy_file(tmp_path / "missing.txt", dst)


def test_config_defaults_created(tmp_path):
    path = tmp_path / "cfg.json"
    cfg = Config(path)
    assert path.exists()
    assert cfg["save"] == DEFAULT_CONFIG["save"]
    assert json.loads(path.read_text()) == DEFAULT_CONFIG


def test_config_section_merges_defaults(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"save": {"pretty_print": False}}))
    cfg = Config(path, create=False)
    section = cfg.section("save")
    assert section == {"pretty_print": False, "copy_resources": True}


def test_config_broken_file_falls_back(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text("{not json")
    cfg = Config(path, create=False)
    assert cfg.data == DEFAULT_CONFIG


# ----------------------------------------------------------------------
# Командная строка
# ----------------------------------------------------------------------
@pytest.fixture
def cli_config(tmp_path):
    return str(tmp_path / "missing-config.json")


def test_cli_print(scene_file, cli_config):
    out = io.StringIO()
    assert main(["--config", cli_config, "print", str(scene_file)], out=out) == 0
    text = out.getvalue()
    assert "WorldBegin" in text
    assert '    Shape "plymesh"' in text


def test_cli_convert(scene_file, cli_config, tmp_path):
    target = tmp_path / "converted" / "scene.pbrt"
    out = io.StringIO()
    code = main(["--config", cli_config, "convert", str(scene_file), str(target), "--compact"],
                out=out)
    assert code == 0
    assert target.exists()
    assert (target.parent / "bunny.ply").exists()
    assert "# Geometries" not in target.read_text()


def test_cli_info(scene_file, cli_config):
    out = io.StringIO()
    assert main(["--config", cli_config, "info", str(scene_file)], out=out) == 0
    lines = out.getvalue().splitlines()
    assert "meshes: 1" in lines
    assert "textures: 1" in lines
    assert "warnings: 0" in lines


def test_cli_syntax_error(tmp_path, cli_config):
    bad = tmp_path / "bad.pbrt"
    bad.write_text("Bogus 1 2 3\n")
    assert main(["--config", cli_config, "info", str(bad)], out=io.StringIO()) == 1


def test_cli_missing_file(tmp_path, cli_config):
    assert main(["--config", cli_config, "print", str(tmp_path / "nope.pbrt")],
                out=io.StringIO()) == 1
