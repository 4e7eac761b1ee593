import json
import os

import numpy as np
from PIL import Image

import bake_terrain
from terrain_generator.generator import TerrainGenerator


def test_bake_writes_a_complete_package(tmp_path, logger):
    config = {"seed": "bake-seed", "width": 24, "depth": 16, "erosion_iterations": 1}
    generator = TerrainGenerator(config, logger)
    manifest = bake_terrain.bake_terrain(generator, str(tmp_path), logger)

    for mode in bake_terrain.VIEW_MODES:
        path = tmp_path / manifest["previews"][mode]["file"]
        assert path.is_file()
        with Image.open(path) as img:
            assert img.size == (24, 16)

    with np.load(tmp_path / "mesh.npz") as mesh_file:
        assert mesh_file["indices"].shape[1] == 3
        assert mesh_file["positions"].shape[0] == manifest["vertex_count"]

    heights = np.load(tmp_path / "height_field.npy")
    assert heights.shape == (16, 24)

    with open(tmp_path / "manifest.json") as f:
        assert json.load(f)["dimensions_cells"] == [24, 16]
    with open(tmp_path / "generation_config.json") as f:
        birth_certificate = json.load(f)
    assert birth_certificate["seed"] == "bake-seed"
    assert birth_certificate["width"] == 24


def test_cli_rejects_a_missing_config(tmp_path):
    missing = os.path.join(str(tmp_path), "nope.json")
    assert bake_terrain.main(["--config", missing]) == 1


def test_cli_rejects_malformed_json(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{ not json")
    assert bake_terrain.main(["--config", str(broken)]) == 1


def test_cli_bakes_from_a_config_file(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"terrain_generation_parameters": {"seed": 7, "width": 12, "depth": 12}}))
    output = tmp_path / "out"
    assert bake_terrain.main(["--config", str(config_path), "--output", str(output)]) == 0
    assert (output / "manifest.json").is_file()
