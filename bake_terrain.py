# bake_terrain.py

"""
================================================================================
OFFLINE TERRAIN BAKER SCRIPT
================================================================================
This script is a command-line tool for generating a terrain once and saving
everything a host needs to a directory ("baking"): preview images of every
map layer, the surface mesh buffers, the world height field, a manifest and
the "birth certificate" generation_config.json.

Usage:
    python bake_terrain.py --config path/to/your/config.json
    python bake_terrain.py --config terrain_config.json --output baked_terrain/island
================================================================================
"""
import os
import sys
import json
import logging
import argparse
import hashlib
import time
import numpy as np
from PIL import Image
from tqdm import tqdm

from terrain_generator.generator import TerrainGenerator, TerrainData
from terrain_generator import color_maps

# Stages reported by TerrainGenerator.generate(), in order. Tectonics and
# rivers are skipped when disabled, so the bar may finish short.
PIPELINE_STAGES = (
    "elevation", "tectonics", "erosion", "biomes", "biome_modifications",
    "weathering", "rivers", "coastline", "collision", "mesh",
)

VIEW_MODES = ("biome", "height", "rivers", "materials")


def save_preview(color_array: np.ndarray, path: str) -> str:
    """
    Saves a preview image with Pillow and returns its content hash.
    """
    # Pillow works with (height, width, channels) arrays, so we need to transpose
    # the input array from (width, height, channels) to what Pillow expects.
    img_data = np.ascontiguousarray(np.transpose(color_array, (1, 0, 2)))
    img = Image.fromarray(img_data, 'RGB')

    # Palettize low-color layers (biomes, materials) for smaller files.
    if img.getcolors(256):
        img = img.convert('P', palette=Image.Palette.ADAPTIVE, colors=256)
    img.save(path, 'PNG', optimize=True)

    return hashlib.sha256(img_data.tobytes()).hexdigest()


def preview_color_arrays(terrain: TerrainData) -> dict:
    """Builds the (width, depth, 3) preview array of every view mode."""
    return {
        "biome": color_maps.get_biome_color_array(terrain.biome_map, color_maps.create_biome_color_lut()),
        "height": color_maps.get_height_color_array(terrain.surface),
        "rivers": color_maps.get_river_color_array(terrain.river_map),
        "materials": color_maps.get_material_color_array(terrain.material_map, color_maps.create_material_color_lut()),
    }


def save_mesh(terrain: TerrainData, path: str):
    mesh = terrain.mesh
    np.savez_compressed(
        path,
        positions=mesh.positions,
        normals=mesh.normals,
        uvs=mesh.uvs,
        colors=mesh.colors,
        material_ids=mesh.material_ids,
        indices=mesh.indices,
        water_plane_positions=terrain.water_plane.positions,
        water_plane_indices=terrain.water_plane.indices,
    )


def bake_terrain(generator: TerrainGenerator, output_dir: str, logger: logging.Logger) -> dict:
    """
    Generates the terrain and writes a complete baked terrain package.
    Returns the manifest.
    """
    start_time = time.perf_counter()

    # 1. Create directory structure
    previews_dir = os.path.join(output_dir, "previews")
    os.makedirs(previews_dir, exist_ok=True)
    logger.info(f"Output directory set to '{output_dir}'")

    # 2. Run the pipeline with a progress bar over its stages
    with tqdm(total=len(PIPELINE_STAGES), desc="Generating Terrain") as progress:
        def on_stage(name):
            progress.set_postfix_str(name)
            progress.update(1)
        terrain = generator.generate(on_stage=on_stage)

    spawn = generator.find_spawn_point()

    # 3. Preview images
    logger.info("Saving preview images...")
    previews = {}
    for mode, color_array in preview_color_arrays(terrain).items():
        filename = f"{mode}.png"
        previews[mode] = {
            "file": os.path.join("previews", filename),
            "sha256": save_preview(color_array, os.path.join(previews_dir, filename)),
        }

    # 4. Geometry and height data
    save_mesh(terrain, os.path.join(output_dir, "mesh.npz"))
    np.save(os.path.join(output_dir, "height_field.npy"), terrain.collision_heights.astype(np.float32))

    # 5. Manifest
    params = terrain.params
    manifest = {
        "terrain_name": f"seed_{params.seed}",
        "dimensions_cells": [params.width, params.depth],
        "height_range": [params.height_offset, params.height_offset + params.height],
        "water_height": params.water_height,
        "collision_mode": params.collision_mode,
        "vertex_count": terrain.mesh.vertex_count,
        "triangle_count": terrain.mesh.triangle_count,
        "spawn_point": [spawn.x, spawn.y, spawn.z],
        "previews": previews,
        "mesh": "mesh.npz",
        "height_field": "height_field.npy",
        "timings_seconds": {name: round(seconds, 4) for name, seconds in terrain.timings.items()},
    }
    manifest_path = os.path.join(output_dir, "manifest.json")
    with open(manifest_path, 'w') as f:
        json.dump(manifest, f, indent=2)

    # 6. Save the "birth certificate" generation_config.json
    gen_config_path = os.path.join(output_dir, "generation_config.json")
    with open(gen_config_path, 'w') as f:
        json.dump(params.to_dict(), f, indent=4)

    end_time = time.perf_counter()
    logger.info("--- Bake Complete ---")
    logger.info(f"Mesh: {terrain.mesh.vertex_count} vertices, {terrain.mesh.triangle_count} triangles")
    logger.info(f"Total time: {end_time - start_time:.2f} seconds.")
    return manifest


def main(argv=None):
    parser = argparse.ArgumentParser(description="Offline Terrain Baker for the Realistic Terrain Generator.")
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to the JSON configuration file for the terrain to be baked."
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory. Defaults to baked_terrain/seed_<seed>."
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    logger = logging.getLogger("TerrainBaker")

    logger.info(f"Loading configuration from: {args.config}")
    try:
        with open(args.config, 'r') as f:
            config = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.critical(f"Failed to load or parse config file: {e}")
        return 1

    terrain_params = config.get('terrain_generation_parameters', {})
    generator = TerrainGenerator(config=terrain_params, logger=logger)

    output_dir = args.output or os.path.join("baked_terrain", f"seed_{generator.params.seed}")
    bake_terrain(generator, output_dir, logger)
    return 0


# --- Command-Line Interface ---
if __name__ == "__main__":
    sys.exit(main())
