"""Image and animation output for simulation runs."""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np
from PIL import Image

from .automaton import Rule
from .config import DEFAULT_DENSITY
from .grid import Grid
from .world import World

logger = logging.getLogger(__name__)

DEAD_COLOR = 30
LIVE_COLOR = 255


def render_grid(grid: np.ndarray, cell_size: int = 4) -> np.ndarray:
    """Render a (height, width) 0/1 grid as an RGB image array."""
    h, w = grid.shape
    img = np.full((h * cell_size, w * cell_size, 3), DEAD_COLOR, dtype=np.uint8)
    upscaled = np.repeat(np.repeat(grid, cell_size, axis=0), cell_size, axis=1)
    img[upscaled == 1] = LIVE_COLOR
    return img


def save_image(grid: np.ndarray, filepath: str, cell_size: int = 4):
    """Save grid state as PNG image."""
    Image.fromarray(render_grid(grid, cell_size)).save(filepath)


def save_animation(
    history: List[np.ndarray],
    filepath: str,
    cell_size: int = 4,
    duration: int = 100,
    loop: int = 0,
):
    """Save simulation history as animated GIF."""
    frames = [Image.fromarray(render_grid(grid, cell_size)) for grid in history]
    if frames:
        frames[0].save(
            filepath,
            save_all=True,
            append_images=frames[1:],
            duration=duration,
            loop=loop,
        )


def visualize_rule(
    rule: Rule,
    name: str,
    width: int = 100,
    height: int = 100,
    steps: int = 200,
    density: float = DEFAULT_DENSITY,
    pattern: Optional[Grid] = None,
    output_dir: str = "output",
    snapshot_interval: int = 50,
    cell_size: int = 4,
    seed: Optional[int] = None,
) -> Tuple[str, List[str]]:
    """
    Run a world under ``rule`` and save a GIF plus PNG snapshots.

    The world starts from ``pattern`` when given, otherwise from a random
    field of the given density. ``name`` prefixes every output file.

    Returns:
        Tuple of (gif_path, list of snapshot paths)
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    world = World(width, height, rule)
    if pattern is not None:
        world.load(pattern)
    else:
        world.randomize(rng=np.random.default_rng(seed), density=density)
    history = world.run(steps, record_history=True)

    gif_path = str(output_path / f"{name}.gif")
    save_animation(history, gif_path, cell_size=cell_size)

    snapshot_paths = []
    for i in range(0, len(history), snapshot_interval):
        snapshot_path = str(output_path / f"{name}_step{i:04d}.png")
        save_image(history[i], snapshot_path, cell_size=cell_size)
        snapshot_paths.append(snapshot_path)

    final_path = str(output_path / f"{name}_final.png")
    save_image(history[-1], final_path, cell_size=cell_size)
    snapshot_paths.append(final_path)

    logger.debug("Wrote %s and %d snapshots", gif_path, len(snapshot_paths))
    return gif_path, snapshot_paths
