import numpy as np
from PIL import Image

from hemoglobin.automaton import GAME_OF_LIFE
from hemoglobin.grid import GLIDER, Grid
from hemoglobin.visualize import (
    DEAD_COLOR,
    LIVE_COLOR,
    render_grid,
    save_animation,
    save_image,
    visualize_rule,
)


def test_render_grid_scales_cells():
    grid = np.array([[1, 0, 0], [0, 0, 1]], dtype=np.uint8)
    img = render_grid(grid, cell_size=2)
    assert img.shape == (4, 6, 3)
    assert (img[0:2, 0:2] == LIVE_COLOR).all()
    assert (img[0:2, 2:4] == DEAD_COLOR).all()
    assert (img[2:4, 4:6] == LIVE_COLOR).all()


def test_save_image(tmp_path):
    path = tmp_path / "grid.png"
    save_image(np.eye(3, dtype=np.uint8), str(path), cell_size=3)
    with Image.open(path) as img:
        assert img.size == (9, 9)


def test_save_animation(tmp_path):
    path = tmp_path / "run.gif"
    history = [np.eye(4, dtype=np.uint8), np.zeros((4, 4), dtype=np.uint8)]
    save_animation(history, str(path), cell_size=2)
    with Image.open(path) as img:
        assert img.n_frames == 2


def test_visualize_rule_random_start(tmp_path):
    gif_path, snapshots = visualize_rule(
        GAME_OF_LIFE, "life",
        width=10, height=10, steps=5,
        output_dir=str(tmp_path), snapshot_interval=5, seed=0,
    )
    assert gif_path.endswith("life.gif")
    assert [p.rsplit("/", 1)[-1] for p in snapshots] == [
        "life_step0000.png", "life_step0005.png", "life_final.png",
    ]
    for path in [gif_path] + snapshots:
        with Image.open(path) as img:
            assert img.size == (40, 40)


def test_visualize_rule_from_pattern(tmp_path):
    _, snapshots = visualize_rule(
        GAME_OF_LIFE, "glider",
        width=8, height=8, steps=4, cell_size=1,
        pattern=Grid.from_rows(GLIDER),
        output_dir=str(tmp_path), snapshot_interval=10,
    )
    with Image.open(snapshots[-1]) as img:
        lit = np.asarray(img.convert("L")) == LIVE_COLOR
    assert lit.sum() == 5
