from coin_grid.renderer.texture import TextureRenderer, render, value_to_color
from coin_grid.visibility import VisibilityWindow
from tests.test_utils import make_state


def test_image_size_is_whole_cells() -> None:
    img = render(make_state(), resolution=100, radius=4)
    assert img.mode == "RGBA"
    assert img.size == (99, 99)


def test_default_radius_uses_neighborhood() -> None:
    state = make_state()
    img = render(state, resolution=450)
    span = 2 * state.config.neighborhood_size + 1
    assert img.size == (450 // span * span,) * 2


def test_renderer_accepts_window_views() -> None:
    state = make_state()
    window = VisibilityWindow(radius=5)
    window.refresh(state)
    img = TextureRenderer(resolution=121, radius=5, show_grid=False).render(state, views=window.views)
    assert img.size == (121, 121)


def test_colors_group_by_value() -> None:
    assert value_to_color(8) == value_to_color(8)
    assert value_to_color(8) != value_to_color(16)
    assert all(0 <= c <= 255 for c in value_to_color(128))
