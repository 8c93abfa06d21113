import numpy as np
import pytest

from fractal_explorer.rendering.palettes import BUILTIN_PALETTES, ColorRGB, Palette, PaletteRegistry


def test_builtin_palettes():
    registry = PaletteRegistry.default()

    assert registry.names() == ["Classic", "Fire", "Grayscale", "Ocean", "Arctic"]
    assert len(registry.get(0)) == 15
    assert registry.get(0)[0] == ColorRGB(66, 30, 15)
    assert len(registry.get(2)) == 9


def test_registry_index_wraps():
    registry = PaletteRegistry.default()
    assert registry.get(7) is registry.get(2)
    assert registry.get(-1) is registry.get(4)


def test_registry_extended_appends():
    extra = Palette([(1, 2, 3), (4, 5, 6)], name="Extra")
    registry = PaletteRegistry.default().extended([extra])

    assert len(registry) == len(BUILTIN_PALETTES) + 1
    assert registry.get(len(BUILTIN_PALETTES)) is extra


def test_empty_registry_rejected():
    with pytest.raises(ValueError):
        PaletteRegistry([])


def test_palette_needs_two_colors():
    with pytest.raises(ValueError):
        Palette([(0, 0, 0)])


def test_color_component_range():
    with pytest.raises(ValueError):
        ColorRGB(256, 0, 0)


def test_palette_array_is_read_only():
    array = Palette([(0, 0, 0), (255, 128, 1)]).as_array()

    assert array.dtype == np.uint8
    assert array.shape == (2, 3)
    with pytest.raises(ValueError):
        array[0, 0] = 1


def test_gpl_file_round_trip(tmp_path):
    palette = Palette([(10, 20, 30), (200, 100, 0), (0, 0, 255)], name="Sunset")
    path = tmp_path / "sunset.gpl"
    palette.save_to_file(path)

    loaded = Palette.load_from_file(path)

    assert loaded.name == "Sunset"
    assert loaded.colors == palette.colors


def test_gpl_file_without_colors(tmp_path):
    path = tmp_path / "empty.gpl"
    path.write_text("GIMP Palette\nName: Empty\n#\n")

    with pytest.raises(ValueError):
        Palette.load_from_file(path)


def test_matplotlib_palette():
    palette = Palette.from_matplotlib("viridis", n_samples=8)
    assert len(palette) == 8
    assert palette.name == "Viridis"
