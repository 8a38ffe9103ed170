"""
Tests for reading burrow diagrams out of screenshots.

Screenshots are drawn with Pillow: one square cell per diagram
character, on a dark margin.
"""

import json
import warnings
from pathlib import Path

import pytest
from PIL import Image, ImageDraw

import amphipod_identifier
from amphipod_identifier import (
    COLORS,
    DEFAULT_COLORS,
    PixelType,
    crop_to_walls,
    extract_diagram,
    identify_token,
    load_colors,
    load_image_colors,
    main,
    parse_colors,
    read_colors_file,
)
from amphipod_sorter import Board

EXAMPLE = [
    "#############",
    "#...........#",
    "###B#C#B#D###",
    "  #A#D#C#A#",
    "  #########",
]

WALL = (187, 187, 187)
FLOOR = (12, 12, 12)


def draw_diagram(lines, cell_size=8, margin=5):
    palette = {letter: rgb for rgb, letter in COLORS.items()}
    palette['#'] = WALL
    width = 13 * cell_size + 2 * margin
    height = len(lines) * cell_size + 2 * margin
    im = Image.new('RGB', (width, height), FLOOR)
    draw = ImageDraw.Draw(im)
    for r, line in enumerate(lines):
        for c, char in enumerate(line):
            if char not in palette:
                continue
            x = margin + c * cell_size
            y = margin + r * cell_size
            draw.rectangle(
                [x, y, x + cell_size - 1, y + cell_size - 1],
                fill=palette[char])
    return im


@pytest.fixture
def screenshot(tmp_path):
    path = tmp_path / 'burrow.png'
    draw_diagram(EXAMPLE).save(path)
    return path


def test_pixel_types():
    assert PixelType.from_rgb(FLOOR) == PixelType.BACKGROUND
    assert PixelType.from_rgb(WALL) == PixelType.WALL
    assert PixelType.from_rgb((255, 191, 0)) == PixelType.TOKEN


def test_identify_token():
    assert identify_token((254, 192, 1)) == 'A'
    assert identify_token((72, 209, 204)) == 'C'
    with pytest.raises(ValueError):
        identify_token((0, 0, 255))


def test_crop_to_walls(screenshot):
    colors = crop_to_walls(load_image_colors(screenshot))
    assert len(colors) == 5 * 8
    assert len(colors[0]) == 13 * 8
    assert colors[0][0] == WALL


def test_crop_without_walls():
    assert crop_to_walls([[FLOOR] * 4 for _ in range(3)]) == []


def test_extract_diagram(screenshot):
    lines = extract_diagram(load_image_colors(screenshot))
    assert lines == EXAMPLE
    assert str(Board.parse(lines)) == '\n'.join(EXAMPLE)


def test_extract_larger_cells(tmp_path):
    lines = [
        '#############',
        '#.A.......B.#',
        '###.#.#C#D###',
        '  #A#B#C#D#',
        '  #########',
    ]
    path = tmp_path / 'partial.png'
    draw_diagram(lines, cell_size=15, margin=20).save(path)
    assert extract_diagram(load_image_colors(path)) == lines


def test_extract_unknown_color(tmp_path):
    im = draw_diagram(EXAMPLE)
    ImageDraw.Draw(im).rectangle([5 + 3 * 8, 5 + 2 * 8, 5 + 4 * 8 - 1,
                                  5 + 3 * 8 - 1], fill=(0, 0, 255))
    path = tmp_path / 'unknown.png'
    im.save(path)
    with pytest.raises(ValueError):
        extract_diagram(load_image_colors(path))


def test_read_colors_file():
    path = Path(__file__).resolve().parent.parent / 'colors.json'
    colors = read_colors_file(path)
    assert sorted(colors.values()) == ['A', 'B', 'C', 'D']
    assert colors == parse_colors(DEFAULT_COLORS)


def test_load_colors_without_file(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    colors = load_colors()
    assert colors[(255, 191, 0)] == 'A'
    assert sorted(colors.values()) == ['A', 'B', 'C', 'D']


def test_load_colors_from_working_directory(monkeypatch, tmp_path):
    data = {'A': [1, 100, 1], 'B': [2, 100, 2]}
    (tmp_path / 'colors.json').write_text(json.dumps(data), encoding='utf-8')
    monkeypatch.chdir(tmp_path)
    assert load_colors() == {(1, 100, 1): 'A', (2, 100, 2): 'B'}


def test_load_image_without_deprecations(screenshot):
    with warnings.catch_warnings():
        warnings.simplefilter('error', DeprecationWarning)
        colors = load_image_colors(screenshot)
    assert colors[0][0] == FLOOR
    assert colors[5][5] == WALL


@pytest.mark.parametrize('data', [
    {'E': [1, 2, 3]},
    {'A': [1, 2]},
    {'A': [1, 2, 300]},
    {'A': [1, 2, 'x']},
    {'A': [1, 2, 3], 'B': [1, 2, 3]},
], ids=['letter', 'length', 'range', 'ints', 'repeated'])
def test_read_colors_file_rejects(tmp_path, data):
    path = tmp_path / 'colors.json'
    path.write_text(json.dumps(data), encoding='utf-8')
    with pytest.raises(ValueError):
        read_colors_file(path)


def test_main_prints_diagram(monkeypatch, capsys, screenshot):
    monkeypatch.setattr('sys.argv', ['amphipod_identifier.py', str(screenshot)])
    main()
    assert capsys.readouterr().out == '\n'.join(EXAMPLE) + '\n'


def test_main_without_filename(monkeypatch, capsys):
    monkeypatch.setattr('sys.argv', ['amphipod_identifier.py'])
    with pytest.raises(SystemExit) as e:
        main()
    assert e.value.code == 1
    assert capsys.readouterr().out == 'Missing filename\n'


def test_main_without_burrow(monkeypatch, capsys, tmp_path):
    path = tmp_path / 'blank.png'
    Image.new('RGB', (50, 50), FLOOR).save(path)
    monkeypatch.setattr('sys.argv', ['amphipod_identifier.py', str(path)])
    with pytest.raises(SystemExit):
        main()
    assert 'Could not find the burrow' in capsys.readouterr().out


def test_debug_output(monkeypatch, capsys, screenshot):
    monkeypatch.setattr(amphipod_identifier, 'DEBUG', True)
    extract_diagram(load_image_colors(screenshot))
    assert 'cell size: 8 rows: 5' in capsys.readouterr().out
