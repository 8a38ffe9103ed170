"""
amphipod_identifier.py
Extracts the burrow diagram from a screenshot of the amphipod puzzle.

The screenshot draws the diagram on a grid of square cells: gray walls,
a dark floor, and one colored cell per amphipod. Analyzes the pixels of
the given screenshot to rebuild the text diagram, which could be used
as input to `amphipod_sorter.py` to solve the given burrow.

Example run:
  $ python amphipod_identifier.py burrow.png | python amphipod_sorter.py
"""

# =============================================================================

import json
import sys
from enum import Enum
from pathlib import Path

from PIL import Image

from amphipod_sorter import Board, Token

# =============================================================================

DEBUG = False

# =============================================================================

# Read from the working directory, like any other per-user setting
COLORS_FILE = Path('colors.json')

# Used when there is no colors file
DEFAULT_COLORS = {
    'A': (255, 191, 0),
    'B': (205, 127, 50),
    'C': (72, 209, 204),
    'D': (237, 201, 175),
}


def parse_colors(data):
    """Validates a mapping of amphipod letter -> rgb value.
    Returns the reverse mapping.
    """
    colors = {}
    for letter, rgb in data.items():
        Token.from_letter(letter)
        invalid_rgb_value_msg = f'invalid rgb value for amphipod "{letter}"'
        rgb = tuple(rgb)
        if len(rgb) != 3:
            raise ValueError(f'{invalid_rgb_value_msg}: not length 3')
        for val in rgb:
            if not isinstance(val, int):
                raise ValueError(f'{invalid_rgb_value_msg}: not ints')
            if not _in_range(val, (0, 255)):
                raise ValueError(
                    f'{invalid_rgb_value_msg}: not in range [0, 255]')
        if rgb in colors:
            raise ValueError(f'rgb value {rgb} is repeated in colors file')
        colors[rgb] = letter
    return colors


def read_colors_file(path):
    return parse_colors(json.loads(Path(path).read_bytes()))


def load_colors(path=COLORS_FILE):
    """Reads the colors file if it exists, otherwise the default colors."""
    path = Path(path)
    if path.is_file():
        return read_colors_file(path)
    return parse_colors(DEFAULT_COLORS)


# =============================================================================

# The diagram is always 13 cells wide
DIAGRAM_WIDTH = 13

BACKGROUND_CUTOFF = 40
WALL_GRAY_RANGE = (185, 190)
SAME_COLOR_ERROR = 3

# =============================================================================


def _in_range(value, range_):
    return range_[0] <= value <= range_[1]


def is_background(rgb):
    return all(val <= BACKGROUND_CUTOFF for val in rgb)


def is_wall(rgb):
    return all(_in_range(val, WALL_GRAY_RANGE) for val in rgb)


def same_color(rgb1, rgb2):
    return all(
        abs(val1 - val2) <= SAME_COLOR_ERROR for val1, val2 in zip(rgb1, rgb2))


# =============================================================================


class PixelType(Enum):
    """The pixel types."""
    BACKGROUND = 1
    WALL = 2
    TOKEN = 3

    @classmethod
    def from_rgb(cls, rgb):
        if is_background(rgb):
            return cls.BACKGROUND
        if is_wall(rgb):
            return cls.WALL
        return cls.TOKEN


# =============================================================================


def load_image_colors(filename):
    """Loads the given file image and returns its colors as a 2D array
    of RGB values.
    """
    with Image.open(filename) as im:
        im = im.convert('RGB')
    pixels = im.load()
    colors = []
    for y in range(im.height):
        colors.append([pixels[x, y] for x in range(im.width)])
    return colors


def crop_to_walls(colors):
    """Processes the colors to include only the rows and columns between
    the first and last occurrence of wall pixels.
    """
    wall_rows = []
    wall_cols = set()
    for r, row in enumerate(colors):
        cols = [c for c, rgb in enumerate(row) if is_wall(rgb)]
        if len(cols) > 0:
            wall_rows.append(r)
            wall_cols.update(cols)
    if len(wall_rows) == 0:
        return []
    first_col = min(wall_cols)
    last_col = max(wall_cols)
    return [
        row[first_col:last_col + 1]
        for row in colors[wall_rows[0]:wall_rows[-1] + 1]
    ]


def identify_token(rgb, colors=None):
    """Returns the letter of the amphipod drawn with the given color."""
    if colors is None:
        colors = COLORS
    for known_rgb, letter in colors.items():
        if same_color(rgb, known_rgb):
            return letter
    raise ValueError(f'unknown amphipod color: {rgb}')


def extract_diagram(colors):
    """Extracts and returns the lines of the burrow diagram."""
    colors = crop_to_walls(colors)
    if len(colors) == 0:
        return []
    cell_size = len(colors[0]) // DIAGRAM_WIDTH
    if cell_size == 0:
        raise ValueError('screenshot is too narrow to hold a burrow')
    num_rows = len(colors) // cell_size

    if DEBUG:
        print('cell size:', cell_size, 'rows:', num_rows)

    lines = []
    for r in range(num_rows):
        center_r = r * cell_size + cell_size // 2
        pixels = [
            colors[center_r][c * cell_size + cell_size // 2]
            for c in range(DIAGRAM_WIDTH)
        ]
        types = [PixelType.from_rgb(rgb) for rgb in pixels]
        walls = [c for c, t in enumerate(types) if t == PixelType.WALL]
        line = []
        for c, (rgb, pixel_type) in enumerate(zip(pixels, types)):
            if pixel_type == PixelType.WALL:
                line.append('#')
            elif pixel_type == PixelType.BACKGROUND:
                # floor only counts when it is enclosed by walls
                if len(walls) > 0 and walls[0] < c < walls[-1]:
                    line.append(Board.EMPTY)
                else:
                    line.append(' ')
            else:
                line.append(identify_token(rgb))
        lines.append(''.join(line).rstrip())
    return lines


# maps: rgb value -> amphipod letter
COLORS = load_colors()

# =============================================================================


def main():
    _, *args = sys.argv
    if len(args) == 0:
        print('Missing filename')
        sys.exit(1)
    filename = args[0]

    try:
        lines = extract_diagram(load_image_colors(filename))
        if len(lines) == 0:
            print('Could not find the burrow in the screenshot')
            sys.exit(1)
        board = Board.parse(lines)
    except ValueError as e:
        print(e)
        sys.exit(1)
    print(board)


if __name__ == '__main__':
    main()
