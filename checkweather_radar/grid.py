# region Imports
from typing import List, Sequence
import numpy as np
# endregion

# Printable ASCII starts at "!" (33); a space marks a clear cell
CHAR_OFFSET = 33

# region Text Helpers
def split_radar_text(radar: str) -> List[str]:
    """Trim trailing whitespace and split the upstream grid text into rows."""
    text = (radar or "").rstrip()
    if not text:
        return []
    return text.split("\n")
# endregion

# region Decoding
def decode_radar(rows: Sequence[str], width: int, height: int) -> np.ndarray:
    """
    Decode ASCII rows into an intensity matrix of shape (height, width).

    Each non-whitespace character becomes ord(char) - 33. Whitespace, missing
    rows and short rows stay at zero. Rows past `height` and characters past
    `width` are ignored. Values are not clamped; a well-formed feed only
    carries printable ASCII.
    """
    values = np.zeros((max(height, 0), max(width, 0)), dtype=np.float64)
    for y, chars in enumerate(rows[:height]):
        start = len(chars) - len(chars.lstrip())
        for x in range(start, min(len(chars), width)):
            ch = chars[x]
            if not ch.isspace():
                values[y, x] = ord(ch) - CHAR_OFFSET
    return values


def decode_grid(grid) -> np.ndarray:
    return decode_radar(grid.encoded_rows, grid.width, grid.height)
# endregion

# region Encoding
def encode_radar(values: np.ndarray) -> List[str]:
    """Inverse of decode_radar for integer intensities in [0, 93]."""
    rows = []
    for row in np.asarray(values):
        chars = [" " if v == 0 else chr(int(v) + CHAR_OFFSET) for v in row]
        rows.append("".join(chars).rstrip())
    return rows
# endregion
