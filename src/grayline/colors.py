"""Hex color parsing for RGBA layer styling."""

DEFAULT_RGBA: tuple[int, int, int, int] = (215, 106, 11, 255)  # orange


def parse_color_to_rgba(color_hex: str) -> tuple[int, int, int, int]:
    """Parse ``#RRGGBB`` or ``#RRGGBBAA`` into RGBA bytes. Only the first ``#`` is dropped.

    Six digits get alpha 255. Any other length, or digits that are not hex,
    fall back to DEFAULT_RGBA. Never raises.
    """
    hex_str = color_hex.replace("#", "", 1)
    if len(hex_str) not in (6, 8):
        return DEFAULT_RGBA
    try:
        channels = [int(hex_str[i : i + 2], 16) for i in range(0, len(hex_str), 2)]
    except ValueError:
        return DEFAULT_RGBA
    if len(channels) == 3:
        channels.append(255)
    r, g, b, a = channels
    return (r, g, b, a)
