# xpcard/utils/drawing.py
"""
Vector helpers on top of Pillow.

Pillow has no path, clip or gradient-paint API, so shapes are built as point
lists, clips are "L" masks and every paint is composited through an RGBA
layer the size of the canvas. All coordinates are absolute canvas pixels.
"""

from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageChops, ImageDraw

from xpcard.utils.card_constants import hex_to_rgba

Point = Tuple[float, float]

CURVE_SEGMENTS = 8


def _quadratic_curve(start: Point, control: Point, end: Point, segments: int) -> List[Point]:
    """Sample a quadratic Bezier, excluding its start point"""
    points = []
    for i in range(1, segments + 1):
        t = i / segments
        u = 1 - t
        x = u * u * start[0] + 2 * u * t * control[0] + t * t * end[0]
        y = u * u * start[1] + 2 * u * t * control[1] + t * t * end[1]
        points.append((x, y))
    return points


def rounded_rect_path(
    x: float,
    y: float,
    width: float,
    height: float,
    radius: float,
    segments: int = CURVE_SEGMENTS,
) -> List[Point]:
    """
    Closed path of a rounded rectangle.

    Starts on the top edge at (x + radius, y) and runs clockwise; each corner
    is a quadratic curve whose control point is the rectangle corner. The last
    point repeats the first so the list can be stroked as a closed line.
    """
    radius = max(0.0, min(radius, width / 2, height / 2))
    right = x + width
    bottom = y + height

    path: List[Point] = [(x + radius, y), (right - radius, y)]
    path += _quadratic_curve(path[-1], (right, y), (right, y + radius), segments)
    path.append((right, bottom - radius))
    path += _quadratic_curve(path[-1], (right, bottom), (right - radius, bottom), segments)
    path.append((x + radius, bottom))
    path += _quadratic_curve(path[-1], (x, bottom), (x, bottom - radius), segments)
    path.append((x, y + radius))
    path += _quadratic_curve(path[-1], (x, y), (x + radius, y), segments)
    return path


def path_mask(size: Tuple[int, int], path: Sequence[Point]) -> Image.Image:
    """Clip mask covering the inside of a closed path"""
    mask = Image.new("L", size, 0)
    ImageDraw.Draw(mask).polygon(list(path), fill=255)
    return mask


def rounded_rect_mask(
    size: Tuple[int, int], x: float, y: float, width: float, height: float, radius: float
) -> Image.Image:
    return path_mask(size, rounded_rect_path(x, y, width, height, radius))


def stroke_mask(size: Tuple[int, int], path: Sequence[Point], width: int) -> Image.Image:
    """Mask of a stroke centred on a path"""
    mask = Image.new("L", size, 0)
    ImageDraw.Draw(mask).line(list(path), fill=255, width=width, joint="curve")
    return mask


def circle_mask(diameter: int) -> Image.Image:
    mask = Image.new("L", (diameter, diameter), 0)
    ImageDraw.Draw(mask).ellipse((0, 0, diameter - 1, diameter - 1), fill=255)
    return mask


def horizontal_gradient(
    size: Tuple[int, int],
    left: str,
    right: str,
    start_x: int = 0,
    end_x: Optional[int] = None,
) -> Image.Image:
    """
    Left-to-right linear gradient the size of ``size``.

    The ramp runs from ``start_x`` to ``end_x``; pixels before it take the
    left color and pixels after it the right color.
    """
    width, height = size
    if end_x is None:
        end_x = width
    ramp_width = max(1, int(round(end_x - start_x)))

    ramp = Image.linear_gradient("L").transpose(Image.Transpose.ROTATE_90)
    ramp = ramp.resize((ramp_width, height), Image.Resampling.BILINEAR)

    weights = Image.new("L", size, 0)
    ramp_end = int(start_x) + ramp_width
    if ramp_end < width:
        weights.paste(255, (ramp_end, 0, width, height))
    weights.paste(ramp, (int(start_x), 0))

    left_img = Image.new("RGBA", size, hex_to_rgba(left))
    right_img = Image.new("RGBA", size, hex_to_rgba(right))
    return Image.composite(right_img, left_img, weights)


def paint_masked(canvas: Image.Image, paint: Image.Image, mask: Image.Image,
                 dest: Tuple[int, int] = (0, 0)) -> None:
    """Composite ``paint`` onto the canvas where ``mask`` is set"""
    layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    layer.paste(paint, dest, mask)
    canvas.alpha_composite(layer)


def fill_path(canvas: Image.Image, path: Sequence[Point], color: str) -> None:
    layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    ImageDraw.Draw(layer).polygon(list(path), fill=hex_to_rgba(color))
    canvas.alpha_composite(layer)


def stroke_path(canvas: Image.Image, path: Sequence[Point], color: str, width: int) -> None:
    layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    ImageDraw.Draw(layer).line(list(path), fill=hex_to_rgba(color), width=width, joint="curve")
    canvas.alpha_composite(layer)


def stroke_circle(canvas: Image.Image, center: Point, radius: float, color: str, width: int) -> None:
    """Stroke a circle outline centred on ``radius``"""
    cx, cy = center
    outer = radius + width / 2
    layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    ImageDraw.Draw(layer).ellipse(
        (cx - outer, cy - outer, cx + outer, cy + outer),
        outline=hex_to_rgba(color),
        width=width,
    )
    canvas.alpha_composite(layer)


def paste_circular(canvas: Image.Image, image: Image.Image, position: Tuple[int, int], diameter: int) -> None:
    """Scale ``image`` to ``diameter`` and draw it clipped to a circle"""
    scaled = image.convert("RGBA").resize((diameter, diameter), Image.Resampling.LANCZOS)
    mask = ImageChops.multiply(circle_mask(diameter), scaled.getchannel("A"))
    paint_masked(canvas, scaled, mask, position)
