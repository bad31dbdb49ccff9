"""
icicle_html.py

Render laid-out boxes as a self-contained HTML page with an inline SVG.
The output depends only on the tree, the boxes and the config, so the same
trace always produces the same bytes.
"""
import colorsys
import html

from import_icicle.exporters.graph_json import DEFAULT_TITLE, box_record
from import_icicle.layout import LayoutConfig, canvas_height
from import_icicle.models import ImportTree

FONT_SIZE = 11
CHAR_WIDTH = 6.5
TEXT_PAD = 3
MIN_LABEL_HEIGHT = 12

PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>{title}</title>
<style>
body {{ margin: 0; background: #2b2b2b; color: #eee; font-family: sans-serif; }}
#toolbar {{ height: 36px; line-height: 36px; background: #3c3c3c; padding: 0 12px; font-size: 14px; }}
#graph {{ overflow: auto; }}
#graph text {{ pointer-events: none; }}
</style>
</head>
<body>
<div id="toolbar">{title} - total {total}</div>
<div id="graph">
{svg}
</div>
</body>
</html>
"""


def _num(value: float, precision: int) -> str:
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_ms(us: int) -> str:
    return f"{us / 1000:.3f} ms"


def color_for_name(name: str, leaf: bool) -> str:
    """Stable colour per top-level package; leaves are drawn a little darker."""
    package = name.split(".", 1)[0]
    digest = 0
    for ch in package:
        digest = (digest * 31 + ord(ch)) & 0xFFFFFFFF
    hue = (digest + 210) % 360 / 360
    saturation, lightness = (0.35, 0.45) if leaf else (0.45, 0.5)
    r, g, b = colorsys.hls_to_rgb(hue, lightness, saturation)
    return "#{:02x}{:02x}{:02x}".format(round(r * 255), round(g * 255), round(b * 255))


def fit_label(text: str, width: float) -> str:
    """Cut text down to what fits in width, or return '' when nothing useful fits."""
    room = int((width - 2 * TEXT_PAD) / CHAR_WIDTH)
    if room >= len(text):
        return text
    if room < 3:
        return ""
    return text[: room - 1] + "…"


def render_svg(tree: ImportTree, boxes, config: LayoutConfig) -> str:
    p = config.precision
    height = canvas_height(tree, config)
    parts = [
        f'<svg id="import-graph" xmlns="http://www.w3.org/2000/svg" '
        f'width="{_num(config.width, p)}" height="{_num(height, p)}" '
        f'viewBox="0 0 {_num(config.width, p)} {_num(height, p)}" '
        f'font-family="sans-serif" font-size="{FONT_SIZE}">'
    ]
    for box in boxes:
        if not box.visible:
            continue
        info = box_record(tree, box)
        node = tree.nodes[box.node_index]
        tooltip = (
            f"{info['name']}: self {format_ms(info['self_us'])}, "
            f"cumulative {format_ms(info['cumulative_us'])} ({info['percent']:.2f}%)"
        )
        parts.append(
            f'<g><rect x="{_num(box.x, p)}" y="{_num(box.y, p)}" '
            f'width="{_num(box.width, p)}" height="{_num(box.height, p)}" '
            f'fill="{color_for_name(node.name, not node.children)}" stroke="#2b2b2b" stroke-width="0.5"/>'
            f"<title>{html.escape(tooltip)}</title>"
        )
        if box.width >= config.min_label_width and box.height >= MIN_LABEL_HEIGHT:
            label = fit_label(f"{node.name} {format_ms(node.cumulative_time)}", box.width)
            if label:
                baseline = box.y + (box.height + FONT_SIZE) / 2 - 1
                parts.append(
                    f'<text x="{_num(box.x + TEXT_PAD, p)}" y="{_num(baseline, p)}" fill="#fff">'
                    f"{html.escape(label)}</text>"
                )
        parts.append("</g>")
    parts.append("</svg>")
    return "\n".join(parts)


def render_html(tree: ImportTree, boxes, config: LayoutConfig = None, title: str = DEFAULT_TITLE) -> str:
    config = config or LayoutConfig()
    return PAGE.format(
        title=html.escape(title),
        total=format_ms(tree.total_time),
        svg=render_svg(tree, boxes, config),
    )
