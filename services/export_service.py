"""
Export service for rendering a computed layout to PDF and image outputs.
"""
import logging
from datetime import datetime
from pathlib import Path

from models import ExportOptions, FamilyTree, PlacedNode, TreeLayout

logger = logging.getLogger(__name__)

EXPORTS_DIR = Path("exports")

FILL_COLORS = {
    "male": "#d0e8ff",
    "female": "#ffd0e8",
}
DEFAULT_FILL = "#e8e8e8"


def export_layout(layout: TreeLayout, options: ExportOptions, tree: FamilyTree = None) -> str:
    """
    Export a computed layout as an image or PDF.
    Returns the path to the generated file.
    """
    EXPORTS_DIR.mkdir(exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    if options.format == "pdf":
        return export_pdf(layout, options, timestamp, tree)
    else:
        return export_image(layout, options, timestamp, tree)


def _fit_scale(layout: TreeLayout, width: float, height: float, margin: float) -> float:
    """Scale factor that fits the diagram into the page, never enlarging it."""
    bounds = layout.bounds
    scale_x = (width - 2 * margin) / bounds.width if bounds.width > 0 else 1
    scale_y = (height - 2 * margin) / bounds.height if bounds.height > 0 else 1
    return min(scale_x, scale_y, 1)


def _date_line(node: PlacedNode, tree: FamilyTree = None) -> str:
    person = tree.persons.get(node.person_id) if tree else None
    if person is None:
        return ""
    dates = []
    if person.date_of_birth:
        dates.append(f"b. {person.date_of_birth}")
    if person.date_of_death:
        dates.append(f"d. {person.date_of_death}")
    return " | ".join(dates)


def export_pdf(layout: TreeLayout, options: ExportOptions, timestamp: str,
               tree: FamilyTree = None) -> str:
    """Export layout as PDF."""
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4, A3, A2, A1, A0, LETTER, LEGAL, TABLOID, landscape, portrait
    from reportlab.pdfgen import canvas

    page_sizes = {
        "A4": A4,
        "A3": A3,
        "A2": A2,
        "A1": A1,
        "A0": A0,
        "Letter": LETTER,
        "Legal": LEGAL,
        "Tabloid": TABLOID,
    }

    page_size = page_sizes.get(options.page_size, A4)
    if options.orientation == "landscape":
        page_size = landscape(page_size)
    else:
        page_size = portrait(page_size)

    filename = f"family_tree_{timestamp}.pdf"
    filepath = EXPORTS_DIR / filename

    c = canvas.Canvas(str(filepath), pagesize=page_size)
    width, height = page_size

    if not layout.nodes:
        c.drawString(50, height - 50, "Empty Family Tree")
        c.save()
        return str(filepath)

    margin = 50
    scale = _fit_scale(layout, width, height, margin)
    offset = layout.bounds.center_offset

    def transform_x(x):
        return margin + (x + offset) * scale

    def transform_y(y):
        return height - margin - y * scale

    c.setStrokeColorRGB(0.3, 0.3, 0.3)
    c.setLineWidth(1)

    for connector in layout.connectors:
        points = [(transform_x(x), transform_y(y)) for x, y in connector.points]
        p = c.beginPath()
        p.moveTo(*points[0])
        for point in points[1:]:
            p.lineTo(*point)
        c.drawPath(p, stroke=1, fill=0)

    corner_radius = 5 * scale

    for node in layout.nodes:
        x0 = transform_x(node.x)
        y0 = transform_y(node.bottom)
        node_width = node.width * scale
        node_height = node.height * scale

        c.setFillColor(colors.HexColor(FILL_COLORS.get(node.gender, DEFAULT_FILL)))
        c.setStrokeColorRGB(0, 0, 0)
        c.roundRect(x0, y0, node_width, node_height, corner_radius, stroke=1, fill=1)

        cx = x0 + node_width / 2
        cy = y0 + node_height / 2
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 8 * scale)
        label = node.name
        c.drawCentredString(cx, cy, label)

        if node.has_hidden_children:
            c.setFont("Helvetica", 8 * scale)
            c.drawCentredString(cx, y0 + 2, "+")

        date_text = _date_line(node, tree)
        if date_text:
            c.setFont("Helvetica", 6 * scale)
            c.drawCentredString(cx, y0 - 10, date_text)

    c.save()
    logger.info("Exported PDF: %s", filepath)
    return str(filepath)


def export_image(layout: TreeLayout, options: ExportOptions, timestamp: str,
                 tree: FamilyTree = None) -> str:
    """Export layout as PNG or JPG image."""
    from PIL import Image, ImageDraw, ImageFont

    width = options.width
    height = options.height

    img = Image.new("RGB", (width, height), "white")
    draw = ImageDraw.Draw(img)

    if not layout.nodes:
        draw.text((50, 50), "Empty Family Tree", fill="black")
    else:
        margin = 50
        scale = _fit_scale(layout, width, height, margin)
        offset = layout.bounds.center_offset

        def transform_x(x):
            return margin + (x + offset) * scale

        def transform_y(y):
            return margin + y * scale

        for connector in layout.connectors:
            points = [(transform_x(x), transform_y(y)) for x, y in connector.points]
            line_width = 2 if connector.kind == "spouse" else 1
            draw.line(points, fill="gray", width=line_width)

        try:
            font = ImageFont.truetype("/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", max(int(10 * scale), 1))
            small_font = ImageFont.truetype("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf", max(int(8 * scale), 1))
        except OSError:
            font = ImageFont.load_default()
            small_font = font

        for node in layout.nodes:
            x0, y0 = transform_x(node.x), transform_y(node.y)
            x1, y1 = transform_x(node.right), transform_y(node.bottom)
            fill = FILL_COLORS.get(node.gender, DEFAULT_FILL)
            outline_width = 2 if node.has_hidden_children else 1
            draw.rounded_rectangle([x0, y0, x1, y1], radius=5, fill=fill, outline="black", width=outline_width)

            cx = (x0 + x1) / 2
            label = node.name
            bbox = draw.textbbox((0, 0), label, font=font)
            text_width = bbox[2] - bbox[0]
            draw.text((cx - text_width // 2, (y0 + y1) / 2 - 6), label, fill="black", font=font)

            date_text = _date_line(node, tree)
            if date_text:
                bbox = draw.textbbox((0, 0), date_text, font=small_font)
                text_width = bbox[2] - bbox[0]
                draw.text((cx - text_width // 2, y1 + 5), date_text, fill="gray", font=small_font)

    ext = options.format if options.format in ["png", "jpg", "jpeg"] else "png"
    filename = f"family_tree_{timestamp}.{ext}"
    filepath = EXPORTS_DIR / filename

    if ext in ["jpg", "jpeg"]:
        img.save(str(filepath), "JPEG", quality=options.quality)
    else:
        img.save(str(filepath), "PNG")

    logger.info("Exported image: %s", filepath)
    return str(filepath)
