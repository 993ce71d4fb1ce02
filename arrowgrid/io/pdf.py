"""PDF export of grids with their definitions and arrows (reportlab backend)."""

from __future__ import annotations

import copy
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from reportlab.lib.colors import HexColor
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from ..core.constants import ArrowDirection, ArrowVariant, Attachment
from ..core.exceptions import ExportRenderError
from ..core.models import (Appearance, ArrowPlacement, DefinitionSlot, Grid, GridSet,
                           WordDefinitionData, cell_key)
from ..engine.resolver import resolve_placements
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class PdfConfig:
    """Page geometry and fonts for the PDF export."""

    cell_size: float = 40.0
    label_height: float = 28.0
    label_font_size: float = 12.0
    text_padding: float = 3.0
    max_definition_font: float = 18.0
    min_definition_font: float = 4.0
    line_spacing: float = 1.1
    letter_ratio: float = 0.55
    arrow_offset_ratio: float = 0.35
    arrow_length_ratio: float = 0.22
    font: str = "Helvetica"
    bold_font: str = "Helvetica-Bold"


def _wrap(text: str, font: str, size: float, available: float) -> List[str]:
    lines: List[str] = []
    current = ""
    for word in text.split():
        tentative = f"{current} {word}" if current else word
        if stringWidth(tentative, font, size) <= available:
            current = tentative
            continue
        if current:
            lines.append(current)
        current = word
    if current:
        lines.append(current)
    return lines


class PdfRenderer:
    """Draws one page per grid."""

    def __init__(self, config: Optional[PdfConfig] = None) -> None:
        self.config = config or PdfConfig()

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------
    def render_grid(
        self,
        path: Path | str,
        grid: Grid,
        definitions: Mapping[str, WordDefinitionData],
        appearance: Optional[Appearance] = None,
        label: Optional[str] = None,
    ) -> Path:
        pages = [(copy.deepcopy(grid), copy.deepcopy(dict(definitions)), label)]
        return self._render(Path(path), pages, appearance or Appearance())

    def render_set(self, path: Path | str, grid_set: GridSet) -> Path:
        if not grid_set.grids:
            raise ExportRenderError(f"Set {grid_set.name!r} has no grid to export")
        pages = [
            (copy.deepcopy(saved.grid), copy.deepcopy(saved.definitions), saved.name)
            for saved in grid_set.grids
        ]
        return self._render(Path(path), pages, grid_set.appearance)

    def fit_definition_size(self, text: str, slot_count: int) -> float:
        """Largest font size at which ``text`` fits its share of a black cell."""

        cfg = self.config
        available_width = cfg.cell_size - 2 * cfg.text_padding
        available_height = (cfg.cell_size - 2 * cfg.text_padding) / max(1, slot_count) - 2
        words = text.split()
        longest = max((len(word) for word in words), default=0)
        upper = min(
            cfg.max_definition_font,
            available_height,
            available_width / (longest * 0.65) if longest else cfg.max_definition_font,
        )
        size = float(int(upper))
        while size >= cfg.min_definition_font:
            if any(stringWidth(word, cfg.font, size) > available_width for word in words):
                size -= 1
                continue
            lines = _wrap(text, cfg.font, size, available_width)
            if len(lines) * size * cfg.line_spacing <= available_height:
                return size
            size -= 1
        return cfg.min_definition_font

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def _render(
        self,
        path: Path,
        pages: Sequence[Tuple[Grid, Dict[str, WordDefinitionData], Optional[str]]],
        appearance: Appearance,
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(suffix=".pdf", dir=path.parent)
        os.close(fd)
        try:
            pdf = canvas.Canvas(tmp_name)
            for grid, definitions, label in pages:
                self._draw_page(pdf, grid, definitions, appearance, label)
            pdf.save()
            os.replace(tmp_name, path)
        except Exception as exc:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            LOGGER.error("PDF export to %s failed: %s", path, exc)
            raise ExportRenderError(f"Unable to export PDF: {exc}") from exc
        LOGGER.info("Exported %s page(s) to %s", len(pages), path)
        return path

    def _draw_page(
        self,
        pdf: canvas.Canvas,
        grid: Grid,
        definitions: Mapping[str, WordDefinitionData],
        appearance: Appearance,
        label: Optional[str],
    ) -> None:
        cfg = self.config
        label_height = cfg.label_height if label else 0.0
        board_width = grid.width * cfg.cell_size
        board_height = grid.height * cfg.cell_size
        page_height = board_height + label_height
        pdf.setPageSize((board_width, page_height))
        maps = resolve_placements(grid, definitions)

        if label:
            pdf.setFillColor(HexColor(appearance.letter_color))
            pdf.setFont(cfg.font, cfg.label_font_size)
            pdf.drawString(12, page_height - 14 - cfg.label_font_size / 2, label)

        for row in grid.cells:
            for cell in row:
                left, bottom = self._origin(cell.x, cell.y, board_height)
                fill = appearance.black_cell_color if cell.is_black else appearance.cell_background_color
                pdf.setFillColor(HexColor(fill))
                pdf.rect(left, bottom, cfg.cell_size, cfg.cell_size, stroke=0, fill=1)
                if cell.is_black:
                    slots = maps.definition_placements.get(cell_key(cell.x, cell.y), [])
                    self._draw_definitions(pdf, left, bottom, slots, appearance)
                elif cell.value:
                    size = cfg.cell_size * cfg.letter_ratio
                    pdf.setFillColor(HexColor(appearance.letter_color))
                    pdf.setFont(cfg.bold_font, size)
                    pdf.drawCentredString(left + cfg.cell_size / 2, bottom + cfg.cell_size / 2 - size / 3, cell.value)

        pdf.setStrokeColor(HexColor(appearance.border_color))
        pdf.setLineWidth(1)
        for x in range(grid.width + 1):
            pdf.line(x * cfg.cell_size, 0, x * cfg.cell_size, board_height)
        for y in range(grid.height + 1):
            pdf.line(0, y * cfg.cell_size, board_width, y * cfg.cell_size)

        pdf.setStrokeColor(HexColor(appearance.arrow_color))
        pdf.setFillColor(HexColor(appearance.arrow_color))
        for key, arrows in maps.arrow_placements.items():
            x, y = (int(part) for part in key.split("-"))
            left, bottom = self._origin(x, y, board_height)
            for arrow in arrows:
                self._draw_arrow(pdf, left + cfg.cell_size / 2, bottom + cfg.cell_size / 2, arrow)
        pdf.showPage()

    def _origin(self, x: int, y: int, board_height: float) -> Tuple[float, float]:
        """Bottom-left corner of cell ``(x, y)`` in page coordinates."""
        return x * self.config.cell_size, board_height - (y + 1) * self.config.cell_size

    def _draw_definitions(
        self,
        pdf: canvas.Canvas,
        left: float,
        bottom: float,
        slots: Sequence[DefinitionSlot],
        appearance: Appearance,
    ) -> None:
        if not slots:
            return
        cfg = self.config
        area_height = cfg.cell_size / len(slots)
        available = cfg.cell_size - 2 * cfg.text_padding
        pdf.setFillColor(HexColor(appearance.definition_text_color))
        for index, slot in enumerate(slots):
            content = (slot.definition or slot.word).upper()
            size = self.fit_definition_size(content, len(slots))
            lines = _wrap(content, cfg.font, size, available)
            top = bottom + cfg.cell_size - area_height * index
            center = top - area_height / 2
            pdf.setFont(cfg.font, size)
            for line_index, line in enumerate(lines):
                offset = (line_index - (len(lines) - 1) / 2) * size * cfg.line_spacing
                pdf.drawCentredString(left + cfg.cell_size / 2, center - offset - size / 3, line)
        if len(slots) > 1:
            pdf.setStrokeColor(HexColor(appearance.separator_color))
            pdf.setLineWidth(1)
            middle = bottom + cfg.cell_size / 2
            pdf.line(left, middle, left + cfg.cell_size, middle)

    def _draw_arrow(self, pdf: canvas.Canvas, cx: float, cy: float, arrow: ArrowPlacement) -> None:
        cfg = self.config
        offset = cfg.cell_size * cfg.arrow_offset_ratio
        length = cfg.cell_size * cfg.arrow_length_ratio
        # Page y grows upward while grid y grows downward.
        shift = {
            Attachment.LEFT: (-offset, 0.0),
            Attachment.RIGHT: (offset, 0.0),
            Attachment.TOP: (0.0, offset),
            Attachment.BOTTOM: (0.0, -offset),
        }[arrow.attachment]
        start_x, start_y = cx + shift[0], cy + shift[1]
        vectors = {
            ArrowDirection.UP: (0.0, 1.0),
            ArrowDirection.DOWN: (0.0, -1.0),
            ArrowDirection.LEFT: (-1.0, 0.0),
            ArrowDirection.RIGHT: (1.0, 0.0),
        }
        dx, dy = vectors[arrow.direction]
        end_x, end_y = start_x + dx * length / 2, start_y + dy * length / 2
        if arrow.variant == ArrowVariant.STRAIGHT:
            end_x, end_y = start_x + dx * length, start_y + dy * length
            pdf.line(start_x, start_y, end_x, end_y)
        else:
            pdf.line(start_x, start_y, end_x, end_y)
            dx, dy = (1.0, 0.0) if arrow.variant == ArrowVariant.CURVED_RIGHT else (-1.0, 0.0)
            bend_x, bend_y = end_x, end_y
            end_x, end_y = bend_x + dx * length, bend_y
            pdf.line(bend_x, bend_y, end_x, end_y)
        head = length / 3
        path = pdf.beginPath()
        path.moveTo(end_x + dx * head / 2, end_y + dy * head / 2)
        path.lineTo(end_x - dx * head / 2 - dy * head / 2, end_y - dy * head / 2 + dx * head / 2)
        path.lineTo(end_x - dx * head / 2 + dy * head / 2, end_y - dy * head / 2 - dx * head / 2)
        path.close()
        pdf.drawPath(path, stroke=0, fill=1)
