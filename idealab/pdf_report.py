from datetime import datetime, timezone
from io import BytesIO
from textwrap import wrap
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from idealab.scoring import explain_weights, reference_score, score_label
from models import Evaluation, Idea


PAGE_WIDTH, PAGE_HEIGHT = A4

MARGIN_X = 24 * mm
MARGIN_Y = 28 * mm
CONTENT_WIDTH = PAGE_WIDTH - (2 * MARGIN_X)

GRID = 16  # baseline spacing

COLOR_PRIMARY = colors.HexColor("#0F172A")
COLOR_ACCENT = colors.HexColor("#1D4ED8")
COLOR_TEXT = colors.HexColor("#1E293B")
COLOR_MUTED = colors.HexColor("#64748B")
COLOR_BORDER = colors.HexColor("#CBD5E1")
COLOR_HIGH = colors.HexColor("#16A34A")
COLOR_MEDIUM = colors.HexColor("#CA8A04")
COLOR_LOW = colors.HexColor("#DC2626")

BULLET_GLYPH = "•"
SCORE_RADIUS = 38
TITLE_SIZE = 26
MAX_TITLE_LINES = 3

CRITERIA_ROWS = [
    ("Market Size", "market_size"),
    ("Competition", "competition"),
    ("Feasibility", "feasibility"),
    ("Profitability", "profitability"),
    ("Innovation", "innovation"),
    ("Time to Market", "time_to_market"),
]


def _criterion_color(value: int):
    if value >= 4:
        return COLOR_HIGH
    if value >= 3:
        return COLOR_MEDIUM
    return COLOR_LOW


class PdfReportBuilder:
    """Lightweight helper that keeps a single canvas instance alive."""

    def __init__(self, idea: Idea, evaluation: Optional[Evaluation] = None):
        self.idea = idea
        self.evaluation = evaluation
        self.buffer = BytesIO()
        self.pdf = canvas.Canvas(self.buffer, pagesize=A4)

    # -- spacing helpers -------------------------------------------------
    def _ensure_space(self, y: float, needed: float) -> float:
        if y - needed <= MARGIN_Y:
            self._draw_footer()
            self.pdf.showPage()
            self.pdf.setFont("Helvetica", 10)
            return PAGE_HEIGHT - MARGIN_Y
        return y

    def _wrap_lines(self, text: str, width: float, size: int) -> list[str]:
        if not text:
            return []
        max_chars = int(width // (size * 0.51))
        return wrap(text, max_chars)

    def _wrap_text(self, text: str, x: float, y: float, width: float, size: int = 10, line_height: int = GRID) -> float:
        if not text:
            return y

        lines = self._wrap_lines(text, width, size)
        self.pdf.setFont("Helvetica", size)
        self.pdf.setFillColor(COLOR_TEXT)

        for line in lines:
            y = self._ensure_space(y, line_height)
            y -= line_height
            self.pdf.drawString(x, y, line)

        return y

    def _section(self, title: str, y: float) -> float:
        y -= GRID
        y = self._ensure_space(y, GRID * 2)

        self.pdf.setFont("Helvetica-Bold", 13)
        self.pdf.setFillColor(COLOR_PRIMARY)
        self.pdf.drawString(MARGIN_X, y, title.upper())

        self.pdf.setStrokeColor(COLOR_BORDER)
        self.pdf.setLineWidth(0.7)
        self.pdf.line(MARGIN_X, y - 4, PAGE_WIDTH - MARGIN_X, y - 4)

        return y - (GRID + 4)

    def _bullet_list(self, items, x: float, y: float, width: float) -> float:
        bullet_indent = 12

        for item in items:
            y = self._ensure_space(y, GRID)
            self.pdf.setFont("Helvetica", 10)
            self.pdf.setFillColor(COLOR_TEXT)
            self.pdf.drawString(x, y - GRID, BULLET_GLYPH)
            y = self._wrap_text(item, x + bullet_indent, y, width - bullet_indent, size=10, line_height=GRID)
            y -= 4

        return y

    def _score_gauge(self, x: float, center_y: float, value: int) -> None:
        self.pdf.setLineWidth(4)
        self.pdf.setStrokeColor(COLOR_BORDER)
        self.pdf.arc(
            x - SCORE_RADIUS,
            center_y - SCORE_RADIUS,
            x + SCORE_RADIUS,
            center_y + SCORE_RADIUS,
            0,
            360,
        )

        self.pdf.setStrokeColor(COLOR_ACCENT)
        self.pdf.arc(
            x - SCORE_RADIUS,
            center_y - SCORE_RADIUS,
            x + SCORE_RADIUS,
            center_y + SCORE_RADIUS,
            90,
            -value * 3.6,
        )

        self.pdf.setFillColor(COLOR_PRIMARY)
        self.pdf.setFont("Helvetica-Bold", 15)
        self.pdf.drawCentredString(x, center_y + 4, f"{value}%")

        self.pdf.setFont("Helvetica", 8)
        self.pdf.setFillColor(COLOR_MUTED)
        self.pdf.drawCentredString(x, center_y - 11, score_label(value).upper())

    def _criteria_table(self, y: float) -> float:
        evaluation = self.evaluation
        row_h = GRID + 6
        col = CONTENT_WIDTH
        bar_x = MARGIN_X + col * 0.4
        bar_w = col * 0.45

        for label, attr in CRITERIA_ROWS:
            value = getattr(evaluation, attr)
            y = self._ensure_space(y, row_h)

            self.pdf.setStrokeColor(COLOR_BORDER)
            self.pdf.setLineWidth(0.8)
            self.pdf.rect(MARGIN_X, y - row_h, col, row_h, fill=0)

            self.pdf.setFont("Helvetica-Bold", 10)
            self.pdf.setFillColor(COLOR_PRIMARY)
            self.pdf.drawString(MARGIN_X + 8, y - 15, label)

            self.pdf.setFillColor(COLOR_BORDER)
            self.pdf.rect(bar_x, y - 14, bar_w, 6, stroke=0, fill=1)
            self.pdf.setFillColor(_criterion_color(value))
            self.pdf.rect(bar_x, y - 14, bar_w * value / 5, 6, stroke=0, fill=1)

            self.pdf.setFont("Helvetica", 10)
            self.pdf.setFillColor(COLOR_MUTED)
            self.pdf.drawRightString(MARGIN_X + col - 8, y - 15, f"{value}/5")

            y -= row_h

        return y

    def _draw_header(self) -> float:
        self.pdf.setFont("Helvetica-Bold", TITLE_SIZE)
        self.pdf.setFillColor(COLOR_PRIMARY)
        title_lines = self._wrap_lines(self.idea.title, CONTENT_WIDTH, TITLE_SIZE)[:MAX_TITLE_LINES]
        y = PAGE_HEIGHT - 48
        for index, line in enumerate(title_lines):
            if index:
                y -= TITLE_SIZE + 4
            self.pdf.drawString(MARGIN_X, y, line)

        self.pdf.setFont("Helvetica", 11)
        self.pdf.setFillColor(COLOR_MUTED)
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
        subtitle = f"{self.idea.category or 'Innovation'} {BULLET_GLYPH} Generated {timestamp}"
        y -= 22
        self.pdf.drawString(MARGIN_X, y, subtitle)
        return y - 30

    def _draw_footer(self) -> None:
        self.pdf.setStrokeColor(COLOR_BORDER)
        self.pdf.line(MARGIN_X, MARGIN_Y - 6, PAGE_WIDTH - MARGIN_X, MARGIN_Y - 6)

        self.pdf.setFont("Helvetica", 8)
        self.pdf.setFillColor(COLOR_MUTED)
        footer = f"Startup Idea Lab {BULLET_GLYPH} AI-generated assessment"
        self.pdf.drawCentredString(PAGE_WIDTH / 2, MARGIN_Y - 18, footer)

    def _score_details(self, y: float) -> float:
        evaluation = self.evaluation
        text_x = MARGIN_X + (SCORE_RADIUS * 2) + 40
        text_width = CONTENT_WIDTH - (text_x - MARGIN_X)
        body = (
            f"Overall score {evaluation.overall_score}/100 ({score_label(evaluation.overall_score)}). "
            f"Reference score from the criteria: {reference_score(evaluation)}/100 "
            f"({explain_weights()})."
        )
        lines = self._wrap_lines(body, text_width, size=11)
        text_height = max(1, len(lines)) * GRID
        block_height = max(SCORE_RADIUS * 2, text_height)
        y = self._ensure_space(y, block_height)

        top = y
        center_y = top - SCORE_RADIUS
        gauge_x = MARGIN_X + SCORE_RADIUS
        self._score_gauge(gauge_x, center_y, evaluation.overall_score)

        self.pdf.setFont("Helvetica", 11)
        self.pdf.setFillColor(COLOR_TEXT)
        text_y = top
        for line in lines:
            text_y -= GRID
            self.pdf.drawString(text_x, text_y, line)

        return min(center_y - SCORE_RADIUS, text_y)

    def _idea_sections(self, y: float) -> float:
        idea = self.idea
        for title, text in (
            ("Overview", idea.description),
            ("Target Market", idea.target_market),
            ("Problem", idea.problem),
            ("Solution", idea.solution),
        ):
            y = self._section(title, y)
            y = self._wrap_text(text, MARGIN_X, y, CONTENT_WIDTH, size=11)
            y -= GRID / 2
        return y

    def _evaluation_sections(self, y: float) -> float:
        evaluation = self.evaluation

        y = self._section("Overall Score", y)
        y = self._score_details(y)
        y -= GRID

        y = self._section("Criteria", y)
        y = self._criteria_table(y)

        for title, items in (
            ("Strengths", evaluation.strengths),
            ("Weaknesses", evaluation.weaknesses),
            ("Recommendations", evaluation.recommendations),
        ):
            y = self._section(title, y)
            y = self._bullet_list(items or ["None listed."], MARGIN_X, y, CONTENT_WIDTH)

        y = self._section("Market Analysis", y)
        y = self._wrap_text(evaluation.market_analysis, MARGIN_X, y, CONTENT_WIDTH)
        y -= GRID

        y = self._section("Risk Assessment", y)
        y = self._wrap_text(evaluation.risk_assessment, MARGIN_X, y, CONTENT_WIDTH)
        return y

    # -- public API ------------------------------------------------------
    def build(self) -> bytes:
        y = self._draw_header()
        y = self._idea_sections(y)

        if self.evaluation is not None:
            y = self._evaluation_sections(y)
        else:
            y = self._section("Evaluation", y)
            self._wrap_text("This idea has not been evaluated yet.", MARGIN_X, y, CONTENT_WIDTH)

        self._draw_footer()

        self.pdf.save()
        self.buffer.seek(0)
        return self.buffer.getvalue()


def build_pdf_report(idea: Idea, evaluation: Optional[Evaluation] = None) -> bytes:
    return PdfReportBuilder(idea, evaluation).build()
