"""Tests for the PDF report export."""

from reportlab.pdfgen import canvas

from idealab.pdf_report import CONTENT_WIDTH, TITLE_SIZE, PdfReportBuilder, build_pdf_report
from models import Evaluation, Idea


def _idea():
    return Idea(
        id="abc",
        title="ShelfSense",
        description="Computer vision for grocery shelves. " * 20,
        category="AI/ML",
        target_market="Independent grocery stores",
        problem="Out-of-stock items go unnoticed.",
        solution="Cameras plus a model.",
    )


def _evaluation():
    return Evaluation(
        idea_id="abc",
        market_size=4,
        competition=2,
        feasibility=5,
        profitability=3,
        innovation=4,
        time_to_market=1,
        overall_score=81,
        strengths=["Clear pain point"] * 12,
        weaknesses=["Hardware logistics"],
        recommendations=[],
        market_analysis="Large and fragmented. " * 40,
        risk_assessment="Privacy.",
    )


def test_idea_only_report():
    assert build_pdf_report(_idea()).startswith(b"%PDF")


def test_full_report():
    pdf = build_pdf_report(_idea(), _evaluation())
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > len(build_pdf_report(_idea()))


class TestLayout:
    def _count_footers(self, monkeypatch, evaluation):
        drawn = []
        original = PdfReportBuilder._draw_footer

        def counting_footer(self):
            drawn.append(self.pdf.getPageNumber())
            original(self)

        monkeypatch.setattr(PdfReportBuilder, "_draw_footer", counting_footer)
        builder = PdfReportBuilder(_idea(), evaluation)
        builder.build()
        return drawn, builder.pdf.getPageNumber()

    def test_footer_on_every_page(self, monkeypatch):
        drawn, last_page = self._count_footers(monkeypatch, _evaluation())
        assert last_page > 1
        assert drawn == list(range(1, last_page + 1))

    def test_long_title_is_wrapped(self, monkeypatch):
        strings = []
        original = canvas.Canvas.drawString

        def recording(self, x, y, text, *args, **kwargs):
            strings.append((y, text))
            return original(self, x, y, text, *args, **kwargs)

        monkeypatch.setattr(canvas.Canvas, "drawString", recording)
        title = "An Extremely Long Startup Name For Autonomous Grocery Shelf Monitoring"
        idea = _idea().model_copy(update={"title": title})
        builder = PdfReportBuilder(idea)
        body_top = builder._draw_header()

        title_lines = [text for _, text in strings[:-1]]
        assert len(title_lines) > 1
        assert " ".join(title_lines) == title
        assert all(len(line) <= int(CONTENT_WIDTH // (TITLE_SIZE * 0.51)) for line in title_lines)
        subtitle_y = strings[-1][0]
        assert subtitle_y < min(y for y, _ in strings[:-1])
        assert body_top < subtitle_y
