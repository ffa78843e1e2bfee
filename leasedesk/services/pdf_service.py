"""PDF export for Letters of Intent."""

from __future__ import annotations

import io
from typing import List, Optional, Tuple

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas

from ..models.loi import LOIRecord

DISCLAIMER = "This Letter of Intent is non-binding and subject to a fully executed lease agreement."


class PDFService:
    def render(self, loi: LOIRecord) -> bytes:
        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pagesize=letter)
        c.setTitle(loi.title)
        width, height = letter
        margin = 0.6 * inch

        y = self._draw_header(c, loi, width, height, margin)
        for title, rows in self._sections(loi):
            y = self._draw_section(c, title, rows, width, y - 18, margin)
        y = self._draw_paragraph(c, "Special Conditions", loi.additional_details.special_conditions, width, y - 18, margin)

        c.setFont("Helvetica-Oblique", 8)
        c.setFillColor(colors.grey)
        c.drawString(margin, margin / 2, DISCLAIMER)

        c.showPage()
        c.save()
        buffer.seek(0)
        return buffer.read()

    def _sections(self, loi: LOIRecord) -> List[Tuple[str, List[Tuple[str, str]]]]:
        party = loi.party_info
        terms = loi.lease_terms
        details = loi.property_details
        extra = loi.additional_details
        return [
            (
                "Parties",
                [
                    ("Landlord", f"{party.landlord_name} <{party.landlord_email}>"),
                    ("Tenant", f"{party.tenant_name} <{party.tenant_email}>"),
                ],
            ),
            (
                "Lease Terms",
                [
                    ("Monthly Rent", self._fmt_currency(terms.monthly_rent)),
                    ("Security Deposit", self._fmt_currency(terms.security_deposit)),
                    ("Lease Type", terms.lease_type),
                    ("Lease Duration", terms.lease_duration),
                    ("Start Date", terms.start_date or "—"),
                ],
            ),
            (
                "Property Details",
                [
                    ("Property Size", self._fmt_number(details.property_size, suffix=" sq ft")),
                    ("Intended Use", details.intended_use),
                    ("Property Type", details.property_type),
                    ("Amenities", ", ".join(details.amenities) or "—"),
                    ("Utilities Included", ", ".join(details.utilities) or "—"),
                ],
            ),
            (
                "Additional Terms",
                [
                    ("Renewal Option", "Yes" if extra.renewal_option else "No"),
                    ("Tenant Improvement", extra.tenant_improvement or "—"),
                    ("Contingencies", extra.contingencies or "—"),
                ],
            ),
        ]

    def _draw_header(self, c: canvas.Canvas, loi: LOIRecord, width: float, height: float, margin: float) -> float:
        header_height = 70
        top = height - margin
        c.setFillColor(colors.HexColor("#0A2342"))
        c.rect(margin, top - header_height, width - 2 * margin, header_height, fill=1, stroke=0)
        c.setFillColor(colors.white)
        c.setFont("Helvetica-Bold", 20)
        c.drawString(margin + 16, top - 26, "LETTER OF INTENT")
        c.setFont("Helvetica", 12)
        c.drawString(margin + 16, top - 48, f"{loi.title} · {loi.property_address} · {loi.submit_status.value}")
        return top - header_height

    def _draw_section(
        self,
        c: canvas.Canvas,
        title: str,
        rows: List[Tuple[str, str]],
        width: float,
        top: float,
        margin: float,
    ) -> float:
        c.setFont("Helvetica-Bold", 12)
        c.setFillColor(colors.HexColor("#0A2342"))
        c.drawString(margin, top - 14, title)
        c.setFont("Helvetica", 10.5)
        c.setFillColor(colors.black)
        row_height = 14
        y = top - 30
        for idx, (label, value) in enumerate(rows):
            self._draw_row_stripe(c, idx, margin, width, y, row_height, x_padding=6)
            c.drawString(margin + 6, y, label)
            c.drawRightString(width - margin - 6, y, self._truncate(value or "—"))
            y -= row_height
        return y

    def _draw_paragraph(self, c: canvas.Canvas, title: str, text: str, width: float, top: float, margin: float) -> float:
        c.setFont("Helvetica-Bold", 12)
        c.setFillColor(colors.HexColor("#0A2342"))
        c.drawString(margin, top - 14, title)
        c.setFont("Helvetica", 10.5)
        c.setFillColor(colors.black)
        y = top - 30
        for line in self._wrap_text(text or "None.", width - 2 * margin):
            if y < margin + 20:
                break
            c.drawString(margin, y, line)
            y -= 13
        return y

    def _draw_row_stripe(
        self,
        c: canvas.Canvas,
        row_index: int,
        margin: float,
        width: float,
        baseline: float,
        row_height: float,
        *,
        x_padding: float = 0.0,
        y_padding: float = 3.0,
    ) -> None:
        """Shade every other row to create alternating horizontal stripes."""
        if row_index % 2 != 0:
            return
        stripe_y = baseline - row_height + y_padding + 8
        stripe_width = width - 2 * margin - 2 * x_padding
        c.saveState()
        c.setFillColor(colors.HexColor("#F2F4F7"))
        c.rect(margin + x_padding, stripe_y - 4, stripe_width, row_height, stroke=0, fill=1)
        c.restoreState()

    def _fmt_currency(self, value: Optional[str]) -> str:
        try:
            return f"${float(str(value).replace(',', '').replace('$', '')):,.2f}"
        except ValueError:
            return value or "—"

    def _fmt_number(self, value: Optional[str], suffix: str = "") -> str:
        if not value:
            return "—"
        return f"{value}{suffix}"

    def _truncate(self, text: str, limit: int = 70) -> str:
        return text if len(text) <= limit else text[: limit - 1] + "…"

    def _wrap_text(self, text: str, width: float, char_width: float = 6.0) -> List[str]:
        max_chars = max(20, int(width / char_width))
        words = text.split()
        lines: List[str] = []
        current: List[str] = []
        for word in words:
            tentative = " ".join(current + [word])
            if len(tentative) > max_chars and current:
                lines.append(" ".join(current))
                current = [word]
            else:
                current.append(word)
        if current:
            lines.append(" ".join(current))
        return lines
