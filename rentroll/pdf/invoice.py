from __future__ import annotations

import logging

from fpdf import FPDF

from rentroll.constants import format_period
from rentroll.models.invoice import Invoice

logger = logging.getLogger(__name__)

FONT = "Helvetica"

PRIMARY = (33, 53, 85)
PRIMARY_LIGHT = (236, 240, 246)
ACCENT = (52, 199, 89)
TEXT = (40, 40, 40)
MUTED = (120, 120, 120)
WHITE = (255, 255, 255)
BORDER = (208, 212, 218)


def _latin1(text: str) -> str:
    """Core PDF fonts only cover latin-1."""
    return text.encode("latin-1", "replace").decode("latin-1")


def _amount(centavos: int) -> str:
    return f"PHP {centavos / 100:,.2f}"


class InvoicePDF:
    def generate(self, invoice: Invoice, property_name: str = "") -> bytes:
        pdf = FPDF()
        pdf.add_page()
        pdf.set_auto_page_break(auto=True, margin=20)
        page_w = pdf.w - pdf.l_margin - pdf.r_margin

        self._draw_header(pdf, page_w, invoice, property_name)
        self._draw_table(pdf, page_w, invoice)
        self._draw_total(pdf, page_w, invoice.total_amount)

        if invoice.notes:
            self._draw_notes(pdf, page_w, invoice.notes)

        self._draw_footer(pdf, page_w)

        output = bytes(pdf.output())
        logger.debug(
            "PDF generated: invoice=%s items=%d size=%d bytes",
            invoice.invoice_number,
            len(invoice.line_items),
            len(output),
        )
        return output

    def _draw_info_card(self, pdf: FPDF, x: float, y: float, w: float, h: float, label: str, value: str) -> None:
        pdf.set_fill_color(*PRIMARY_LIGHT)
        pdf.rect(x, y, w, h, "F")
        pdf.set_fill_color(*ACCENT)
        pdf.rect(x, y, 3, h, "F")

        pdf.set_xy(x + 10, y + 3)
        pdf.set_font(FONT, "B", 7)
        pdf.set_text_color(*MUTED)
        pdf.cell(w - 14, 5, label, new_x="LEFT", new_y="NEXT")
        pdf.set_x(x + 10)
        pdf.set_font(FONT, "B", 12)
        pdf.set_text_color(*TEXT)
        pdf.cell(w - 14, 9, _latin1(value))

    def _draw_header(self, pdf: FPDF, page_w: float, invoice: Invoice, property_name: str) -> None:
        x = pdf.l_margin
        y = pdf.get_y()

        pdf.set_fill_color(*PRIMARY)
        pdf.rect(x, y, page_w, 36, "F")

        pdf.set_y(y + 8)
        pdf.set_text_color(*WHITE)
        pdf.set_font(FONT, "B", 26)
        pdf.cell(0, 12, "INVOICE", align="C", new_x="LMARGIN", new_y="NEXT")
        pdf.set_font(FONT, "", 10)
        pdf.cell(0, 8, _latin1(invoice.invoice_number), align="C", new_x="LMARGIN", new_y="NEXT")

        pdf.ln(10)

        card_h = 24
        card_w = page_w / 2 - 3
        card_y = pdf.get_y()
        tenant = invoice.tenant_name or "-"
        room = f"Room {invoice.room_number}"
        if property_name:
            room = f"{property_name} / {room}"
        self._draw_info_card(pdf, x, card_y, card_w, card_h, "BILLED TO", tenant)
        self._draw_info_card(pdf, x + card_w + 6, card_y, card_w, card_h, "ROOM", room)

        row2_y = card_y + card_h + 6
        self._draw_info_card(
            pdf, x, row2_y, card_w, card_h, "PERIOD", format_period(invoice.year, invoice.billing_month)
        )
        self._draw_info_card(
            pdf, x + card_w + 6, row2_y, card_w, card_h, "DUE DATE", invoice.due_date.strftime("%B %d, %Y")
        )

        pdf.set_y(row2_y + card_h + 14)

    def _draw_table(self, pdf: FPDF, page_w: float, invoice: Invoice) -> None:
        col_desc = page_w * 0.70
        col_amount = page_w * 0.30
        line_h = 11

        pdf.set_font(FONT, "B", 11)
        pdf.set_text_color(*PRIMARY)
        pdf.cell(0, 8, "CHARGES", new_x="LMARGIN", new_y="NEXT")
        pdf.ln(2)

        pdf.set_fill_color(*PRIMARY)
        pdf.set_text_color(*WHITE)
        pdf.set_font(FONT, "B", 9)
        pdf.cell(col_desc, line_h, "  Description", border=0, fill=True)
        pdf.cell(col_amount, line_h, "Amount  ", border=0, fill=True, align="R", new_x="LMARGIN", new_y="NEXT")

        pdf.set_text_color(*TEXT)
        pdf.set_font(FONT, "", 10)

        if not invoice.line_items:
            pdf.set_fill_color(*PRIMARY_LIGHT)
            pdf.cell(page_w, line_h, "  No charges", border=0, fill=True, new_x="LMARGIN", new_y="NEXT")

        for i, item in enumerate(invoice.line_items):
            pdf.set_fill_color(*(PRIMARY_LIGHT if i % 2 == 0 else WHITE))
            pdf.cell(col_desc, line_h, f"  {_latin1(item.description)}", border=0, fill=True)
            pdf.cell(
                col_amount,
                line_h,
                f"{_amount(item.amount)}  ",
                border=0,
                fill=True,
                align="R",
                new_x="LMARGIN",
                new_y="NEXT",
            )

        pdf.set_draw_color(*BORDER)
        pdf.set_line_width(0.3)
        y = pdf.get_y()
        pdf.line(pdf.l_margin, y, pdf.l_margin + page_w, y)

    def _draw_total(self, pdf: FPDF, page_w: float, total_amount: int) -> None:
        pdf.ln(4)
        pdf.set_fill_color(*PRIMARY)
        pdf.set_text_color(*WHITE)
        pdf.set_font(FONT, "B", 12)
        pdf.cell(page_w * 0.70, 14, "TOTAL  ", border=0, fill=True, align="R")
        pdf.cell(
            page_w * 0.30,
            14,
            f"{_amount(total_amount)}  ",
            border=0,
            fill=True,
            align="R",
            new_x="LMARGIN",
            new_y="NEXT",
        )

    def _draw_notes(self, pdf: FPDF, page_w: float, notes: str) -> None:
        pdf.ln(12)
        pdf.set_font(FONT, "B", 8)
        pdf.set_text_color(*MUTED)
        pdf.cell(0, 6, "NOTES", new_x="LMARGIN", new_y="NEXT")
        pdf.set_text_color(*TEXT)
        pdf.set_font(FONT, "", 10)
        pdf.multi_cell(page_w, 6, _latin1(notes))

    def _draw_footer(self, pdf: FPDF, page_w: float) -> None:
        pdf.set_y(-30)
        pdf.set_draw_color(*BORDER)
        pdf.set_line_width(0.3)
        y = pdf.get_y()
        pdf.line(pdf.l_margin, y, pdf.l_margin + page_w, y)
        pdf.ln(5)
        pdf.set_font(FONT, "", 7)
        pdf.set_text_color(*MUTED)
        pdf.cell(0, 5, "Generated automatically", align="C")
