from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from core.models import LedgerEntry
from core.services.financial.models import FinancialSnapshot


def _money(value: Decimal | None) -> float:
    return float(value or 0)


class FinancialExcelRenderer:
    def render(
        self,
        snapshot: FinancialSnapshot,
        output_path: Path,
        *,
        history: Sequence[LedgerEntry] = (),
    ) -> Path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb = Workbook()

        header_font = Font(bold=True)
        title_font = Font(bold=True, size=14)
        center = Alignment(horizontal="center")
        thin_border = Border(
            left=Side(style="thin"),
            right=Side(style="thin"),
            top=Side(style="thin"),
            bottom=Side(style="thin"),
        )
        header_fill = PatternFill("solid", fgColor="DDDDDD")

        def header_row(ws, headers):
            for col_index, h in enumerate(headers, start=1):
                cell = ws.cell(row=1, column=col_index, value=h)
                cell.font = header_font
                cell.alignment = center
                cell.fill = header_fill
                cell.border = thin_border

        # ---------------- Summary ----------------
        ws = wb.active
        ws.title = "Summary"
        ws["A1"] = f"Financial summary - {snapshot.scope} ({snapshot.anchor.isoformat()})"
        ws["A1"].font = title_font

        row = 3

        def kv(key, value):
            nonlocal row
            ws[f"A{row}"] = key
            ws[f"B{row}"] = value
            ws[f"A{row}"].font = header_font
            ws[f"A{row}"].border = thin_border
            ws[f"B{row}"].border = thin_border
            row += 1

        s = snapshot.summary
        kv("Total expected", _money(s.total_expected))
        kv("Total received", _money(s.total_received))
        kv("Total pending", _money(s.total_pending))
        kv("Consultant payments made", _money(s.consultant_payments_made))
        kv("Consultant payments pending", _money(s.consultant_payments_pending))
        kv("Projects net value", _money(s.projects_net_value))
        row += 1
        kv("Overdue stages", len(snapshot.overdue_stages))
        kv("Overdue entries", len(snapshot.overdue_entries))
        kv("Awaiting invoice", len(snapshot.awaiting_invoice))
        kv("Awaiting payment", len(snapshot.awaiting_payment))
        kv("Awaiting consultant settlement", len(snapshot.awaiting_consultant_settlement))

        ws.column_dimensions["A"].width = 32
        ws.column_dimensions["B"].width = 20

        # ---------------- Ledger ----------------
        entry_headers = ["Entry ID", "Type", "Description", "Amount", "Due", "Paid on", "Status", "Project"]

        def entry_sheet(title: str, entries: Sequence[LedgerEntry]) -> None:
            ws_l = wb.create_sheet(title)
            header_row(ws_l, entry_headers)
            for r, e in enumerate(entries, start=2):
                values = [
                    e.id,
                    e.entry_type.value,
                    e.description,
                    _money(e.amount),
                    e.due_date.isoformat() if e.due_date else "",
                    e.payment_date.isoformat() if e.payment_date else "",
                    e.status.value,
                    e.source_ref.project_id or "",
                ]
                for c, v in enumerate(values, 1):
                    ws_l.cell(r, c, v).border = thin_border
            ws_l.column_dimensions["A"].width = 36
            ws_l.column_dimensions["C"].width = 40
            for col_letter in ("B", "D", "E", "F", "G"):
                ws_l.column_dimensions[col_letter].width = 14
            ws_l.column_dimensions["H"].width = 36

        entry_sheet("Receivables", snapshot.receivables)
        entry_sheet("Payables", snapshot.payables)

        # ---------------- Cashflow ----------------
        ws_c = wb.create_sheet("Cashflow")
        header_row(
            ws_c,
            ["Period", "Receivable expected", "Received", "Payable expected", "Paid", "Net expected", "Net settled"],
        )
        for r, p in enumerate(snapshot.cashflow, start=2):
            values = [
                p.period_key,
                _money(p.receivable_expected),
                _money(p.receivable_settled),
                _money(p.payable_expected),
                _money(p.payable_settled),
                _money(p.net_expected),
                _money(p.net_settled),
            ]
            for c, v in enumerate(values, 1):
                ws_c.cell(r, c, v).border = thin_border
        for col_letter in ("A", "B", "C", "D", "E", "F", "G"):
            ws_c.column_dimensions[col_letter].width = 18

        # ---------------- Overdue stages ----------------
        ws_o = wb.create_sheet("Overdue")
        header_row(ws_o, ["Stage ID", "Project ID", "Stage", "Status", "End date", "Value"])
        for r, st in enumerate(snapshot.overdue_stages, start=2):
            values = [
                st.id,
                st.project_id,
                st.name,
                st.status,
                st.end_date.isoformat() if st.end_date else "",
                _money(st.value),
            ]
            for c, v in enumerate(values, 1):
                ws_o.cell(r, c, v).border = thin_border

        if history:
            entry_sheet("History", history)

        wb.save(output_path)
        return output_path


__all__ = ["FinancialExcelRenderer"]
