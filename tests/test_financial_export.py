from __future__ import annotations

from datetime import date

from openpyxl import load_workbook

from core.models import LedgerEntryType
from core.reporting.excel import FinancialExcelRenderer


def test_excel_export_writes_summary_ledger_and_cashflow(services, tmp_path):
    ps = services["project_service"]
    ss = services["stage_service"]
    fs = services["financial_service"]

    project = ps.create_project(
        "Export Project",
        "em_producao",
        total_value=1000,
        main_consultant_value=400,
        main_consultant_id="consultant-1",
        stages=[{"name": "Design", "status": "em_producao", "value": 1000, "end_date": date(2024, 1, 10)}],
    )
    ss.set_stage_status(project.stages[0].id, "aguardando_repasse")

    snapshot = fs.get_snapshot(anchor=date(2024, 2, 1))
    out = FinancialExcelRenderer().render(
        snapshot,
        tmp_path / "reports" / "financial.xlsx",
        history=fs.list_accounts_history(),
    )

    assert out.exists()
    wb = load_workbook(out)
    assert wb.sheetnames == ["Summary", "Receivables", "Payables", "Cashflow", "Overdue", "History"]

    summary = wb["Summary"]
    assert summary["A3"].value == "Total expected"
    assert summary["B3"].value == 1000

    receivables = wb["Receivables"]
    assert receivables.cell(1, 1).value == "Entry ID"
    assert receivables.cell(2, 3).value == "Export Project - Design"
    assert receivables.cell(2, 7).value == "pending"

    payables = wb["Payables"]
    assert payables.cell(2, 4).value == 400
    assert payables.cell(2, 2).value == LedgerEntryType.PAYABLE.value

    cashflow = wb["Cashflow"]
    assert cashflow.cell(2, 1).value == "2024-01"
    assert cashflow.cell(2, 6).value == 600

    assert wb["Overdue"].cell(2, 3).value == "Design"
    assert wb["History"].max_row == 3


def test_excel_export_without_history_skips_the_sheet(services, tmp_path):
    snapshot = services["financial_service"].get_snapshot(anchor=date(2024, 2, 1))

    out = FinancialExcelRenderer().render(snapshot, tmp_path / "empty.xlsx")

    assert "History" not in load_workbook(out).sheetnames
