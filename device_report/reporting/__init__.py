# Reporting package
from .spreadsheet import create_spreadsheet
from .report import build_report_rows, collect_report_rows, generate_report

__all__ = ['create_spreadsheet', 'build_report_rows', 'collect_report_rows', 'generate_report']
