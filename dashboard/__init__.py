"""
Dashboard package.

Query functions, row types and chart/table builders for the invoicing dashboard.
"""
