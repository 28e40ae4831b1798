"""Procurement API: vendors, memos, purchase orders and invoices."""

__version__ = "0.1.0"
