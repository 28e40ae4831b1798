# ==== ROUTES PACKAGE ==== #

"""
Routes package for API endpoints.

One module per resource: categories and clients, vendors, memos, purchase
orders, invoices, attachments, the dashboard summary and Excel exports.
"""
