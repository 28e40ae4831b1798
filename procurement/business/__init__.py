# ==== BUSINESS LOGIC PACKAGE ==== #

"""
Business logic package for domain rules.

Pure functions with no I/O: invoice tax calculation and the vendor
document-completeness verification rule.
"""
