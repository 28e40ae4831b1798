# ==== SERVICES PACKAGE ==== #

"""
Services package for procurement workflows.

Invoice derivation, vendor verification upkeep, attachment storage and
Excel export, each composed from the data access layer and the pure rules
in ``procurement.business``.
"""
