"""Itemsync: list item mutation and reconciliation.

Submits user edits on list items for remote validation, folds the per-field
outcome back into the item, status and selection stores, and handles item
creation and partially successful deletes.
"""

__version__ = "0.1.0"
