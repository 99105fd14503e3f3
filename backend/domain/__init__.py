"""Domain layer for Korean menu analysis.

Business rules of the menu pipeline, decoupled from the REST API and
from infrastructure adapters.
"""
