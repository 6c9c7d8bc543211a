"""
Feedback Proxy Service.

A thin proxy in front of a product-feedback API (notes, companies, tags)
that records every mutation it performs in a local change ledger.

The service allows users to:
- Create, update and delete notes, and add or remove note tags
- List the recorded changes
- Roll back any recorded change by replaying its inverse API call
"""

__version__ = "0.1.0"
