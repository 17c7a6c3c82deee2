"""
CLI layer for order-store.

Terminal transport only: argument parsing and output.  Every command
delegates to :class:`~orderstore.stores.order_store.OrderDataStore`.

Entry point::

    orderstore --help
"""

from orderstore.cli.app import app

__all__ = ["app"]
