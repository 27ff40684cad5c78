"""hrdesk — adaptive paginated-collection client for the HR/asset dashboard."""

__version__ = "0.1.0"
