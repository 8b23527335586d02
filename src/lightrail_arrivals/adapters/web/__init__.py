"""Web adapter - HTTP front for the routes snapshot."""

from lightrail_arrivals.adapters.web.app import create_app
from lightrail_arrivals.adapters.web.server import WebServer

__all__ = ["WebServer", "create_app"]
