"""Application wiring layer."""

from app.application.context import AppContext, make_app_context

__all__ = ["AppContext", "make_app_context"]
