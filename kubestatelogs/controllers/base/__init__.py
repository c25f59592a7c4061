"""Base controller classes."""

from kubestatelogs.controllers.base.base_controller import BaseController

__all__ = ["BaseController"]
