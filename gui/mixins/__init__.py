from gui.mixins.grid_mixin import GridMixin
from gui.mixins.throbber_mixin import ThrobberMixin

__all__ = ["GridMixin", "ThrobberMixin"]
