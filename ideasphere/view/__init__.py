from .view_widget import IdeaSphereViewWidget

__all__ = ["IdeaSphereViewWidget"]
