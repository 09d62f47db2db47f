from .app_controller import AppStateController, RenderHook

__all__ = ["AppStateController", "RenderHook"]
