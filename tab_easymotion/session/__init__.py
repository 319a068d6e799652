from .channel import ChannelClosed, MessageChannel
from .hints_panel import TabHintsPanel
from .panel_view import HintPanelView

__all__ = ["ChannelClosed", "MessageChannel", "TabHintsPanel", "HintPanelView"]
