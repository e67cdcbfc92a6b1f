"""Chat translation coordination.

Provides the per-message translation coordinator and the render pass used by the chat view.
"""

from core.chat.coordinator import ChatTranslationCoordinator
from core.chat.render_pass import RenderPass

__all__: list[str] = ["ChatTranslationCoordinator", "RenderPass"]
