import logging
from typing import Optional

from initiate.app.config.settings import Settings
from initiate.app.services.explorer_service import ExplorerService
from initiate.app.services.wallet_service import WalletService
from initiate.app.tools.explorer_tools import build_explorer_tools
from initiate.app.tools.registry import ToolRegistry
from initiate.app.tools.wallet_tools import build_wallet_tools

logger = logging.getLogger(__name__)


def build_default_registry(
    settings: Settings,
    explorer: Optional[ExplorerService] = None,
    wallet: Optional[WalletService] = None,
) -> ToolRegistry:
    """Explorer tools first, then the wallet tools when they are enabled."""
    explorer = explorer or ExplorerService(settings)
    registry = ToolRegistry(
        build_explorer_tools(explorer, settings.TOKEN_ICON_URL_TEMPLATE)
    )

    if settings.ENABLE_WALLET_TOOLS:
        for tool in build_wallet_tools(wallet or WalletService(settings)):
            registry.register(tool)

    logger.info(f"Registered {len(registry)} tools")
    return registry
