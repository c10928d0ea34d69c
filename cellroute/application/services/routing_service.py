"""Application service running batch routing off the caller's thread."""
import asyncio
import logging
from typing import Optional, Sequence

from ...domain.models.constraints import DRCRule
from ...domain.models.layout import Cell, Net, Wire
from ...domain.models.routing import RoutingConfig, RouteResult
from ...domain.services.pathfinder import CancellationToken
from ...domain.services.routing_engine import NetRouter

logger = logging.getLogger(__name__)


class RoutingService:
    """Wraps a NetRouter with cancellation and an asyncio-friendly entry point."""
    
    def __init__(self, config: RoutingConfig, rules: Sequence[DRCRule] = ()):
        self.router = NetRouter(config, rules)
        self.cancel_token = CancellationToken()
        self.routing_active = False
    
    def route_sync(self, nets: Sequence[Net], cells: Sequence[Cell] = (),
                   existing_wires: Sequence[Wire] = ()) -> RouteResult:
        """Route a batch on the calling thread."""
        self.cancel_token.reset()
        self.routing_active = True
        try:
            return self.router.route(nets, cells, existing_wires, self.cancel_token)
        finally:
            self.routing_active = False
    
    async def route_async(self, nets: Sequence[Net], cells: Sequence[Cell] = (),
                          existing_wires: Sequence[Wire] = ()) -> RouteResult:
        """Route a batch in the default executor so the event loop stays responsive."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.route_sync, nets, cells, existing_wires)
    
    def cancel(self) -> None:
        """Ask a running batch to stop at its next search expansion."""
        if self.routing_active:
            logger.info("Cancelling active routing run")
        self.cancel_token.cancel()
    
    @property
    def config(self) -> RoutingConfig:
        return self.router.config
