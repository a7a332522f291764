"""Trip route orchestration: live resolution, fallback and published snapshots."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from ...config import settings
from ...data.station_registry import StationRegistry, load_registry
from ...models.domain import RouteGeometry, RoutePoint, RouteSource
from .errors import NetworkUnavailable, RouteResolutionError, ServiceDisposed
from .fallback import build_fallback
from .metrics import to_kilometers, to_minutes
from .resolver import RouteResolver

logger = logging.getLogger(__name__)


class RouteStatus(str, Enum):
    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED_LIVE = "resolved_live"
    RESOLVED_FALLBACK = "resolved_fallback"


_STATUS_BY_SOURCE = {
    RouteSource.LIVE: RouteStatus.RESOLVED_LIVE,
    RouteSource.FALLBACK: RouteStatus.RESOLVED_FALLBACK,
}


@dataclass(frozen=True, slots=True)
class TripRouteState:
    outbound: Optional[RouteGeometry]
    return_route: Optional[RouteGeometry]
    status: RouteStatus


@dataclass(frozen=True, slots=True)
class TripRouteSnapshot:
    """Read-only view handed to map rendering and trip-info consumers."""

    outbound_route: tuple[RoutePoint, ...]
    return_route: tuple[RoutePoint, ...]
    distance_km: Optional[float]
    duration_min: Optional[int]
    route_source: Optional[RouteSource]
    status: RouteStatus
    resolved_at: Optional[datetime] = None


UNRESOLVED_SNAPSHOT = TripRouteSnapshot(
    outbound_route=(),
    return_route=(),
    distance_km=None,
    duration_min=None,
    route_source=None,
    status=RouteStatus.UNRESOLVED,
)

SnapshotListener = Callable[[TripRouteSnapshot], None]


def _default_deadline() -> float:
    """Upper bound for one resolution, covering every configured attempt and backoff."""
    attempts = settings.osrm_max_retries + 1
    backoff = sum(settings.osrm_backoff_seconds * (2**i) for i in range(settings.osrm_max_retries))
    return settings.osrm_timeout_seconds * attempts + backoff + 1.0


class TripRouteService:
    """Owns the route state machine for one fixed shuttle route.

    At most one resolution task runs at a time; start()/refresh() calls made
    while it is in flight await the same task. dispose() cancels it and the
    result is discarded.
    """

    def __init__(
        self,
        registry: StationRegistry | None = None,
        resolver: RouteResolver | None = None,
        *,
        route_id: str | None = None,
        deadline_seconds: float | None = None,
    ) -> None:
        self._registry = registry or load_registry()
        self._owns_resolver = resolver is None
        self._resolver = resolver or RouteResolver()
        self.route_id = route_id or self._registry.default_route_id
        self._deadline = deadline_seconds if deadline_seconds is not None else _default_deadline()
        self._state = TripRouteState(outbound=None, return_route=None, status=RouteStatus.UNRESOLVED)
        self._snapshot = UNRESOLVED_SNAPSHOT
        self._task: asyncio.Task | None = None
        self._listeners: list[SnapshotListener] = []
        self._disposed = False

    @property
    def registry(self) -> StationRegistry:
        return self._registry

    @property
    def resolving(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def status(self) -> RouteStatus:
        if self.resolving and not self._disposed:
            return RouteStatus.RESOLVING
        return self._state.status

    @property
    def state(self) -> TripRouteState:
        return TripRouteState(
            outbound=self._state.outbound,
            return_route=self._state.return_route,
            status=self.status,
        )

    def snapshot(self) -> TripRouteSnapshot:
        return self._snapshot

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Call `listener` with every newly published snapshot. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def start(self) -> TripRouteSnapshot:
        """Resolve the route for the first time. On a started service this is a refresh."""
        return await self._await_resolution()

    async def refresh(self) -> TripRouteSnapshot:
        """Re-resolve the route, joining the in-flight attempt if there is one."""
        return await self._await_resolution()

    async def dispose(self) -> None:
        """Cancel any in-flight resolution. The service cannot be restarted afterwards."""
        self._disposed = True
        self._listeners.clear()
        task = self._task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception as exc:
                logger.debug(f"Resolution ended with {type(exc).__name__} while disposing: {exc}")
        if self._owns_resolver:
            await self._resolver.aclose()

    async def _await_resolution(self) -> TripRouteSnapshot:
        if self._disposed:
            raise ServiceDisposed("TripRouteService has been disposed.")
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self._resolve())
        task = self._task
        try:
            # Shield so one caller going away does not cancel the attempt shared with others.
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if task.cancelled() and self._disposed:
                return self._snapshot
            raise

    async def _resolve(self) -> TripRouteSnapshot:
        origin, destination = self._registry.terminals(self.route_id)
        waypoints = self._registry.waypoints(self.route_id)

        try:
            try:
                outbound = await asyncio.wait_for(
                    self._resolver.resolve(origin, waypoints, destination),
                    timeout=self._deadline,
                )
            except asyncio.TimeoutError as exc:
                raise NetworkUnavailable(f"Route resolution exceeded {self._deadline:.1f}s") from exc
        except RouteResolutionError as error:
            logger.warning(f"Live route unavailable ({type(error).__name__}: {error}). Using fallback route.")
            outbound = build_fallback(origin, waypoints, destination)

        if self._disposed:
            return self._snapshot
        return self._publish(outbound)

    def _publish(self, outbound: RouteGeometry) -> TripRouteSnapshot:
        return_route = outbound.reversed()
        self._state = TripRouteState(
            outbound=outbound,
            return_route=return_route,
            status=_STATUS_BY_SOURCE[outbound.source],
        )
        self._snapshot = TripRouteSnapshot(
            outbound_route=outbound.points,
            return_route=return_route.points,
            distance_km=to_kilometers(outbound.distance_meters),
            duration_min=to_minutes(outbound.duration_seconds),
            route_source=outbound.source,
            status=self._state.status,
            resolved_at=datetime.now(timezone.utc),
        )
        logger.info(
            f"Route '{self.route_id}' resolved ({outbound.source.value}): "
            f"{self._snapshot.distance_km} km, {self._snapshot.duration_min} min"
        )
        for listener in list(self._listeners):
            try:
                listener(self._snapshot)
            except Exception:
                logger.exception("Snapshot listener failed")
        return self._snapshot
