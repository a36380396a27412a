"""Tour persistence: cities, tour routes and tour stops.

Upserts are keyed by natural identity rather than surrogate ids:
- City: (name, country). Inserted if absent, never updated afterwards.
- TourRoute: one per city. An existing route has its descriptive fields
  updated and all of its stops hard-deleted before the new stops are
  inserted.

Lookups return a tagged result (``Found`` or ``NotFound``) so the upsert
branches are explicit.

Two implementations:
- SupabaseTourRepository: PostgREST over httpx. PostgREST has no
  multi-statement transactions, so a failure between the route update and
  the stop insert can leave a route without stops until the next run.
- InMemoryTourRepository: process-local store whose ``save_tour`` runs
  under a lock and rolls back on failure.
"""

import asyncio
import copy
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

import httpx

from tourguide.models import (
    City,
    CityDraft,
    CityTours,
    InputMissingError,
    PersistenceError,
    SavedTour,
    TourRoute,
    TourRouteDraft,
    TourStop,
    TourStopDraft,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    """A lookup that matched an existing row."""

    value: T


@dataclass(frozen=True)
class NotFound:
    """A lookup that matched nothing."""


Lookup = Found[T] | NotFound


class TourRepository(ABC):
    """Abstract base class for tour storage.

    Subclasses implement row-level operations; ``save_tour`` and
    ``get_city_tours`` compose them.
    """

    # ── Row-level operations ──────────────────────────────────────────

    @abstractmethod
    async def search_cities(self, name: str, country: str | None = None) -> list[City]:
        pass

    @abstractmethod
    async def get_city(self, city_id: int) -> City | None:
        pass

    @abstractmethod
    async def insert_city(self, draft: CityDraft) -> City:
        pass

    @abstractmethod
    async def list_routes(self, city_id: int) -> list[TourRoute]:
        pass

    @abstractmethod
    async def insert_route(self, city_id: int, draft: TourRouteDraft) -> TourRoute:
        pass

    @abstractmethod
    async def update_route(self, route_id: int, draft: TourRouteDraft) -> None:
        pass

    @abstractmethod
    async def delete_stops(self, route_id: int) -> None:
        pass

    @abstractmethod
    async def insert_stops(self, route_id: int, stops: list[TourStopDraft]) -> None:
        pass

    @abstractmethod
    async def list_stops(self, route_id: int) -> list[TourStop]:
        """Stops of a route, ordered by ``stop_order`` ascending."""
        pass

    # ── Natural-key lookups ───────────────────────────────────────────

    async def find_city(self, name: str, country: str) -> Lookup[City]:
        cities = await self.search_cities(name, country)
        return Found(cities[0]) if cities else NotFound()

    async def find_route(self, city_id: int) -> Lookup[TourRoute]:
        routes = await self.list_routes(city_id)
        return Found(routes[0]) if routes else NotFound()

    # ── Composite operations ──────────────────────────────────────────

    async def save_tour(
        self,
        city: CityDraft,
        route: TourRouteDraft,
        stops: list[TourStopDraft],
    ) -> SavedTour:
        """Upsert city and route by natural key and replace the route's stops."""
        city_lookup = await self.find_city(city.name, city.country)
        if isinstance(city_lookup, Found):
            city_id = city_lookup.value.id
            city_created = False
            logger.info(f"[STORE] Reusing city {city.name}, {city.country} (id={city_id})")
        else:
            city_id = (await self.insert_city(city)).id
            city_created = True
            logger.info(f"[STORE] Created city {city.name}, {city.country} (id={city_id})")

        route_lookup = await self.find_route(city_id)
        if isinstance(route_lookup, Found):
            route_id = route_lookup.value.id
            await self.update_route(route_id, route)
            await self.delete_stops(route_id)
            route_replaced = True
            logger.info(f"[STORE] Replacing route {route_id} for city {city_id}")
        else:
            route_id = (await self.insert_route(city_id, route)).id
            route_replaced = False
            logger.info(f"[STORE] Created route {route_id} for city {city_id}")

        await self.insert_stops(route_id, stops)
        logger.info(f"[STORE] Inserted {len(stops)} stops for route {route_id}")

        return SavedTour(
            city_id=city_id,
            route_id=route_id,
            stop_count=len(stops),
            city_created=city_created,
            route_replaced=route_replaced,
        )

    async def get_city_tours(
        self,
        city_id: int | None = None,
        name: str | None = None,
        country: str | None = None,
    ) -> CityTours | None:
        """Load a city with its routes and ordered stops.

        Looks up by id when given, otherwise by name (and country when
        given). Returns None when no city matches.

        Raises:
            InputMissingError: Neither ``city_id`` nor ``name`` was given.
        """
        if city_id is not None:
            city = await self.get_city(city_id)
        elif name:
            matches = await self.search_cities(name, country)
            city = matches[0] if matches else None
        else:
            raise InputMissingError("Either cityId or cityName is required")

        if city is None:
            return None

        routes = await self.list_routes(city.id)
        for route in routes:
            route.tour_stops = await self.list_stops(route.id)
        city.tour_routes = routes

        return CityTours(
            city=city,
            total_routes=len(routes),
            total_stops=sum(len(route.tour_stops) for route in routes),
        )


# ═══════════════════════════════════════════════════════════════════════
# Supabase (PostgREST)
# ═══════════════════════════════════════════════════════════════════════

class SupabaseTourRepository(TourRepository):
    """PostgREST client for the ``cities``/``tour_routes``/``tour_stops`` tables."""

    def __init__(
        self,
        supabase_url: str,
        service_role_key: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not supabase_url or not service_role_key:
            raise ValueError("Supabase configuration missing")
        self._rest_url = f"{supabase_url.rstrip('/')}/rest/v1"
        self._headers = {
            "Authorization": f"Bearer {service_role_key}",
            "apikey": service_role_key,
            "Content-Type": "application/json",
        }
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._rest_url,
            headers=self._headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def _request(
        self,
        method: str,
        table: str,
        operation: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
        return_rows: bool = False,
    ) -> Any:
        headers = {"Prefer": "return=representation"} if return_rows else {}
        try:
            async with self._client() as client:
                response = await client.request(
                    method, f"/{table}", params=params, json=json, headers=headers
                )
        except httpx.HTTPError as e:
            raise PersistenceError(operation, f"{type(e).__name__}: {e}") from e

        if response.is_error:
            logger.error(f"[STORE] {operation} failed: {response.status_code} {response.text}")
            raise PersistenceError(operation, f"{response.status_code} {response.text}")

        if not response.content:
            return None
        return response.json()

    async def search_cities(self, name: str, country: str | None = None) -> list[City]:
        params = {"name": f"eq.{name}"}
        if country:
            params["country"] = f"eq.{country}"
        rows = await self._request("GET", "cities", "fetch city data", params=params)
        return [City.model_validate(row) for row in rows or []]

    async def get_city(self, city_id: int) -> City | None:
        rows = await self._request(
            "GET", "cities", "fetch city data", params={"id": f"eq.{city_id}"}
        )
        return City.model_validate(rows[0]) if rows else None

    async def insert_city(self, draft: CityDraft) -> City:
        rows = await self._request(
            "POST",
            "cities",
            "create city record",
            json=draft.model_dump(mode="json"),
            return_rows=True,
        )
        if not rows:
            raise PersistenceError("create city record", "no row returned")
        return City.model_validate(rows[0])

    async def list_routes(self, city_id: int) -> list[TourRoute]:
        rows = await self._request(
            "GET",
            "tour_routes",
            "fetch tour routes",
            params={"city_id": f"eq.{city_id}", "order": "id.asc"},
        )
        return [TourRoute.model_validate(row) for row in rows or []]

    async def insert_route(self, city_id: int, draft: TourRouteDraft) -> TourRoute:
        rows = await self._request(
            "POST",
            "tour_routes",
            "create tour route",
            json={"city_id": city_id, **draft.model_dump(mode="json")},
            return_rows=True,
        )
        if not rows:
            raise PersistenceError("create tour route", "no row returned")
        return TourRoute.model_validate(rows[0])

    async def update_route(self, route_id: int, draft: TourRouteDraft) -> None:
        await self._request(
            "PATCH",
            "tour_routes",
            "update tour route",
            params={"id": f"eq.{route_id}"},
            json=draft.model_dump(mode="json"),
        )

    async def delete_stops(self, route_id: int) -> None:
        await self._request(
            "DELETE",
            "tour_stops",
            "delete tour stops",
            params={"route_id": f"eq.{route_id}"},
        )

    async def insert_stops(self, route_id: int, stops: list[TourStopDraft]) -> None:
        if not stops:
            return
        rows = [{"route_id": route_id, **stop.model_dump(mode="json")} for stop in stops]
        await self._request("POST", "tour_stops", "create tour stops", json=rows)

    async def list_stops(self, route_id: int) -> list[TourStop]:
        rows = await self._request(
            "GET",
            "tour_stops",
            "fetch tour stops",
            params={"route_id": f"eq.{route_id}", "order": "stop_order.asc"},
        )
        return [TourStop.model_validate(row) for row in rows or []]


# ═══════════════════════════════════════════════════════════════════════
# In-memory
# ═══════════════════════════════════════════════════════════════════════

class InMemoryTourRepository(TourRepository):
    """Process-local store used when Supabase is not configured.

    ``save_tour`` holds a lock for the whole upsert and restores the
    previous state if any step fails, so readers never observe a route
    whose stops have been deleted but not yet rewritten.
    """

    def __init__(self) -> None:
        self._cities: dict[int, City] = {}
        self._routes: dict[int, TourRoute] = {}
        self._stops: dict[int, TourStop] = {}
        self._next_id = {"cities": 1, "tour_routes": 1, "tour_stops": 1}
        self._lock = asyncio.Lock()

    def _allocate_id(self, table: str) -> int:
        next_id = self._next_id[table]
        self._next_id[table] = next_id + 1
        return next_id

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    async def search_cities(self, name: str, country: str | None = None) -> list[City]:
        return [
            city.model_copy(deep=True)
            for city in self._cities.values()
            if city.name == name and (country is None or city.country == country)
        ]

    async def get_city(self, city_id: int) -> City | None:
        city = self._cities.get(city_id)
        return city.model_copy(deep=True) if city else None

    async def insert_city(self, draft: CityDraft) -> City:
        city = City(id=self._allocate_id("cities"), created_at=self._now(), **draft.model_dump())
        self._cities[city.id] = city
        return city.model_copy(deep=True)

    async def list_routes(self, city_id: int) -> list[TourRoute]:
        routes = [r for r in self._routes.values() if r.city_id == city_id]
        return [r.model_copy(deep=True) for r in sorted(routes, key=lambda r: r.id)]

    async def insert_route(self, city_id: int, draft: TourRouteDraft) -> TourRoute:
        if city_id not in self._cities:
            raise PersistenceError("create tour route", f"city {city_id} does not exist")
        route = TourRoute(
            id=self._allocate_id("tour_routes"),
            city_id=city_id,
            created_at=self._now(),
            **draft.model_dump(),
        )
        self._routes[route.id] = route
        return route.model_copy(deep=True)

    async def update_route(self, route_id: int, draft: TourRouteDraft) -> None:
        route = self._routes.get(route_id)
        if route is None:
            raise PersistenceError("update tour route", f"route {route_id} does not exist")
        self._routes[route_id] = route.model_copy(update=draft.model_dump())

    async def delete_stops(self, route_id: int) -> None:
        self._stops = {k: s for k, s in self._stops.items() if s.route_id != route_id}

    async def insert_stops(self, route_id: int, stops: list[TourStopDraft]) -> None:
        if route_id not in self._routes:
            raise PersistenceError("create tour stops", f"route {route_id} does not exist")
        orders = [stop.stop_order for stop in stops]
        if len(set(orders)) != len(orders):
            raise PersistenceError("create tour stops", "duplicate stop_order")
        for stop in stops:
            row = TourStop(
                id=self._allocate_id("tour_stops"),
                route_id=route_id,
                created_at=self._now(),
                **stop.model_dump(),
            )
            self._stops[row.id] = row

    async def list_stops(self, route_id: int) -> list[TourStop]:
        stops = [s for s in self._stops.values() if s.route_id == route_id]
        return [s.model_copy(deep=True) for s in sorted(stops, key=lambda s: s.stop_order)]

    async def save_tour(
        self,
        city: CityDraft,
        route: TourRouteDraft,
        stops: list[TourStopDraft],
    ) -> SavedTour:
        async with self._lock:
            snapshot = copy.deepcopy(
                (self._cities, self._routes, self._stops, self._next_id)
            )
            try:
                return await super().save_tour(city, route, stops)
            except Exception:
                self._cities, self._routes, self._stops, self._next_id = snapshot
                logger.warning("[STORE] save_tour failed, rolled back in-memory state")
                raise
