"""Starlette application exposing the schedule query contract over HTTP."""

import json
import logging
from typing import Any

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from mbus_departures.adapters.config.journey_group_loader import parse_journey_group
from mbus_departures.domain.errors import InvalidQueryError
from mbus_departures.domain.models import JourneyGroup, RefreshResult, ScheduleQuery
from mbus_departures.domain.models.schedule_query import normalize_query_date
from mbus_departures.domain.ports import JourneyGroupService, ScheduleService

logger = logging.getLogger(__name__)


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=400)


def _refresh_response(result: RefreshResult) -> JSONResponse:
    return JSONResponse(result.to_response())


def _parse_groups(payload: Any) -> list[JourneyGroup]:
    """Parse the ``groups`` list of a request body.

    Raises:
        InvalidQueryError: If the body has no list of groups.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("groups"), list):
        raise InvalidQueryError("Request body must contain a 'groups' list")
    groups = [parse_journey_group(group_data) for group_data in payload["groups"]]
    return [group for group in groups if group is not None]


def create_app(
    schedule_service: ScheduleService,
    group_service: JourneyGroupService,
    groups: list[JourneyGroup] | None = None,
) -> Starlette:
    """Build the HTTP application.

    Args:
        schedule_service: Resolves single stop/route queries.
        group_service: Aggregates journey groups.
        groups: Pinned groups refreshed by ``GET /api/groups/departures``.
    """
    configured_groups = list(groups or [])

    async def schedules(request: Request) -> Response:
        """Next departures of a route at a stop: ?stop=&route=&datum= (or date=)."""
        params = request.query_params
        try:
            query = ScheduleQuery.from_params(
                params.get("stop"),
                params.get("route"),
                params.get("datum") or params.get("date"),
            )
        except InvalidQueryError as e:
            return _bad_request(str(e))

        resolution = await schedule_service.resolve_query(query)
        return JSONResponse(resolution.to_response())

    async def configured_group_departures(request: Request) -> Response:
        """Merged departures of every configured group: ?date= (optional)."""
        try:
            date = normalize_query_date(request.query_params.get("date"))
        except ValueError as e:
            return _bad_request(str(e))

        result = await group_service.refresh_all(configured_groups, date)
        return _refresh_response(result)

    async def group_departures(request: Request) -> Response:
        """Merged departures of the groups posted by the caller."""
        try:
            payload = await request.json()
        except json.JSONDecodeError:
            return _bad_request("Request body must be JSON")
        try:
            requested_groups = _parse_groups(payload)
            date = normalize_query_date(payload.get("date"))
        except (InvalidQueryError, ValueError) as e:
            return _bad_request(str(e))

        result = await group_service.refresh_all(requested_groups, date)
        return _refresh_response(result)

    async def healthz(_request: Request) -> Response:
        """Health check endpoint for load balancers and monitoring."""
        return Response(content="Ok", media_type="text/plain")

    return Starlette(
        routes=[
            Route("/api/schedules", schedules, methods=["GET"]),
            Route("/api/groups/departures", configured_group_departures, methods=["GET"]),
            Route("/api/groups/departures", group_departures, methods=["POST"]),
            Route("/healthz", healthz, methods=["GET"]),
        ]
    )
