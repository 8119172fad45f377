"""FastAPI surface for round-trip cost estimates."""
from typing import Optional, Union

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from loguru import logger
from pydantic import BaseModel

from configurations.config import Config, TripConfig
from core.errors import EmptyQueryError, InvalidTollError
from core.pipeline import TripEstimationPipeline
from models.trip import Error, Loading, PipelineState, Ready
from routing.osrm_route_provider import OSRMRouteProvider
from services.geocoding_service import NominatimGeocoder
from visualization.folium_map import FoliumMapPresenter
from visualization.trip_summary import format_trip_summary

router = APIRouter(tags=["estimate"])


class EstimateRequest(BaseModel):
    destination: str
    toll: Optional[Union[float, str]] = None


class TollUpdate(BaseModel):
    toll: Optional[Union[float, str]] = None


def serialize_state(state: PipelineState, price_per_km: float) -> dict:
    payload = {"status": state.status}
    if isinstance(state, Loading):
        payload["query"] = state.query
    elif isinstance(state, Error):
        payload.update({"query": state.query, "message": state.message, "kind": state.kind})
    elif isinstance(state, Ready):
        payload.update({
            "query": state.query,
            "origin": state.origin.to_dict(),
            "destination": state.destination.to_dict(),
            "path": state.route.lat_lon_path(),
            "estimate": state.estimate.to_dict(),
            "display": format_trip_summary(state.estimate, price_per_km),
        })
    return payload


def _pipeline(request: Request) -> TripEstimationPipeline:
    return request.app.state.pipeline


@router.get("/", response_class=HTMLResponse)
async def root(request: Request):
    """Interactive map of the latest estimate."""
    return HTMLResponse(content=request.app.state.presenter.to_html())


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/config")
async def get_config(request: Request):
    pipeline = _pipeline(request)
    return {
        "origin": pipeline.origin.to_dict(),
        "origin_label": pipeline.origin_label,
        "price_per_km": pipeline.price_per_km,
        "toll_rates_url": Config.TOLL_RATES_URL,
    }


@router.get("/state")
async def get_state(request: Request):
    pipeline = _pipeline(request)
    return JSONResponse(serialize_state(pipeline.state, pipeline.price_per_km))


@router.post("/estimate")
async def create_estimate(body: EstimateRequest, request: Request):
    """Resolve the destination, fetch the route and price the round trip."""
    pipeline = _pipeline(request)
    try:
        if body.toll is not None:
            pipeline.update_toll_input(body.toll)
        state = await pipeline.submit(body.destination)
    except (EmptyQueryError, InvalidTollError) as e:
        raise HTTPException(status_code=422, detail=e.user_message)
    return JSONResponse(serialize_state(state, pipeline.price_per_km))


@router.put("/estimate/toll")
async def update_toll(body: TollUpdate, request: Request):
    """Reprice the current route with a new toll amount."""
    pipeline = _pipeline(request)
    try:
        state = pipeline.update_toll_input(body.toll)
    except InvalidTollError as e:
        raise HTTPException(status_code=422, detail=e.user_message)
    return JSONResponse(serialize_state(state, pipeline.price_per_km))


def create_app(pipeline: Optional[TripEstimationPipeline] = None,
               presenter: Optional[FoliumMapPresenter] = None) -> FastAPI:
    if pipeline is None:
        pipeline = TripEstimationPipeline(
            resolver=NominatimGeocoder(),
            route_provider=OSRMRouteProvider(),
            config=TripConfig.from_config(),
        )
    if presenter is None:
        presenter = FoliumMapPresenter(
            origin=pipeline.origin,
            origin_label=pipeline.origin_label,
            price_per_km=pipeline.price_per_km,
        )
    pipeline.subscribe(presenter.handle_state)

    app = FastAPI(
        title="Round-trip Cost Estimator",
        description="Driving distance, duration and round-trip billing from a fixed origin",
        version="1.0.0"
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.pipeline = pipeline
    app.state.presenter = presenter
    app.include_router(router)

    logger.info(f"Estimator API ready (origin {pipeline.origin_label}, {pipeline.price_per_km} EUR/km)")
    return app
