"""Round-trip transportation cost estimator: geocode, route, price, map."""
import argparse
import asyncio
import sys

from loguru import logger

from configurations.config import Config, TripConfig
from core.errors import EmptyQueryError, InvalidTollError
from core.pipeline import TripEstimationPipeline
from models.trip import Error, Ready
from routing.osrm_route_provider import OSRMRouteProvider
from services.geocoding_service import NominatimGeocoder
from visualization.folium_map import FoliumMapPresenter
from visualization.trip_summary import render_text_summary


def build_pipeline(osrm_url: str = Config.OSRM_URL, nominatim_url: str = Config.NOMINATIM_URL) -> TripEstimationPipeline:
    return TripEstimationPipeline(
        resolver=NominatimGeocoder(base_url=nominatim_url),
        route_provider=OSRMRouteProvider(osrm_url=osrm_url),
        config=TripConfig.from_config(),
    )


async def run_estimate(pipeline: TripEstimationPipeline, destination: str, toll: str,
                       output_path: str) -> int:
    presenter = FoliumMapPresenter(
        origin=pipeline.origin,
        origin_label=pipeline.origin_label,
        price_per_km=pipeline.price_per_km,
        output_path=output_path
    )
    pipeline.subscribe(presenter.handle_state)

    try:
        pipeline.update_toll_input(toll)
        state = await pipeline.submit(destination)
    except (EmptyQueryError, InvalidTollError) as e:
        logger.error(f"❌ {e.user_message}")
        return 1

    if isinstance(state, Error):
        logger.error(f"❌ {state.message}")
        return 1
    if isinstance(state, Ready):
        print(f"\nDeparture: {pipeline.origin_label}")
        print(render_text_summary(state.query, state.estimate, pipeline.price_per_km))
        print(f"Interactive map: {output_path}")
    return 0


def main():
    """Command line interface for the cost estimator."""
    parser = argparse.ArgumentParser(description="Round-trip transportation cost estimator")
    parser.add_argument("--destination", help="Destination place name, e.g. 'Lyon'")
    parser.add_argument("--toll", default="0", help="One-way toll amount in euros (default: 0)")
    parser.add_argument("--output", default="trip_map.html", help="Output HTML map path")
    parser.add_argument("--osrm-url", default=Config.OSRM_URL, help="OSRM server URL")
    parser.add_argument("--nominatim-url", default=Config.NOMINATIM_URL, help="Nominatim server URL")
    parser.add_argument("--api", action="store_true", help="Start FastAPI server instead")
    parser.add_argument("--port", type=int, default=Config.API_PORT, help=f"Port for FastAPI server (default: {Config.API_PORT})")

    args = parser.parse_args()

    logger.remove()
    logger.add(sys.stderr, level=Config.LOG_LEVEL)

    pipeline = build_pipeline(args.osrm_url, args.nominatim_url)

    if args.api:
        # Start FastAPI server
        import uvicorn
        from api.trip_routes import create_app
        logger.info(f"🚀 Starting FastAPI server on port {args.port}...")
        try:
            uvicorn.run(create_app(pipeline), host=Config.API_HOST, port=args.port)
        except OSError as e:
            logger.error(f"❌ Server startup failed: {e}")
            sys.exit(1)
    else:
        if not args.destination:
            parser.error("--destination is required when not using --api")
        sys.exit(asyncio.run(run_estimate(pipeline, args.destination, args.toll, args.output)))


if __name__ == "__main__":
    main()
