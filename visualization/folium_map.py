"""Create interactive Folium maps of the origin, destination and route."""
import html
from typing import Optional

import folium
from loguru import logger

from configurations.config import Config
from models.trip import Coordinate, PipelineState, Ready
from visualization.trip_summary import TIER_COLORS, format_trip_summary, formula_text


class FoliumMapPresenter:
    """Renders pipeline states; every render builds a new map from scratch."""

    def __init__(self, origin: Coordinate, origin_label: str = "Origin", price_per_km: float = Config.PRICE_PER_KM,
                 zoom_start: int = Config.MAP_ZOOM_START, toll_rates_url: str = Config.TOLL_RATES_URL,
                 output_path: Optional[str] = None):
        self.origin = origin
        self.origin_label = origin_label
        self.price_per_km = price_per_km
        self.zoom_start = zoom_start
        self.toll_rates_url = toll_rates_url
        self.output_path = output_path
        self.current_map: folium.Map = self.render(None)

    def handle_state(self, state: PipelineState) -> None:
        """Pipeline listener: redraw on every Ready snapshot."""
        if not isinstance(state, Ready):
            return
        self.current_map = self.render(state)
        if self.output_path:
            self.save_map(self.current_map, self.output_path)

    def render(self, state: Optional[PipelineState]) -> folium.Map:
        m = folium.Map(
            location=self.origin.as_lat_lon(),
            zoom_start=self.zoom_start,
            tiles='OpenStreetMap'
        )
        self._add_origin_marker(m)

        if isinstance(state, Ready):
            self._add_route_layer(m, state)
            self._add_summary_panel(m, state)
            logger.info(f"Rendered route map to '{state.query}' with {len(state.route.path_points)} points")
        return m

    def to_html(self) -> str:
        return self.current_map.get_root().render()

    def _add_origin_marker(self, map_obj: folium.Map):
        folium.Marker(
            location=self.origin.as_lat_lon(),
            popup=f"<b>Departure: {html.escape(self.origin_label)}</b>",
            tooltip=html.escape(self.origin_label),
            icon=folium.Icon(color='red', icon='home')
        ).add_to(map_obj)

    def _add_route_layer(self, map_obj: folium.Map, state: Ready):
        if state.route.path_points:
            folium.PolyLine(
                locations=state.route.lat_lon_path(),
                color='blue',
                weight=4,
                opacity=0.7,
                tooltip=f"{state.estimate.distance_km:.1f} km, {state.estimate.duration_minutes} min"
            ).add_to(map_obj)
            map_obj.fit_bounds(state.route.bounds(), padding=(50, 50))

        folium.Marker(
            location=state.destination.as_lat_lon(),
            popup=f"<b>Destination</b><br/>{html.escape(state.query)}",
            tooltip=html.escape(state.query),
            icon=folium.Icon(color='blue', icon='flag')
        ).add_to(map_obj)

    def _add_summary_panel(self, map_obj: folium.Map, state: Ready):
        """Add the price breakdown panel on the left side."""
        fields = format_trip_summary(state.estimate, self.price_per_km)
        color = TIER_COLORS[state.estimate.tier]

        panel_html = f'''
        <div style="position:fixed;top:10px;left:60px;width:260px;background:white;border:2px solid #333;z-index:9999;font-size:12px;border-radius:5px;box-shadow:0 2px 10px rgba(0,0,0,0.3);padding:8px;">
            <strong>Round-trip estimate: {html.escape(state.query)}</strong>
            <p>Distance (one way): {fields['distance']}<br>Estimated duration: {fields['duration']}</p>
            <p>{fields['km_cost_detail']}: {fields['km_cost']}<br>
               Tolls: {fields['tolls']}<br>
               Subtotal (one way): {fields['one_way_total']}<br>
               Round-trip multiplier: {fields['multiplier']}</p>
            <p style="font-size:16px;"><strong>Total to bill: <span style="color:{color};">{fields['round_trip_total']}</span></strong></p>
            <p><a href="{html.escape(self.toll_rates_url)}" target="_blank" rel="noopener noreferrer">Check official toll rates</a></p>
            <small>{formula_text(self.price_per_km)}</small>
        </div>
        '''

        map_obj.get_root().html.add_child(folium.Element(panel_html))

    def save_map(self, map_obj: folium.Map, output_path: str = "trip_map.html") -> str:
        """Save map to HTML file."""
        map_obj.save(output_path)
        logger.info(f"Saved interactive map to {output_path}")
        return output_path
