"""Training Center XML (TCX) track-point reading and writing."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from pathlib import Path

from lxml import etree

from ovaltrack.track.oval import TrackOnSphere
from ovaltrack.utils.exceptions import TrackFileError

logger = logging.getLogger(__name__)

TCX_NAMESPACE = "http://www.garmin.com/xmlschemas/TrainingCenterDatabase/v2"
TPX_NAMESPACE = "http://www.garmin.com/xmlschemas/ActivityExtension/v2"
DEFAULT_SPORT = "Running"


@dataclass(frozen=True)
class TrackPoint:
    """Timestamped position with optional sensor values.

    Args:
        time: ISO-8601 timestamp as written in the file.
        lon: Longitude [deg].
        lat: Latitude [deg].
        distance: Cumulative distance [m].
        heart_rate: Heart rate [bpm].
        speed: Speed [m/s].
        cadence: Running cadence [steps/min].
        watts: Power [W].
    """

    time: str
    lon: float
    lat: float
    distance: float | None = None
    heart_rate: float | None = None
    speed: float | None = None
    cadence: float | None = None
    watts: float | None = None


@dataclass(frozen=True)
class TcxData:
    """Ordered track points of one activity.

    Args:
        track_points: Points in recording order.
    """

    track_points: list[TrackPoint] = field(default_factory=list)

    @property
    def coordinates(self) -> list[tuple[float, float]]:
        """Positions of all track points.

        Returns:
            ``(lon, lat)`` pairs [deg].
        """
        return [(point.lon, point.lat) for point in self.track_points]


def _number(element: etree._Element, path: str) -> float | None:
    """Read an optional numeric child value.

    Args:
        element: Element to search below.
        path: ElementPath expression relative to ``element``.

    Returns:
        Parsed value, or ``None`` when the child is absent or empty.

    Raises:
        ovaltrack.utils.exceptions.TrackFileError: If the value is not numeric.
    """
    text = element.findtext(path)
    if text is None or not text.strip():
        return None
    try:
        return float(text)
    except ValueError as exc:
        msg = f"Invalid numeric value {text!r} for {path}"
        raise TrackFileError(msg) from exc


def _strip_namespaces(root: etree._Element) -> None:
    """Replace namespaced tags by their local names in place.

    Args:
        root: Document root element.
    """
    for element in root.iter():
        if isinstance(element.tag, str):
            element.tag = etree.QName(element).localname


def parse_tcx(content: str | bytes) -> TcxData:
    """Parse TCX document content into track points.

    Args:
        content: Full XML document.

    Returns:
        Parsed track points. Points without a position are skipped.

    Raises:
        ovaltrack.utils.exceptions.TrackFileError: If the document is not
            well-formed XML or holds invalid numbers.
    """
    raw = content.encode("utf-8") if isinstance(content, str) else content
    try:
        root = etree.fromstring(raw)
    except etree.XMLSyntaxError as exc:
        msg = f"Invalid TCX document: {exc}"
        raise TrackFileError(msg) from exc
    _strip_namespaces(root)

    points: list[TrackPoint] = []
    skipped = 0
    for element in root.iter("Trackpoint"):
        lon = _number(element, "Position/LongitudeDegrees")
        lat = _number(element, "Position/LatitudeDegrees")
        if lon is None or lat is None:
            skipped += 1
            continue
        points.append(
            TrackPoint(
                time=(element.findtext("Time") or "").strip(),
                lon=lon,
                lat=lat,
                distance=_number(element, "DistanceMeters"),
                heart_rate=_number(element, "HeartRateBpm/Value"),
                speed=_number(element, "Extensions//Speed"),
                cadence=_number(element, "Extensions//RunCadence"),
                watts=_number(element, "Extensions//Watts"),
            )
        )

    if skipped:
        logger.warning("Skipped %d track points without a position", skipped)
    return TcxData(track_points=points)


def load_tcx(path: str | Path) -> TcxData:
    """Load a TCX file.

    Args:
        path: Path to the ``.tcx`` file.

    Returns:
        Parsed track points.

    Raises:
        ovaltrack.utils.exceptions.TrackFileError: If the file does not exist
            or cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.exists():
        msg = f"TCX file not found: {file_path}"
        raise TrackFileError(msg)
    return parse_tcx(file_path.read_bytes())


def _format_number(value: float) -> str:
    """Format a number without a trailing ``.0`` for integral values.

    Args:
        value: Value to format.

    Returns:
        Text representation.
    """
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def write_tcx(data: TcxData, sport: str = DEFAULT_SPORT) -> str:
    """Serialize track points into a single-lap TCX document.

    Args:
        data: Track points to write.
        sport: Activity sport attribute.

    Returns:
        XML document text including the declaration.

    Raises:
        ovaltrack.utils.exceptions.TrackFileError: If ``data`` holds no points.
    """
    if not data.track_points:
        msg = "Cannot write a TCX document without track points"
        raise TrackFileError(msg)

    tcx = f"{{{TCX_NAMESPACE}}}"
    tpx = f"{{{TPX_NAMESPACE}}}"
    nsmap = {None: TCX_NAMESPACE, "ns3": TPX_NAMESPACE}
    root = etree.Element(f"{tcx}TrainingCenterDatabase", nsmap=nsmap)
    activities = etree.SubElement(root, f"{tcx}Activities")
    activity = etree.SubElement(activities, f"{tcx}Activity", Sport=sport)
    start_time = data.track_points[0].time
    etree.SubElement(activity, f"{tcx}Id").text = start_time
    lap = etree.SubElement(activity, f"{tcx}Lap", StartTime=start_time)
    track = etree.SubElement(lap, f"{tcx}Track")

    for point in data.track_points:
        trackpoint = etree.SubElement(track, f"{tcx}Trackpoint")
        etree.SubElement(trackpoint, f"{tcx}Time").text = point.time
        position = etree.SubElement(trackpoint, f"{tcx}Position")
        etree.SubElement(position, f"{tcx}LatitudeDegrees").text = repr(float(point.lat))
        etree.SubElement(position, f"{tcx}LongitudeDegrees").text = repr(float(point.lon))
        if point.distance is not None:
            etree.SubElement(trackpoint, f"{tcx}DistanceMeters").text = repr(float(point.distance))
        if point.heart_rate is not None:
            heart_rate = etree.SubElement(trackpoint, f"{tcx}HeartRateBpm")
            etree.SubElement(heart_rate, f"{tcx}Value").text = _format_number(point.heart_rate)

        extension_values = (
            ("Speed", point.speed),
            ("RunCadence", point.cadence),
            ("Watts", point.watts),
        )
        if any(value is not None for _, value in extension_values):
            extensions = etree.SubElement(trackpoint, f"{tcx}Extensions")
            tpx_element = etree.SubElement(extensions, f"{tpx}TPX")
            for name, value in extension_values:
                if value is not None:
                    etree.SubElement(tpx_element, f"{tpx}{name}").text = _format_number(value)

    document = etree.tostring(root, xml_declaration=True, encoding="UTF-8", pretty_print=True)
    return document.decode("utf-8")


def save_tcx(data: TcxData, path: str | Path, sport: str = DEFAULT_SPORT) -> None:
    """Write track points to a TCX file.

    Args:
        data: Track points to write.
        path: Output file path.
        sport: Activity sport attribute.
    """
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(write_tcx(data, sport=sport), encoding="utf-8")


def apply_fit_to_track_points(track: TrackOnSphere, points: list[TrackPoint]) -> list[TrackPoint]:
    """Snap track points onto the track and derive distance from lap progress.

    Points that cannot be fitted are returned unchanged.

    Args:
        track: Track to fit onto.
        points: Recorded points in order.

    Returns:
        New points with fitted positions and ``distance`` set to the
        travelled track distance [m].
    """
    progress = track.fit_path_to_track((point.lon, point.lat) for point in points)
    start = next((fitted.lap_progress for fitted in progress if fitted.error is None), 0.0)
    fitted_points: list[TrackPoint] = []
    for point, fitted in zip(points, progress):
        if fitted.error is not None:
            fitted_points.append(point)
            continue
        fitted_points.append(
            dataclasses.replace(
                point,
                lon=fitted.coordinate[0],
                lat=fitted.coordinate[1],
                distance=(fitted.lap_progress - start) * track.lap_length,
            )
        )
    return fitted_points
