import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from planview_checker.geometry.primitives import Arc, GeometryPrimitive, Line, Poly3, Spiral
from planview_checker.geometry.road import Road
from planview_checker.logger import log_verbose


class PlanViewReader:
    """
    Read already-decoded road plan views from a JSON document and produce
    Road objects.  Keys follow the OpenDRIVE attribute names:

        {"roads": [{"id": "1", "name": "", "length": 104.0, "junction": "-1",
                    "planView": [{"s": 0, "x": 0, "y": 0, "hdg": 0, "length": 104.0,
                                  "line": {}}]}]}

    Shape payload is exactly one of ``line``, ``arc`` (``curvature``),
    ``spiral`` (``curvStart``, ``curvEnd``) or ``poly3`` (``a``..``d``).
    """

    SHAPE_KEYS = ("line", "arc", "spiral", "poly3")

    def __init__(self, allowed_roads: Optional[List[str]] = None, verbose: bool = False):
        self.allowed_roads = set(allowed_roads or [])
        self.verbose = verbose

    def load_json(self, path: Path) -> List[Road]:
        with Path(path).open("r", encoding="utf-8") as f:
            document = json.load(f)
        return self.load_document(document)

    def load_document(self, document: Dict[str, Any]) -> List[Road]:
        if not isinstance(document, dict) or "roads" not in document:
            raise ValueError("plan view document must be an object with a 'roads' list")
        if not isinstance(document["roads"], list):
            raise ValueError("'roads' must be a list of road objects")

        roads: List[Road] = []
        for position, record in enumerate(document["roads"]):
            if not isinstance(record, dict):
                raise ValueError(f"road {position}: expected an object, found {type(record).__name__}")
            road_id = str(record.get("id", position))
            if self.allowed_roads and road_id not in self.allowed_roads:
                continue
            roads.append(self._road_from_record(road_id, record))

        if self.verbose:
            log_verbose(f"[PlanViewReader] Produced {len(roads)} road(s).")
        return roads

    def _road_from_record(self, road_id: str, record: Dict[str, Any]) -> Road:
        geometries = record.get("planView", [])
        if not isinstance(geometries, list):
            raise ValueError(f"road {road_id}: 'planView' must be a list, found {type(geometries).__name__}")
        plan_view = []
        for index, geometry in enumerate(geometries):
            try:
                plan_view.append(self._primitive_from_record(geometry))
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"road {road_id}, geometry {index}: {e}") from e

        if "length" not in record:
            raise ValueError(f"road {road_id}: missing 'length'")
        try:
            length = float(record["length"])
            road = Road(
                id=road_id,
                length=length,
                plan_view=plan_view,
                name=str(record.get("name", "")),
                junction=str(record.get("junction", "-1")),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"road {road_id}: {e}") from e

        if self.verbose:
            kinds = {}
            for p in road.plan_view:
                kinds[p.kind] = kinds.get(p.kind, 0) + 1
            log_verbose(f"[PlanViewReader] Road '{road_id}': {kinds}")
        return road

    def _primitive_from_record(self, geometry: Dict[str, Any]) -> GeometryPrimitive:
        if not isinstance(geometry, dict):
            raise ValueError(f"expected an object, found {type(geometry).__name__}")
        present = [k for k in self.SHAPE_KEYS if k in geometry]
        if len(present) != 1:
            raise ValueError(f"expected exactly one of {list(self.SHAPE_KEYS)}, found {present}")

        return GeometryPrimitive.create(
            s=float(geometry["s"]),
            x=float(geometry["x"]),
            y=float(geometry["y"]),
            hdg=float(geometry["hdg"]),
            length=float(geometry["length"]),
            shape=self._shape_from_record(present[0], geometry[present[0]] or {}),
        )

    def _shape_from_record(self, kind: str, payload: Dict[str, Any]):
        if kind == "line":
            return Line()
        if kind == "arc":
            return Arc(curvature=float(payload["curvature"]))
        if kind == "spiral":
            return Spiral(curv_start=float(payload["curvStart"]), curv_end=float(payload["curvEnd"]))
        return Poly3(
            a=float(payload["a"]),
            b=float(payload["b"]),
            c=float(payload["c"]),
            d=float(payload["d"]),
        )
