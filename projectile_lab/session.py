"""Saving a run: snapshot image, parameters, results and a resume reference.

Nothing here may disturb the simulation. ``save_run`` is the only entry
point the app calls and it converts every store failure into ``None``.
"""

from __future__ import annotations

import base64
import io
import json
import math
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, urlencode

import pygame

from projectile_lab.config import CUSTOM, SAVE_TITLE, SAVE_TOPIC, SNAPSHOT_SIZE
from projectile_lab.exceptions import SessionStoreError
from projectile_lab.log import get_logger
from projectile_lab.physics import AnalyticsResult

logger = get_logger(__name__)

RESUME_PAGE = "projectile"
LAST_SIM_FILE = "last_sim.json"


@dataclass
class SaveRequest:
    title: str = SAVE_TITLE
    topic: Optional[str] = SAVE_TOPIC
    parameters: Dict[str, Any] = field(default_factory=dict)
    results: Dict[str, Any] = field(default_factory=dict)
    snapshot: Optional[str] = None  # data URL
    resume_reference: Optional[str] = None


class JsonSessionStore:
    """One JSON document per saved run, plus a pointer to the latest one."""

    def __init__(self, directory):
        self.directory = Path(directory)

    def save(self, request: SaveRequest) -> str:
        record_id = uuid.uuid4().hex
        record = asdict(request)
        record["title"] = request.title or request.topic or "Simulation"
        record["id"] = record_id
        record["created_at"] = datetime.now(timezone.utc).isoformat()
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with (self.directory / f"{record_id}.json").open("w", encoding="utf-8") as fh:
                json.dump(record, fh, indent=2, allow_nan=False)
        except (OSError, TypeError, ValueError) as e:
            raise SessionStoreError(f"could not save run to {self.directory}: {e}", record_id) from e

        # the record is already on disk; a stale pointer only affects "--resume last"
        pointer = {"id": record_id, "title": record["title"], "resume_reference": request.resume_reference}
        try:
            with (self.directory / LAST_SIM_FILE).open("w", encoding="utf-8") as fh:
                json.dump(pointer, fh, indent=2)
        except OSError as e:
            logger.warning(f"saved run {record_id} but could not update {LAST_SIM_FILE}: {e}")
        return record_id

    def load(self, record_id):
        try:
            with (self.directory / f"{record_id}.json").open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            raise SessionStoreError(f"could not read saved run {record_id}: {e}", record_id) from e

    def last(self):
        """Pointer to the most recent save, or None."""
        try:
            with (self.directory / LAST_SIM_FILE).open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except (OSError, json.JSONDecodeError):
            return None


def snapshot_surface(surface, size=SNAPSHOT_SIZE):
    try:
        small = pygame.transform.smoothscale(surface, size)
        buf = io.BytesIO()
        pygame.image.save(small, buf, "snapshot.png")
    except (pygame.error, ValueError) as e:
        logger.warning(f"snapshot failed: {e}")
        return None
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


def build_resume_reference(params, planet):
    query = {
        "angle": f"{params.angle_deg:g}",
        "speed": f"{params.speed:g}",
        "mass": f"{params.mass:g}",
        "planet": planet,
    }
    if planet == CUSTOM:
        query["g"] = f"{params.gravity:g}"
    return f"{RESUME_PAGE}?{urlencode(query)}"


def parse_resume_reference(reference):
    """Inverse of ``build_resume_reference``; unknown or malformed keys are dropped."""
    _, _, query = reference.partition("?")
    values = {}
    for key, raw in parse_qsl(query):
        if key == "planet":
            values["planet"] = raw
        elif key in ("angle", "speed", "mass", "g"):
            try:
                num = float(raw)
            except ValueError:
                continue
            if math.isfinite(num):
                values[key] = num
    return values


def _finite_or_none(value):
    return value if math.isfinite(value) else None


def save_run(store, params, analytics, surface, planet, kinetic_energy=math.nan):
    if not analytics.is_defined:
        # no landing to report; the parameters and snapshot are still worth keeping
        logger.warning(f"saving run without results, analytics undefined for {params}")
        analytics = AnalyticsResult(math.nan, math.nan, math.nan)
    request = SaveRequest(
        parameters={
            "angle_deg": _finite_or_none(params.angle_deg),
            "speed": _finite_or_none(params.speed),
            "mass": _finite_or_none(params.mass),
            "gravity": _finite_or_none(params.gravity),
            "planet": planet,
        },
        results={
            "time_of_flight": _finite_or_none(analytics.time_of_flight),
            "max_height": _finite_or_none(analytics.max_height),
            "range": _finite_or_none(analytics.range),
            "kinetic_energy": _finite_or_none(kinetic_energy),
        },
        snapshot=snapshot_surface(surface),
        resume_reference=build_resume_reference(params, planet),
    )
    try:
        record_id = store.save(request)
    except SessionStoreError as e:
        logger.error(f"save failed: {e}")
        return None
    logger.info(f"saved run {record_id}")
    return record_id


def resume_values(store, value):
    """Starting values from ``"last"``, a saved record id, or a reference string."""
    if value == "last":
        pointer = store.last()
        reference = pointer.get("resume_reference") if pointer else None
    elif "?" in value:
        reference = value
    else:
        try:
            reference = store.load(value).get("resume_reference")
        except SessionStoreError as e:
            logger.warning(f"cannot resume: {e}")
            return {}
    if not reference:
        logger.warning(f"nothing to resume from {value!r}")
        return {}
    return parse_resume_reference(reference)
