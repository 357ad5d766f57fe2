"""Import of the Argentine province/city catalog from a GeoNames country dump.

The dump is the tab-separated `AR.txt` published by GeoNames. Provinces come
from the fixed admin1 table below; populated places become Locations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.db import transaction

from .models import Location, Province


logger = logging.getLogger("clasificados.locations")

PROVINCES = {
    "01": "Buenos Aires",
    "02": "Catamarca",
    "03": "Chaco",
    "04": "Chubut",
    "05": "Córdoba",
    "06": "Corrientes",
    "07": "Entre Ríos",
    "08": "Formosa",
    "09": "Jujuy",
    "10": "La Pampa",
    "11": "La Rioja",
    "12": "Mendoza",
    "13": "Misiones",
    "14": "Neuquén",
    "15": "Río Negro",
    "16": "Salta",
    "17": "San Juan",
    "18": "San Luis",
    "19": "Santa Cruz",
    "20": "Santa Fe",
    "21": "Santiago del Estero",
    "22": "Tierra del Fuego",
    "23": "Tucumán",
    "24": "Ciudad Autónoma de Buenos Aires",
}

PLACE_CODES = {"PPL", "PPLA", "PPLA2", "PPLC", "ADM2"}
MIN_COLUMNS = 19


@dataclass
class GeoPlace:
    geoname_id: str
    name: str
    latitude: float
    longitude: float
    feature_code: str
    province_code: str


@dataclass
class ImportCounts:
    created: dict[str, int] = field(default_factory=dict)
    updated: dict[str, int] = field(default_factory=dict)
    skipped: int = 0

    def inc(self, bucket: str, key: str) -> None:
        target = getattr(self, bucket)
        target[key] = int(target.get(key, 0)) + 1


def parse_line(line: str) -> GeoPlace | None:
    """Parse one dump row, or None for rows that are not usable places."""

    fields = line.rstrip("\n").split("\t")
    if len(fields) < MIN_COLUMNS:
        return None

    geoname_id, name = fields[0].strip(), fields[1].strip()
    feature_code, admin1 = fields[7].strip(), fields[10].strip()
    if feature_code not in PLACE_CODES or admin1 not in PROVINCES:
        return None
    if not geoname_id or not name:
        return None
    try:
        latitude, longitude = float(fields[4]), float(fields[5])
    except ValueError:
        return None

    return GeoPlace(
        geoname_id=geoname_id,
        name=name,
        latitude=latitude,
        longitude=longitude,
        feature_code=feature_code,
        province_code=admin1,
    )


def ensure_provinces() -> dict[str, Province]:
    out = {}
    for code, name in PROVINCES.items():
        province, _ = Province.objects.update_or_create(
            code=f"AR-{code}",
            defaults={"name": name, "country": "Argentina", "country_code": "AR", "is_active": True},
        )
        out[code] = province
    return out


def import_places(lines) -> ImportCounts:
    counts = ImportCounts()
    with transaction.atomic():
        provinces = ensure_provinces()
        for line in lines:
            place = parse_line(line)
            if place is None:
                counts.skipped += 1
                continue
            _, created = Location.objects.update_or_create(
                code=f"gn-{place.geoname_id}",
                defaults={
                    "name": place.name,
                    "province": provinces[place.province_code],
                    "country": "Argentina",
                    "latitude": place.latitude,
                    "longitude": place.longitude,
                    "is_active": True,
                },
            )
            counts.inc("created" if created else "updated", "location")

    logger.info(
        "geonames import finished",
        extra={"count": sum(counts.created.values()) + sum(counts.updated.values())},
    )
    return counts
