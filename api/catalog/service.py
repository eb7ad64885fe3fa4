"""
Catalog views: vehicle filter options, color/swatch pairs and the service
offer cards shown on the service page.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from records import registry
from records import repository as records_repository
from records import service as records_service

from . import repository

FILTER_COLUMNS = (
    ("models", "model", "All Models"),
    ("fuelTypes", "fuel_type", "All Fuel Types"),
    ("transmissions", "transmission", "All Transmissions"),
)
ALL_VARIANTS = "All Variants"

DEFAULT_FEATURE_DURATION = "3 Years"
DEFAULT_FEATURE = {
    "title": "Premium Feature",
    "description": "Included with this vehicle",
    "duration": DEFAULT_FEATURE_DURATION,
}


def variant_label(variant: str, price: Any) -> str:
    """
    "Asta (₹1,250,000)"; the price part is dropped when it is not a number.
    """
    try:
        amount = Decimal(str(price))
    except (InvalidOperation, ValueError):
        return variant
    if not amount.is_finite():
        return variant
    return f"{variant} (₹{amount:,.0f})"


async def vehicle_filters() -> dict[str, Any]:
    data: dict[str, Any] = {}
    for key, column, all_label in FILTER_COLUMNS:
        data[key] = [all_label, *await repository.distinct_vehicle_values(column)]

    variants: dict[str, list[str]] = {"All Fuel Types": [ALL_VARIANTS]}
    for row in await repository.variants_by_fuel():
        labels = variants.setdefault(row["fuel_type"], [ALL_VARIANTS])
        label = variant_label(row["variant"], row["price"])
        if label not in labels:
            labels.append(label)
    data["variantsData"] = variants
    return data


async def accessory_values(column: str) -> list[Any]:
    return await records_repository.distinct_values(registry.get("car-accessories"), column)


async def color_swatches(car_name: str) -> list[dict[str, Any]]:
    """
    Colors of a car paired with the swatch of the same name. Colors with no
    swatch are left out.
    """
    colors = registry.get("car-colors")
    swatches = registry.get("car-swatches")
    swatch_by_name: dict[str, dict[str, Any]] = {}
    for row in await repository.swatches_for_car(car_name):
        swatch = records_service.present(swatches, row)
        swatch_by_name.setdefault(str(swatch.get("swatch_name") or "").lower(), swatch)

    matched: list[dict[str, Any]] = []
    for row in await repository.colors_for_car(car_name):
        color = records_service.present(colors, row)
        swatch = swatch_by_name.get(str(color.get("color_name") or "").lower())
        if swatch is None:
            continue
        matched.append(
            {
                "id": color["id"],
                "car_name": color["car_name"],
                "color_name": color["color_name"],
                "car_image": color.get("car_image"),
                "swatch_id": swatch["id"],
                "swatch_name": swatch["swatch_name"],
                "color_code": swatch.get("color_code"),
                "swatch_image": swatch.get("swatch_image"),
            }
        )
    return matched


def normalize_features(features: list[Any]) -> list[dict[str, str]]:
    """
    Older offers stored features as plain strings; newer ones as objects.
    Both come out as {title, description, duration}.
    """
    normalized: list[dict[str, str]] = []
    for feature in features:
        if isinstance(feature, str):
            if feature.strip():
                normalized.append(
                    {"title": feature, "description": feature, "duration": DEFAULT_FEATURE_DURATION}
                )
        elif isinstance(feature, dict):
            title = str(feature.get("title") or "")
            normalized.append(
                {
                    "title": title,
                    "description": str(feature.get("description") or title),
                    "duration": str(feature.get("duration") or DEFAULT_FEATURE_DURATION),
                }
            )
    return normalized or [dict(DEFAULT_FEATURE)]


def _price(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


async def service_offer_cards() -> list[dict[str, Any]]:
    """
    One card per car, each listing its offers as variants.
    """
    resource = registry.get("car-service-offers")
    offers = await records_service.list_records(resource, records_service.ListQuery())
    cards: dict[str, dict[str, Any]] = {}
    for offer in offers:
        car_name = offer.get("car_name") or ""
        card = cards.setdefault(car_name, {"car_name": car_name, "variants": []})
        card["variants"].append(
            {
                "id": offer["id"],
                "price": _price(offer.get("price")),
                "images": {
                    "main": offer.get("card_image"),
                    "thumbnail": offer.get("thumbnail_image"),
                },
                "details": {
                    "heading": offer.get("thumbnail_heading") or "",
                    "description": offer.get("thumbnail_content") or "",
                },
                "features": normalize_features(offer.get("features") or []),
            }
        )
    return list(cards.values())
