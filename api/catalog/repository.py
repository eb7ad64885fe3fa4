"""
SQL for catalog views that do not fit the generic record queries.
"""

from __future__ import annotations

from typing import Any

from core import db


async def distinct_vehicle_values(column: str) -> list[str]:
    # `column` is one of a fixed set chosen by the service layer
    rows = await db.fetch_all(
        f"""
        SELECT DISTINCT {column} AS value
        FROM vehicles_price
        WHERE {column} IS NOT NULL
          AND {column} <> ''
        ORDER BY {column} ASC
        """
    )
    return [row["value"] for row in rows]


async def variants_by_fuel() -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT DISTINCT fuel_type, variant, price
        FROM vehicles_price
        WHERE fuel_type IS NOT NULL
          AND fuel_type <> ''
          AND variant IS NOT NULL
        ORDER BY fuel_type ASC, price ASC, variant ASC
        """
    )


async def colors_for_car(car_name: str) -> list[dict[str, Any]]:
    return await db.fetch_all(
        "SELECT * FROM car_colors WHERE lower(car_name) = lower($1) ORDER BY id DESC",
        car_name,
    )


async def swatches_for_car(car_name: str) -> list[dict[str, Any]]:
    return await db.fetch_all(
        "SELECT * FROM car_swatches WHERE lower(car_name) = lower($1) ORDER BY id DESC",
        car_name,
    )
