"""
FastAPI router for catalog views.
"""

from __future__ import annotations

from fastapi import APIRouter

from core import envelope

from . import service

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/car-models")
async def car_models() -> dict:
    return envelope.ok(await service.accessory_values("model"))


@router.get("/car-accessory-categories")
async def car_accessory_categories() -> dict:
    return envelope.ok(await service.accessory_values("category"))


@router.get("/vehicle-filters")
async def vehicle_filters() -> dict:
    """
    Options for the price-list filter bar. Every list starts with its
    "All ..." entry; `variantsData` maps a fuel type to its variants.
    """
    return envelope.ok(await service.vehicle_filters(), message="Vehicle filters fetched successfully")


@router.get("/car-color-swatches/{car_name}")
async def car_color_swatches(car_name: str) -> dict:
    return envelope.ok(await service.color_swatches(car_name))


@router.get("/car-service-offers/cards")
async def car_service_offer_cards() -> dict:
    return envelope.ok(await service.service_offer_cards())
