"""Geolocation route — caller country and UI language."""

from fastapi import APIRouter, Request

from services.geolocation import client_ip

router = APIRouter()


@router.get("/geolocation")
async def geolocation(request: Request) -> dict:
    ip = client_ip(request.headers)
    return await request.app.state.geolocation_service.locate(ip)
