from fastapi import Request

from core.photo_store import PhotoStore
from db.repository import ItemRepository


def get_repository(request: Request) -> ItemRepository:
    return request.app.state.repository


def get_photo_store(request: Request) -> PhotoStore:
    return request.app.state.photo_store
