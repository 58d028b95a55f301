from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer
from httpx import ASGITransport, AsyncClient

import botanical_friend as botanical_friend_package
from botanical_friend.dependencies import get_app_context
from botanical_friend.extensions.app_context import AppContext, create_app_context
from botanical_friend.extensions.logging import LogLevel
from botanical_friend.modules.identification.acquisition import ImageAcquisition
from tests.fakes import FakeChat, FakeGenaiClient, FakeModels, corrupt_png, create_image_bytes

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Generator

    from fastapi import FastAPI


@pytest.fixture(scope="session", autouse=True)
def set_test_config() -> None:
    """No log file and no real API key during tests."""
    botanical_friend_package.local_config.log_settings.log_level_console = LogLevel.WARNING
    botanical_friend_package.local_config.log_settings.log_level_file = LogLevel.NONE
    botanical_friend_package.local_config.gemini_api_key = None


@pytest.fixture()
def png_bytes() -> bytes:
    return create_image_bytes("PNG")


@pytest.fixture()
def jpeg_bytes() -> bytes:
    return create_image_bytes("JPEG", color="olive")


@pytest.fixture()
def plant_data_dict() -> dict[str, Any]:
    return {
        "name": "מונסטרה",
        "scientificName": "Monstera deliciosa",
        "description": "צמח מטפס טרופי עם עלים גדולים ומחורצים, מקורו ביערות מרכז אמריקה.",
        "care": {
            "light": "אור בהיר עקיף",
            "water": "פעם בשבוע, כשהשכבה העליונה יבשה",
            "soil": "מצע מנוקז עשיר בחומר אורגני",
            "humidity": "לחות בינונית עד גבוהה",
            "temperature": "18-30 מעלות צלזיוס",
            "toxicity": "רעיל לחיות מחמד ולבני אדם בבליעה",
        },
        "quickTips": [
            "נגבו את העלים מאבק",
            "הוסיפו עמוד טחב לטיפוס",
            "הימנעו מהשקיית יתר",
        ],
    }


@pytest.fixture()
def plant_data_json(plant_data_dict: dict[str, Any]) -> str:
    return json.dumps(plant_data_dict, ensure_ascii=False)


@pytest.fixture()
def fake_client() -> FakeGenaiClient:
    return FakeGenaiClient()


@pytest.fixture()
def fake_models(fake_client: FakeGenaiClient) -> FakeModels:
    return fake_client.aio.models  # type: ignore[no-any-return]


@pytest.fixture()
def fake_chat(fake_client: FakeGenaiClient) -> FakeChat:
    return fake_client.aio.chats.chat  # type: ignore[no-any-return]


@pytest.fixture()
def acquisition() -> ImageAcquisition:
    return ImageAcquisition(max_image_bytes=1_000_000, url_fetch_timeout_seconds=5)


@pytest.fixture()
def context(fake_client: FakeGenaiClient, acquisition: ImageAcquisition) -> AppContext:
    return create_app_context(fake_client, acquisition=acquisition)  # type: ignore[arg-type]


@pytest_asyncio.fixture()
async def image_server(jpeg_bytes: bytes, png_bytes: bytes) -> AsyncGenerator[TestServer, None]:
    """Local image host with a well-behaved image and the usual ways of failing."""

    async def plant_jpg(request: web.Request) -> web.Response:
        return web.Response(body=jpeg_bytes, content_type="image/jpeg")

    async def octet_stream(request: web.Request) -> web.Response:
        return web.Response(body=jpeg_bytes, content_type="application/octet-stream")

    async def hotlink_protected(request: web.Request) -> web.Response:
        return web.Response(status=403, text="Forbidden")

    async def missing(request: web.Request) -> web.Response:
        return web.Response(status=404, text="Not Found")

    async def server_error(request: web.Request) -> web.Response:
        return web.Response(status=500, text="Internal Server Error")

    async def html_page(request: web.Request) -> web.Response:
        return web.Response(
            text="<html><body>Images for members only</body></html>", content_type="text/html"
        )

    async def broken_png(request: web.Request) -> web.Response:
        return web.Response(body=corrupt_png(png_bytes), content_type="image/png")

    app = web.Application()
    app.router.add_get("/plant.jpg", plant_jpg)
    app.router.add_get("/download", octet_stream)
    app.router.add_get("/protected.jpg", hotlink_protected)
    app.router.add_get("/missing.jpg", missing)
    app.router.add_get("/error.jpg", server_error)
    app.router.add_get("/gallery", html_page)
    app.router.add_get("/broken.png", broken_png)

    server = TestServer(app)
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture()
def app(context: AppContext) -> Generator[FastAPI, None, None]:
    """only here do we import the main module."""
    from botanical_friend.main import app as main_app

    main_app.dependency_overrides[get_app_context] = lambda: context
    yield main_app
    main_app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def ac(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as ac:
        yield ac
