"""Unit tests for the catalog and account directory HTTP clients"""

import httpx
import pytest

from src.adapter.services.account_directory import HttpAccountDirectory
from src.adapter.services.catalog_store import HttpCatalogStore
from src.app.services.catalog_store import CollaboratorError


def directory_with(handler):
    return HttpAccountDirectory("http://directory.test/", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
class TestHttpAccountDirectory:
    async def test_profile_read(self):
        def handler(request):
            assert request.url.path == "/profiles/user_1"
            return httpx.Response(200, json={"name": "Budi", "phone": "08123456789"})

        profile = await directory_with(handler).get_profile("user_1")

        assert profile.user_id == "user_1"
        assert profile.name == "Budi"
        assert profile.email is None

    async def test_unknown_user_is_none(self):
        profile = await directory_with(lambda request: httpx.Response(404)).get_profile("user_9")

        assert profile is None

    async def test_server_error_raises(self):
        with pytest.raises(CollaboratorError):
            await directory_with(lambda request: httpx.Response(503)).get_profile("user_1")

    async def test_unreadable_body_raises(self):
        with pytest.raises(CollaboratorError):
            await directory_with(lambda request: httpx.Response(200, text="<html>")).get_profile("user_1")

    async def test_connection_failure_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(CollaboratorError):
            await directory_with(handler).get_profile("user_1")


@pytest.mark.asyncio
class TestHttpCatalogStore:
    async def test_unknown_product_is_none(self):
        store = HttpCatalogStore("http://catalog.test", transport=httpx.MockTransport(lambda r: httpx.Response(404)))

        assert await store.get_product("p_missing") is None

    async def test_server_error_raises(self):
        store = HttpCatalogStore("http://catalog.test", transport=httpx.MockTransport(lambda r: httpx.Response(500)))

        with pytest.raises(CollaboratorError):
            await store.get_product("p_rice")
