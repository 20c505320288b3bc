from django.http import HttpResponse
from django.test import RequestFactory

from core.middleware import NoStoreAPIMiddleware


def test_api_responses_get_no_store_headers():
    middleware = NoStoreAPIMiddleware(lambda request: HttpResponse("ok"))

    response = middleware(RequestFactory().get("/api/v1/incentives/overview/"))

    assert "no-store" in response["Cache-Control"]
    assert response["Pragma"] == "no-cache"


def test_other_paths_are_untouched():
    middleware = NoStoreAPIMiddleware(lambda request: HttpResponse("ok"))

    response = middleware(RequestFactory().get("/admin/"))

    assert not response.has_header("Cache-Control")
