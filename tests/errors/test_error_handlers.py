# tests/errors/test_error_handlers.py
"""Tests for inkwell/errors: the exception tree and the handler factory."""

from unittest.mock import MagicMock

import pytest

from inkwell.errors import (
    ArticleNotFoundError,
    BaseAppError,
    ConfigurationUnavailableError,
    DuplicateEmailError,
    DuplicateEntryError,
    ForbiddenError,
    NotAuthenticatedError,
    RepositoryError,
    ServiceError,
    SitemapUnavailableError,
    UserNotFoundError,
    create_exception_handler,
)


class TestBaseAppError:
    def test_defaults(self) -> None:
        error = BaseAppError()

        assert error.detail == "Internal Server Error"
        assert error.status_code == 500
        assert str(error) == "Internal Server Error"

    @pytest.mark.parametrize(
        ("error", "status_code", "detail"),
        [
            (DuplicateEmailError(), 409, "Duplicated email"),
            (UserNotFoundError(), 404, "Update failed"),
            (ArticleNotFoundError(), 404, "Not found"),
            (DuplicateEntryError(), 409, "A record with this value already exists"),
            (ConfigurationUnavailableError(), 503, "Blog preference is unavailable"),
            (SitemapUnavailableError(), 503, "Sitemap is temporarily unavailable"),
            (NotAuthenticatedError(), 401, "Not logged in"),
            (ForbiddenError(), 403, "Admin access required"),
        ],
    )
    def test_status_codes(self, error: BaseAppError, status_code: int, detail: str) -> None:
        assert error.status_code == status_code
        assert error.detail == detail

    def test_families(self) -> None:
        assert isinstance(DuplicateEmailError(), ServiceError)
        assert isinstance(DuplicateEntryError(), RepositoryError)
        assert not isinstance(SitemapUnavailableError(), ServiceError)


class TestCreateExceptionHandler:
    @pytest.mark.asyncio
    async def test_renders_detail_and_status(self) -> None:
        logger = MagicMock()
        handler = create_exception_handler(logger)
        request = MagicMock()
        request.client.host = "192.168.1.1"
        request.url.path = "/sitemap.xml"

        response = await handler(request, SitemapUnavailableError())

        assert response.status_code == 503
        assert response.body == b'{"detail":"Sitemap is temporarily unavailable"}'
        logger.warning.assert_called_once_with(
            "Sitemap is temporarily unavailable for ip: 192.168.1.1 for endpoint /sitemap.xml",
        )

    @pytest.mark.asyncio
    async def test_plain_exception_is_a_500(self) -> None:
        handler = create_exception_handler(MagicMock())
        request = MagicMock()
        request.client = None
        request.url.path = "/"

        response = await handler(request, ValueError("boom"))

        assert response.status_code == 500
        assert response.body == b'{"detail":"Internal Server Error"}'
