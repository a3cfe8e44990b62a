"""Sitemap route."""

from fastapi import APIRouter, Response

from inkwell.decorators import timed
from inkwell.dependencies import SitemapDep

router = APIRouter(tags=["🗺️ Sitemap"])


@router.get(
    "/sitemap.xml",
    response_class=Response,
    summary="Get sitemap",
    description="XML sitemap of published articles, navigation pages, tags and archives.",
    responses={
        200: {"content": {"text/xml": {}}},
        503: {
            "description": "Storage unavailable",
            "content": {
                "application/json": {
                    "example": {"detail": "Sitemap is temporarily unavailable"},
                },
            },
        },
    },
    operation_id="get_sitemap",
)
@timed("GET /sitemap.xml")
async def get_sitemap(sitemaps: SitemapDep) -> Response:
    """
    Render the blog sitemap.

    Parameters
    ----------
    sitemaps : SitemapService
        Sitemap builder.

    Returns
    -------
    Response
        ``text/xml`` sitemap document.
    """
    sitemap = await sitemaps.build()
    return Response(content=sitemap.to_xml(), media_type="text/xml")
