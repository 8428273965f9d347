"""Crawler metadata routes"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, Response
from sqlalchemy.orm import Session

from jeeforces.core.database import get_db
from jeeforces.services.sitemap import render_sitemap, robots_txt, sitemap_entries

router = APIRouter()


@router.get("/robots.txt", response_class=PlainTextResponse)
def robots(request: Request):
    return robots_txt(request.app.state.settings.SITE_URL)


@router.get("/sitemap.xml")
def sitemap(request: Request, db: Session = Depends(get_db)):
    """Static pages followed by every public page in the database"""
    body = render_sitemap(request.app.state.settings.SITE_URL, sitemap_entries(db))
    return Response(content=body, media_type="application/xml")
