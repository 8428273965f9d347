"""robots.txt and sitemap.xml for crawlers"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from xml.sax.saxutils import escape
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jeeforces.core.timeutil import naive_utc, utcnow
from jeeforces.models.contest import Contest
from jeeforces.models.discussion import Discussion
from jeeforces.models.problem import Problem
from jeeforces.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SitemapEntry:
    path: str
    last_modified: Optional[datetime] = None
    change_frequency: Optional[str] = None
    priority: Optional[float] = None


STATIC_ROUTES = (
    SitemapEntry("/", change_frequency="daily", priority=1.0),
    SitemapEntry("/contests", change_frequency="weekly", priority=0.9),
    SitemapEntry("/problems", change_frequency="weekly", priority=0.9),
    SitemapEntry("/discussions", change_frequency="daily", priority=0.8),
    SitemapEntry("/leaderboard", change_frequency="daily", priority=0.7),
    SitemapEntry("/about", change_frequency="monthly", priority=0.5),
)


def robots_txt(site_url: str) -> str:
    return f"User-agent: *\nAllow: /\n\nSitemap: {site_url}/sitemap.xml\n"


def dynamic_entries(db: Session) -> List[SitemapEntry]:
    """Problem, published contest, discussion and user profile pages"""
    entries = []
    for problem_id, updated_at in db.query(Problem.id, Problem.updated_at).order_by(Problem.id):
        entries.append(SitemapEntry(f"/problems/{problem_id}", naive_utc(updated_at)))

    contests = (
        db.query(Contest.id, Contest.updated_at)
        .filter(Contest.is_published.is_(True))
        .order_by(Contest.id)
    )
    for contest_id, updated_at in contests:
        entries.append(SitemapEntry(f"/contests/{contest_id}", naive_utc(updated_at)))
        entries.append(SitemapEntry(f"/contests/{contest_id}/standings", naive_utc(updated_at)))

    for discussion_id, created_at in db.query(Discussion.id, Discussion.created_at).order_by(Discussion.id):
        entries.append(SitemapEntry(f"/discussions/{discussion_id}", naive_utc(created_at)))

    for username, updated_at in db.query(User.username, User.updated_at).order_by(User.rating.desc(), User.id):
        entries.append(SitemapEntry(f"/users/{username}", naive_utc(updated_at)))
    return entries


def sitemap_entries(db: Session) -> List[SitemapEntry]:
    """Static routes, then database-backed pages; static only if the database read fails"""
    try:
        return list(STATIC_ROUTES) + dynamic_entries(db)
    except SQLAlchemyError as e:
        logger.error(f"Sitemap generation error: {e}")
        db.rollback()
        return list(STATIC_ROUTES)


def render_sitemap(site_url: str, entries: List[SitemapEntry]) -> str:
    now = utcnow()
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
    ]
    for entry in entries:
        lines.append("<url>")
        lines.append(f"<loc>{escape(site_url + entry.path)}</loc>")
        lines.append(f"<lastmod>{(entry.last_modified or now).strftime('%Y-%m-%dT%H:%M:%SZ')}</lastmod>")
        if entry.change_frequency:
            lines.append(f"<changefreq>{entry.change_frequency}</changefreq>")
        if entry.priority is not None:
            lines.append(f"<priority>{entry.priority:.1f}</priority>")
        lines.append("</url>")
    lines.append("</urlset>")
    return "\n".join(lines) + "\n"
