"""Auditor sweeps.

One `SiteCheck` subclass per sweep, listed in report order.
"""

from .links import LinkCheck
from .seo_tags import SeoTagCheck
from .sitemaps import SitemapCheck
from .robots import RobotsCheck
from .headers import SecurityHeaderCheck
from .static_sizes import StaticSizeCheck

SWEEPS = (LinkCheck, SeoTagCheck, SitemapCheck, RobotsCheck, SecurityHeaderCheck, StaticSizeCheck)
