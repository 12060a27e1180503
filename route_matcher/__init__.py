"""
Route Matcher Application Package.

Route-overlap matching for van-dwelling nomads featuring:
- Haversine distance between planned stops
- Inclusive date-range intersection
- Shared-interest aware scoring and ranking
- Live sync status between two routes
"""

__version__ = "0.1.0"
__author__ = "Route Matcher Team"
