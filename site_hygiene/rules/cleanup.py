"""Legacy WordPress fragment-removal rules."""

from __future__ import annotations

from site_hygiene.rules.base import CleanupRule

SOCIAL_SHARE = CleanupRule(
    rule_id="social_share",
    name="Social Share Section",
    start=r'<section class="main-color container-wrap social-share-wrap">',
    end=r"</section>",
    trim="line",
)
RELATED_ARTICLES = CleanupRule(
    rule_id="related_articles",
    name="Related Articles Carousel",
    start=r'<section class="container-wrap">\s*<div class="container">\s*<div class="related-wrap">',
    end=r"</section>",
    trim="line",
)
PAGINATION_NAV = CleanupRule(
    rule_id="pagination_nav",
    name="Pagination Navigation",
    start=r'<nav class="pagination-sticky',
    end=r"</nav><!-- \.navigation -->",
    trim="all",
)
COMMENTS = CleanupRule(
    rule_id="comments",
    name="Comments Section",
    start=r"<!-- Begin Comments -->",
    end=r"<!-- End Comments -->",
    trim="all",
)
ARTICLE_META = CleanupRule(
    rule_id="article_meta",
    name="Article Meta Section",
    start=r'<div class="article-meta">',
    end=r"</div><!--end article-meta-->",
    trim="all",
)
GO_PRICING_STYLES = CleanupRule(
    rule_id="go_pricing_styles",
    name="Go Pricing Table Styles",
    start=r"<style[^>]*>#go-pricing-table",
    end=r"</style>",
)
GO_PRICING_HTML = CleanupRule(
    rule_id="go_pricing_html",
    name="Go Pricing Table HTML",
    start=r'<div id="go-pricing-table-\d+" class="go-pricing"',
    end=r"</div></div></div></div></div>",
)

# Version 2 extends version 1; older tables stay selectable for sites that
# still carry pricing widgets on purpose.
CLEANUP_TABLES: dict[int, tuple[CleanupRule, ...]] = {
    1: (SOCIAL_SHARE, RELATED_ARTICLES, PAGINATION_NAV, COMMENTS),
    2: (
        SOCIAL_SHARE,
        RELATED_ARTICLES,
        PAGINATION_NAV,
        COMMENTS,
        ARTICLE_META,
        GO_PRICING_STYLES,
        GO_PRICING_HTML,
    ),
}

LATEST_TABLE_VERSION = max(CLEANUP_TABLES)
