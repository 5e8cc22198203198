"""Source trust patterns.

Trust is a block-list: a seller string is rejected only when it matches one of
these patterns; everything else is trusted.
"""

BLOCKED_SOURCE_PATTERNS: tuple[str, ...] = (
    # auctions and peer-to-peer marketplaces
    r"\bebay\b",
    r"\betsy\b",
    r"\bmercari\b",
    r"\bposhmark\b",
    r"\bwhatnot\b",
    r"\bdepop\b",
    r"\bvinted\b",
    r"\bgrailed\b",
    r"\bofferup\b",
    r"\bletgo\b",
    r"\bcraigslist\b",
    r"\bauction",
    r"\bliveauctioneers\b",
    # cross-border and discount marketplaces
    r"\balibaba\b",
    r"\baliexpress\b",
    r"\bwish(?:\.com)?\b",
    r"\btemu\b",
    r"\bdhgate\b",
    r"\bbanggood\b",
    r"\bfruugo\b",
    r"\bshein\b",
    r"\bmade-in-china\b",
    r"\bindiamart\b",
    r"\bbigbigmart\b",
    r"\bmartexplore\b",
    # social
    r"\bfacebook\b",
    r"\binstagram\b",
    r"\btiktok\b",
    r"\breddit\b",
    r"\bpinterest\b",
    # wholesale, dropship and trading companies
    r"\btrad(?:e|ing)\s+co\b",
    r"\bco\.?,?\s*ltd\b",
    r"(?<!costco )\bwholesale\b(?!\s+club)",
    r"\bfulfil+ment\b",
    r"\bdrop\s?ship",
    r"\bliquidat",
    # search engines and obvious junk
    r"google\.com/search",
    r"bing\.com/search",
    r"\bscam\b",
    # seller-code style names: no vowels, or a short word glued to a long number
    r"^[bcdfghjklmnpqrstvwxz]{5,}$",
    r"^[a-z]{2,6}\d{4,}$",
)

MARKETPLACE_ADJACENT_PATTERNS: tuple[str, ...] = (
    r"\s-\s",
    r"\bseller\b",
    r"\bmarketplace\b",
    r"\bthird[- ]party\b",
    r"\b3rd[- ]party\b",
    r"\bvia\b",
)

# Sent to the provider as -site: exclusions.
EXCLUDED_SITES: tuple[str, ...] = (
    "ebay.com",
    "etsy.com",
    "alibaba.com",
    "aliexpress.com",
    "wish.com",
    "temu.com",
    "facebook.com",
    "mercari.com",
    "poshmark.com",
    "offerup.com",
    "craigslist.org",
    "whatnot.com",
    "dhgate.com",
)
