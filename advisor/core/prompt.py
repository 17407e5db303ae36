MARKET_CONTEXT_SUFFIX = (
    " Answer this in context of current real estate market trends and news. "
    "Include relevant statistics and market insights where applicable. "
    "If mentioning specific locations, focus on major global markets unless "
    "specified otherwise."
)
