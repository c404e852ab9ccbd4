MARKET_ANALYSIS_INSTRUCTION = """
Task: analyze mandi (market) prices using recent public sources.
- Summarize the trend and what is driving it.
- Advise whether to sell now or hold, and where prices are better.
- Return a price series suitable for a chart, one point per period.
""".strip()

MARKET_ANALYSIS_USER_TEMPLATE = """
Commodity: {query}
Category: {category}
Period: {period}
Location: {location}
""".strip()

SUPPLIER_SEARCH_INSTRUCTION = """
Task: find agricultural input suppliers near the farmer.
Prefer certified organic input shops, cooperatives and Krishi Vigyan Kendras.
Give the approximate distance in km and a maps or website link when known.
""".strip()

SUPPLIER_SEARCH_USER_TEMPLATE = """
Looking for: {query}
Location: {location}
""".strip()

WEATHER_INSTRUCTION = """
Task: report today's weather for the location and one practical farming tip.
Include an alert only when there is a real warning (storm, frost, heat wave,
heavy rain). Otherwise leave the alert empty.
""".strip()

WEATHER_USER_TEMPLATE = "Location: {location}"
