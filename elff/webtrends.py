"""
WebTrends helpers - Query attribute names and values used by WebTrends
collection servers (the dcs-id field and WT.* query parameters).
"""

from __future__ import annotations

import enum
from urllib.parse import quote

# Name of the WebTrends ID cookie
WEBTRENDS_ID_COOKIE_NAME = "WEBTRENDS_ID"
# Namespace for WebTrends query parameters
WEBTRENDS_QUERY_NAMESPACE = "WT"
QUERY_NAMESPACE_SEPARATOR = "."

QUERY_NAME_VALUE_ASSIGNMENT = "="
QUERY_VALUE_DELIMITER = ";"


def create_query_attribute_name(namespace: str, local_name: str) -> str:
    """namespace.local_name, e.g. WT.ti"""
    return f"{namespace}{QUERY_NAMESPACE_SEPARATOR}{local_name}"


BROWSING_HOUR_QUERY_ATTRIBUTE_NAME = create_query_attribute_name(WEBTRENDS_QUERY_NAMESPACE, "bh")
BROWSER_SIZE_QUERY_ATTRIBUTE_NAME = create_query_attribute_name(WEBTRENDS_QUERY_NAMESPACE, "bs")
COLOR_DEPTH_QUERY_ATTRIBUTE_NAME = create_query_attribute_name(WEBTRENDS_QUERY_NAMESPACE, "cd")
CONTENT_GROUP_NAME_QUERY_ATTRIBUTE_NAME = create_query_attribute_name(WEBTRENDS_QUERY_NAMESPACE, "cg_n")
CONTENT_SUBGROUP_NAME_QUERY_ATTRIBUTE_NAME = create_query_attribute_name(WEBTRENDS_QUERY_NAMESPACE, "cg_s")
JAVA_ENABLED_QUERY_ATTRIBUTE_NAME = create_query_attribute_name(WEBTRENDS_QUERY_NAMESPACE, "jo")
# "Yes" or "No"
JAVASCRIPT_QUERY_ATTRIBUTE_NAME = create_query_attribute_name(WEBTRENDS_QUERY_NAMESPACE, "js")
JAVASCRIPT_VERSION_QUERY_ATTRIBUTE_NAME = create_query_attribute_name(WEBTRENDS_QUERY_NAMESPACE, "jv")
SCREEN_RESOLUTION_QUERY_ATTRIBUTE_NAME = create_query_attribute_name(WEBTRENDS_QUERY_NAMESPACE, "sr")
TITLE_QUERY_ATTRIBUTE_NAME = create_query_attribute_name(WEBTRENDS_QUERY_NAMESPACE, "ti")
# Client offset from GMT
TIMEZONE_QUERY_ATTRIBUTE_NAME = create_query_attribute_name(WEBTRENDS_QUERY_NAMESPACE, "tz")
USER_LANGUAGE_QUERY_ATTRIBUTE_NAME = create_query_attribute_name(WEBTRENDS_QUERY_NAMESPACE, "ul")


class WebTrendsYesNo(enum.Enum):
    """Boolean values as WebTrends writes them."""

    YES = "Yes"
    NO = "No"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def as_yes_no(cls, value: bool) -> WebTrendsYesNo:
        return cls.YES if value else cls.NO


def format_uri_query_parameter(name: str, *values: str) -> str:
    """
    URL-encode a query parameter, joining multiple values with ";".

        format_uri_query_parameter("WT.cg_n", "News", "Sports")  ->  "WT.cg_n=News;Sports"
    """
    encoded = QUERY_VALUE_DELIMITER.join(quote(str(v), safe="") for v in values)
    return f"{quote(name, safe='')}{QUERY_NAME_VALUE_ASSIGNMENT}{encoded}"


def append_uri_query_parameter(parts: list[str], name: str, *values: str) -> list[str]:
    """Append a formatted query parameter to parts and return parts."""
    parts.append(format_uri_query_parameter(name, *values))
    return parts
