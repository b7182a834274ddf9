"""Minimal RSS 2.0 document model and XML writer."""
from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

RSS_CONTENT_TYPE = "application/rss+xml"
RSS_DOCS_URL = "https://www.rssboard.org/rss-specification"


@dataclass(slots=True)
class Guid:
    value: str
    permalink: bool = True


@dataclass(slots=True)
class Category:
    name: str
    domain: str | None = None


@dataclass(slots=True)
class Item:
    """A single ``<item>`` entry of a channel."""

    title: str | None = None
    link: str | None = None
    description: str | None = None
    categories: list[Category] = field(default_factory=list)
    guid: Guid | None = None


@dataclass(slots=True)
class Channel:
    """An RSS ``<channel>`` together with its items."""

    title: str
    link: str
    description: str = ""
    last_build_date: str | None = None
    generator: str | None = None
    docs: str | None = None
    ttl: int | None = None
    items: list[Item] = field(default_factory=list)

    def to_element(self) -> ET.Element:
        rss = ET.Element("rss", {"version": "2.0"})
        channel = ET.SubElement(rss, "channel")
        _text(channel, "title", self.title)
        _text(channel, "link", self.link)
        _text(channel, "description", self.description)
        _text(channel, "generator", self.generator)
        _text(channel, "docs", self.docs)
        if self.ttl is not None:
            _text(channel, "ttl", str(self.ttl))
        _text(channel, "lastBuildDate", self.last_build_date)

        for item in self.items:
            node = ET.SubElement(channel, "item")
            _text(node, "title", item.title)
            _text(node, "link", item.link)
            _text(node, "description", item.description)
            for category in item.categories:
                attrs = {"domain": category.domain} if category.domain else {}
                ET.SubElement(node, "category", attrs).text = category.name
            if item.guid is not None:
                attrs = {} if item.guid.permalink else {"isPermaLink": "false"}
                ET.SubElement(node, "guid", attrs).text = item.guid.value
        return rss

    def to_xml(self) -> bytes:
        """Serialise the channel as an indented UTF-8 XML document."""

        tree = ET.ElementTree(self.to_element())
        ET.indent(tree, space="  ")
        return ET.tostring(tree.getroot(), encoding="utf-8", xml_declaration=True)


def _text(parent: ET.Element, tag: str, value: str | None) -> None:
    if value is None:
        return
    ET.SubElement(parent, tag).text = value


__all__ = ["Category", "Channel", "Guid", "Item", "RSS_CONTENT_TYPE", "RSS_DOCS_URL"]
