"""RSS 2.0 feed document derived from an ordered set of posts"""

import xml.etree.ElementTree as ET
from datetime import datetime
from email.utils import format_datetime
from typing import Iterable, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict

from mdblog.core.models import Post


class ChannelConfig(BaseModel):
    """Static channel fields; everything else in the feed comes from the posts."""
    title:           str
    link:            str                     # blog base url, e.g. https://example.com/blog
    description:     str
    author:          Optional[str] = None    # per-item author (an email address)
    webmaster:       Optional[str] = None
    managing_editor: Optional[str] = None
    copyright:       Optional[str] = None
    image_url:       Optional[str] = None


class FeedItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    title:       str
    link:        str
    guid:        str
    description: str
    pub_date:    Optional[datetime] = None
    author:      Optional[str] = None


class Feed(BaseModel):
    """One channel with one item per post, in post order."""
    model_config = ConfigDict(frozen=True)

    channel:         ChannelConfig
    items:           tuple[FeedItem, ...] = ()
    last_build_date: Optional[datetime] = None     # newest post
    pub_date:        Optional[datetime] = None     # oldest post

    def to_xml(self) -> str:
        """Serialize as an RSS 2.0 document with RFC 2822 dates."""
        rss = ET.Element('rss', version='2.0')
        channel = ET.SubElement(rss, 'channel')
        c = self.channel

        _text(channel, 'title', c.title)
        _text(channel, 'link', c.link)
        _text(channel, 'description', c.description)
        _text(channel, 'managingEditor', c.managing_editor)
        _text(channel, 'webMaster', c.webmaster)
        _text(channel, 'copyright', c.copyright)
        _text(channel, 'pubDate', _rfc2822(self.pub_date))
        _text(channel, 'lastBuildDate', _rfc2822(self.last_build_date))
        if c.image_url:
            image = ET.SubElement(channel, 'image')
            _text(image, 'url', c.image_url)
            _text(image, 'title', c.title)
            _text(image, 'link', c.link)
            _text(image, 'description', c.description)

        for item in self.items:
            node = ET.SubElement(channel, 'item')
            _text(node, 'title', item.title)
            _text(node, 'link', item.link)
            _text(node, 'description', item.description)
            _text(node, 'author', item.author)
            guid = ET.SubElement(node, 'guid', isPermaLink='true')
            guid.text = item.guid
            _text(node, 'pubDate', _rfc2822(item.pub_date))

        ET.indent(rss, space='  ')
        return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(rss, encoding='unicode') + '\n'


def _text(parent: ET.Element, tag: str, value: Optional[str]) -> None:
    if value is not None:
        ET.SubElement(parent, tag).text = value


def _rfc2822(value: Optional[datetime]) -> Optional[str]:
    return format_datetime(value) if value is not None else None


def post_url(base_url: str, slug: str) -> str:
    return f"{base_url.rstrip('/')}/post/{quote(slug)}"


def build_feed(posts: Iterable[Post], channel: ChannelConfig) -> Feed:
    """Build the feed from posts already sorted newest first."""
    posts = list(posts)
    items = tuple(
        FeedItem(
            title=post.title,
            link=post_url(channel.link, post.slug),
            guid=post_url(channel.link, post.slug),
            description=post.description,
            pub_date=post.published,
            author=channel.author,
        )
        for post in posts
    )
    return Feed(
        channel=channel,
        items=items,
        last_build_date=posts[0].published if posts else None,
        pub_date=posts[-1].published if posts else None,
    )
