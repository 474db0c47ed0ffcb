"""
Test suite for the XML-fed content blocks.

Renders each panel against in-memory feed data and checks the four
display states plus the per-block item markup.
"""

import pytest
from pydantic import ValidationError

from email_builder.blocks import advertisement, blog, daily_download, featured_story, news_panel
from email_builder.blocks import therapeutic_update, video
from email_builder.blocks.base import RenderContext
from email_builder.blocks.xml_base import TITLE_STYLE
from email_builder.renderers.editor import EditorRenderContext
from email_builder.xml_data.fetcher import XmlDataMap

from sample_data import (
    AD_FEED,
    BLOG_FEED,
    DAILY_DOWNLOAD_FEED,
    NEWS_FEED,
    NEWS_URL,
    THERAPEUTIC_FEED,
    VIDEO_FEED,
)

FEED_URL = "https://feeds.example.com/feed.xml"


def _context(texts=None, errors=None, editor=False):
    xml_data = XmlDataMap(texts=dict(texts or {}), errors=dict(errors or {}))
    context_class = EditorRenderContext if editor else RenderContext
    return context_class(lambda block_id: "", xml_data)


def _render(panel, props_class, context, **props):
    data = props_class.model_validate({"style": {"padding": {"top": 8, "bottom": 8, "left": 24, "right": 24}}, "props": props})
    return panel.render("block-1", data, context)


class TestPanelStates:
    """Test the shared not-configured, failed, empty and populated states."""

    def test_missing_url_shows_placeholder(self):
        """Test an unconfigured block asks for its URL."""
        html = _render(news_panel.PANEL, news_panel.NewsPanelXmlProps, _context())
        assert "Configure News Panel XML URL" in html
        assert "1px dashed #ccc" in html

    def test_blank_url_shows_placeholder(self):
        """Test a whitespace URL counts as missing."""
        html = _render(blog.PANEL, blog.BlogXmlProps, _context(), url="   ")
        assert "Configure Blog XML URL" in html

    def test_no_data_shows_empty_message(self):
        """Test a URL that was never fetched renders the empty state."""
        html = _render(video.PANEL, video.VideoXmlProps, _context(), url=FEED_URL)
        assert "No videos found." in html

    def test_failed_fetch_in_reader_shows_empty_message(self):
        """Test the reader hides fetch failures behind the empty state."""
        context = _context(errors={FEED_URL: "Status: 500"})
        html = _render(featured_story.PANEL, featured_story.FeaturedStoryXmlProps, context, url=FEED_URL)
        assert "No stories found." in html
        assert "Failed to load data" not in html

    def test_failed_fetch_in_editor_shows_error(self):
        """Test the editor surfaces fetch failures."""
        context = _context(errors={FEED_URL: "Status: 500"}, editor=True)
        html = _render(featured_story.PANEL, featured_story.FeaturedStoryXmlProps, context, url=FEED_URL)
        assert "Error: Failed to load data" in html
        assert "color: red" in html

    def test_unparseable_feed_shows_empty_message(self):
        """Test malformed XML degrades to the empty state."""
        context = _context(texts={FEED_URL: "<response><item>"})
        html = _render(daily_download.PANEL, daily_download.DailyDownloadXmlProps, context, url=FEED_URL)
        assert "No downloads found." in html

    def test_populated_panel_has_title(self):
        """Test a populated panel renders its title heading and padding."""
        context = _context(texts={NEWS_URL: NEWS_FEED})
        html = _render(news_panel.PANEL, news_panel.NewsPanelXmlProps, context, url=NEWS_URL, title="Top News")
        assert "<h2" in html
        assert "Top News" in html
        assert "text-transform: uppercase" in TITLE_STYLE
        assert "padding: 8px 24px 8px 24px" in html

    def test_title_is_optional(self):
        """Test no heading is emitted without a title."""
        context = _context(texts={NEWS_URL: NEWS_FEED})
        html = _render(news_panel.PANEL, news_panel.NewsPanelXmlProps, context, url=NEWS_URL)
        assert "<h2" not in html

    def test_number_of_items_limits_output(self):
        """Test numberOfItems truncates the rendered items."""
        context = _context(texts={NEWS_URL: NEWS_FEED})
        html = _render(news_panel.PANEL, news_panel.NewsPanelXmlProps, context, url=NEWS_URL, numberOfItems=1)
        assert "Methotrexate dosing update" in html
        assert "Great session on lupus today" not in html

    def test_number_of_items_defaults_to_three(self):
        """Test three items are shown when numberOfItems is unset."""
        context = _context(texts={NEWS_URL: NEWS_FEED})
        html = _render(news_panel.PANEL, news_panel.NewsPanelXmlProps, context, url=NEWS_URL)
        assert "Third story" in html

    @pytest.mark.parametrize("count", [0, 11])
    def test_number_of_items_bounds(self, count):
        """Test numberOfItems must stay within 1..10."""
        with pytest.raises(ValidationError):
            news_panel.NewsPanelXmlProps.model_validate({"props": {"url": FEED_URL, "numberOfItems": count}})


class TestPanelItems:
    """Test the item markup of each feed block."""

    def test_news_articles_and_tweets(self):
        """Test articles link their titles and tweets carry the X logo."""
        context = _context(texts={NEWS_URL: NEWS_FEED})
        html = _render(news_panel.PANEL, news_panel.NewsPanelXmlProps, context, url=NEWS_URL)
        assert 'href="https://example.com/node/1"' in html
        assert "Jack Cush" in html
        assert "Jan 2, 2025" in html
        assert news_panel.X_LOGO_URL in html
        assert 'href="https://example.com/lupus"' in html
        assert "Dr. Rheum" in html

    def test_feed_text_is_escaped(self):
        """Test feed values cannot inject markup."""
        feed = "<response><item><type>Article</type><title>Q&amp;A &lt;script&gt;</title></item></response>"
        context = _context(texts={FEED_URL: feed})
        html = _render(news_panel.PANEL, news_panel.NewsPanelXmlProps, context, url=FEED_URL)
        assert "Q&amp;A &lt;script&gt;" in html
        assert "<script>" not in html

    def test_blog_branding_image(self):
        """Test known article types add their branding image."""
        context = _context(texts={FEED_URL: BLOG_FEED})
        html = _render(blog.PANEL, blog.BlogXmlProps, context, url=FEED_URL)
        assert blog.BRANDING_IMAGES["RheumThought"] in html
        assert "RheumNow Staff" in html

    def test_video_play_overlay(self):
        """Test video thumbnails carry a play overlay and link to the video."""
        context = _context(texts={FEED_URL: VIDEO_FEED})
        html = _render(video.PANEL, video.VideoXmlProps, context, url=FEED_URL)
        assert "border-left: 16px solid white" in html
        assert 'href="https://video.example.com/1"' in html
        assert "Five minute primer" in html

    def test_featured_story_play_overlay_only_for_videos(self):
        """Test only video-typed stories get the overlay."""
        story = (
            "<response><item><title>{title}</title><type>{type}</type>"
            "<field_media_image>https://example.com/i.jpg</field_media_image></item></response>"
        )
        plain = _render(
            featured_story.PANEL,
            featured_story.FeaturedStoryXmlProps,
            _context(texts={FEED_URL: story.format(title="Plain", type="article")}),
            url=FEED_URL,
        )
        clip = _render(
            featured_story.PANEL,
            featured_story.FeaturedStoryXmlProps,
            _context(texts={FEED_URL: story.format(title="Clip", type="video")}),
            url=FEED_URL,
        )
        assert "border-left: 16px solid white" not in plain
        assert "border-left: 16px solid white" in clip

    def test_therapeutic_update_sponsored_attribution(self):
        """Test sponsored updates style the attribution purple and bold."""
        context = _context(texts={FEED_URL: THERAPEUTIC_FEED})
        html = _render(therapeutic_update.PANEL, therapeutic_update.TherapeuticUpdateXmlProps, context, url=FEED_URL)
        assert f"color: {therapeutic_update.SPONSORED_COLOR}; font-weight: bold" in html
        assert "Sponsor Inc" in html

    def test_daily_download_button(self):
        """Test each download links a Download button to its node."""
        context = _context(texts={FEED_URL: DAILY_DOWNLOAD_FEED})
        html = _render(daily_download.PANEL, daily_download.DailyDownloadXmlProps, context, url=FEED_URL)
        assert ">Download</a>" in html
        assert "background-color: #1585fe" in html
        assert 'href="https://example.com/dl/1"' in html

    def test_advertisement_sizes_and_tracking_code(self):
        """Test ads keep their tracking code raw and cap the image width."""
        context = _context(texts={FEED_URL: AD_FEED})
        small = _render(
            advertisement.PANEL_300_250, advertisement.Advertisement300250XmlProps, context, url=FEED_URL
        )
        wide = _render(
            advertisement.PANEL_728_90, advertisement.Advertisement72890XmlProps, context, url=FEED_URL
        )

        assert "max-width: 300px" in small
        assert "max-width: 728px" in wide
        assert '<img src="https://ads.example.com/pixel.gif">' in small
        assert 'href="https://ads.example.com/click"' in small
        assert 'alt="Buy now"' in small
        assert ">Advertisement</div>" in small

    def test_advertisement_placeholder_label(self):
        """Test each ad size names itself in the placeholder."""
        html = _render(advertisement.PANEL_728_90, advertisement.Advertisement72890XmlProps, _context())
        assert "Configure Advertisement 728x90 XML URL" in html
