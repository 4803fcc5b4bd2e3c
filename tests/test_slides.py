"""Tests for slide extraction and deck navigation."""

import pytest

from gitcast.core.slides import SlideDeck, parse_slides, slide_text

HTML = """
<section class="bg-slate-900"><h1 class="text-4xl">engine</h1><p>A tagline</p></section>
<section><h2>Overview</h2><ul><li>Fast</li><li>Small</li></ul></section>
<section><h2>Conclusion</h2></section>
"""


class TestParseSlides:
    def test_inner_markup_in_document_order(self):
        slides = parse_slides(HTML)
        assert len(slides) == 3
        assert slides[0] == '<h1 class="text-4xl">engine</h1><p>A tagline</p>'
        assert slides[1].startswith("<h2>Overview</h2>")
        assert slides[2] == "<h2>Conclusion</h2>"

    def test_text_outside_sections_is_ignored(self):
        assert parse_slides("```html\n<section><p>one</p></section>\n```") == ["<p>one</p>"]

    def test_no_sections(self):
        assert parse_slides("<div>nothing</div>") == []
        assert parse_slides("") == []

    def test_slide_text(self):
        assert slide_text(parse_slides(HTML)[1]) == "Overview\nFast\nSmall"


class TestSlideDeck:
    def test_navigation_is_clamped(self):
        deck = SlideDeck.from_html(HTML)
        assert deck.counter() == "Slide 1 of 3"
        assert deck.previous() is False
        assert deck.next() and deck.next()
        assert deck.next() is False
        assert deck.current == 2
        assert deck.current_slide == "<h2>Conclusion</h2>"

    def test_keyboard(self):
        deck = SlideDeck.from_html(HTML)
        assert deck.handle_key("ArrowRight") is True
        assert deck.current == 1
        assert deck.handle_key("ArrowLeft") is True
        assert deck.current == 0
        assert deck.handle_key("x") is True
        assert deck.handle_key("Escape") is False

    def test_go_to(self):
        deck = SlideDeck.from_html(HTML)
        deck.go_to(2)
        assert deck.counter() == "Slide 3 of 3"
        with pytest.raises(IndexError):
            deck.go_to(3)

    def test_empty_deck(self):
        deck = SlideDeck.from_html("")
        assert len(deck) == 0
        assert deck.next() is False
        with pytest.raises(IndexError):
            deck.current_slide
