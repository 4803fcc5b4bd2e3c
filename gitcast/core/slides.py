"""Slide extraction and navigation for generated presentations.

The presentation artifact is an HTML fragment made of `<section>` elements.
Each section's inner markup is one slide, in document order.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List

from bs4 import BeautifulSoup

NEXT_KEY = "ArrowRight"
PREVIOUS_KEY = "ArrowLeft"
CLOSE_KEY = "Escape"


def parse_slides(html: str) -> List[str]:
    """Return the inner HTML of every `<section>` in `html`."""
    soup = BeautifulSoup(html or "", "html.parser")
    return [section.decode_contents() for section in soup.find_all("section")]


def slide_text(slide_html: str) -> str:
    """Plain text of one slide, one block per line."""
    soup = BeautifulSoup(slide_html, "html.parser")
    lines = (ln.strip() for ln in soup.get_text("\n").splitlines())
    return "\n".join(ln for ln in lines if ln)


@dataclass
class SlideDeck:
    """Current-slide state for the slide viewer."""

    slides: List[str] = field(default_factory=list)
    current: int = 0

    @classmethod
    def from_html(cls, html: str) -> "SlideDeck":
        return cls(slides=parse_slides(html))

    def __len__(self) -> int:
        return len(self.slides)

    @property
    def current_slide(self) -> str:
        if not self.slides:
            raise IndexError("presentation has no slides")
        return self.slides[self.current]

    def next(self) -> bool:
        """Advance one slide; returns False when already on the last one."""
        if self.current < len(self.slides) - 1:
            self.current += 1
            return True
        return False

    def previous(self) -> bool:
        if self.current > 0:
            self.current -= 1
            return True
        return False

    def go_to(self, index: int) -> None:
        if not 0 <= index < len(self.slides):
            raise IndexError(f"slide {index} out of range (0-{len(self.slides) - 1})")
        self.current = index

    def handle_key(self, key: str) -> bool:
        """Apply a key press; returns False when the viewer should close."""
        if key == NEXT_KEY:
            self.next()
        elif key == PREVIOUS_KEY:
            self.previous()
        elif key == CLOSE_KEY:
            return False
        return True

    def counter(self) -> str:
        return f"Slide {self.current + 1} of {len(self.slides)}"
