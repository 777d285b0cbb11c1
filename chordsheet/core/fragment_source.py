"""
Fragment sources for the chord sheet extractor

A fragment source hands out the positioned text fragments of a document one
page at a time. Reading a page is awaited, so sources backed by slow I/O can
suspend between pages.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Sequence

from chordsheet.core.models import Fragment


class FragmentSource(ABC):
    """Base class for per-page fragment providers"""

    @property
    @abstractmethod
    def page_count(self) -> int:
        """Number of pages in the document"""
        pass

    @abstractmethod
    async def get_page_fragments(self, page_index: int) -> List[Fragment]:
        """
        Fragments of one page, with y normalized so larger is higher.

        Args:
            page_index: Page number (0-based)
        """
        pass

    def get_description(self) -> str:
        return f"{type(self).__name__} ({self.page_count} pages)"


class InMemoryFragmentSource(FragmentSource):
    """Fragment source over fragments that are already in memory"""

    def __init__(self, pages: Iterable[Sequence[Fragment]]):
        self.pages = [list(page) for page in pages]

    @property
    def page_count(self) -> int:
        return len(self.pages)

    async def get_page_fragments(self, page_index: int) -> List[Fragment]:
        if not 0 <= page_index < len(self.pages):
            raise IndexError(f"Page {page_index} out of range (document has {len(self.pages)} pages)")
        return list(self.pages[page_index])
