# chat_image_parser/models/site_models.py

from dataclasses import dataclass


@dataclass(frozen=True)
class SiteSelectors:
    """CSS/Playwright locators for the controls a site adapter touches."""
    attachment_button: str
    file_input: str
    chat_input_editor: str
    send_button: str
    analyzed_mark: str
    copy_result_button: str


@dataclass(frozen=True)
class SiteConfig:
    """
    Static description of one supported chat site: where it lives, how to find
    its controls, what to ask, and how many uploads one page load can take.
    """
    name: str
    url: str
    selectors: SiteSelectors
    prompt: str
    max_uploads_per_session: int
