# chat_image_parser/config.py

import os
# Import the 'Path' object for handling file paths in a way that works on any OS (Windows, macOS, Linux)
from pathlib import Path

from .models import SiteConfig, SiteSelectors

# --- Browser Settings ---
# Chrome binary to launch. Override with the CHROME_PATH environment variable on Linux/Windows.
CHROME_PATH = os.environ.get(
    "CHROME_PATH", "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome"
)
# Chrome listens for DevTools connections on this port. It must be free for this run.
DEBUG_PORT = 9222
# A scratch profile so we never collide with the user's everyday Chrome instance.
PROFILE_DIR = Path("/tmp/chrome-debug-profile")
# How many times to probe the debugging endpoint, and the pause (seconds) between probes.
CONNECT_ATTEMPTS = 5
CONNECT_DELAY = 2.0
# Seconds to wait for Chrome to exit after SIGTERM before killing it.
SHUTDOWN_TIMEOUT = 10.0

# --- Timing Settings (milliseconds) ---
# Upper bound for the site to finish answering about one image.
ANALYSIS_TIMEOUT = 60000
# How long kimi gets to show its stop button after a message is sent.
BUSY_APPEAR_TIMEOUT = 5000
# Upper bound for the page to reach network idle after (re)loading.
PAGE_LOAD_TIMEOUT = 10000
# How often the send button is re-checked while it is disabled.
SEND_POLL_INTERVAL = 2000
# Empirical pause before pressing Enter so the upload preview settles.
SETTLE_DELAY = 3000
# Pause between two attempts on the same image.
RETRY_BACKOFF = 2000
# Pause after a session fills its quota, before the page is reloaded.
RELOAD_PAUSE = 5000
# Attempts per image before it is skipped.
MAX_RETRIES = 3

# --- File Settings ---
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp")
MERGED_FILENAME = "merged_data.xlsx"
SHEET_NAME = "Data"
COLUMNS = ("store_name", "product_name", "price")

# --- Site Settings ---
# The instruction sent along with every image. Both sites get the same text.
ANALYSIS_PROMPT = (
    "按照json的格式分析图片，格式严格遵循[{store_name, product_name, price}, "
    "{store_name, product_name, price}]。不要任何废话。最后的内容给我文本字符串格式。"
)

DEFAULT_SITE = "kimi"

SITES = {
    "kimi": SiteConfig(
        name="kimi",
        url="https://kimi.moonshot.cn/chat/empty",
        selectors=SiteSelectors(
            attachment_button="label.attachment-button",
            file_input="input.hidden-input",
            chat_input_editor="div.chat-input-editor",
            send_button="div.send-button-container",
            analyzed_mark="button.stop-message-btn",
            copy_result_button='span:has-text("复制")',
        ),
        prompt=ANALYSIS_PROMPT,
        max_uploads_per_session=15,
    ),
    "ideaTALK": SiteConfig(
        name="ideaTALK",
        # Pick the gemini-2.0-pro model by hand in the page; it reads images far better.
        url="https://aistudio.alibaba-inc.com/#/ideaTALK",
        selectors=SiteSelectors(
            attachment_button="div.placing-ashes-upload-btn-icon",
            file_input='input[type="file"][name="file"][id="image"]',
            chat_input_editor="textarea#question",
            # Not used for gating; the site exposes no reliable disabled state.
            send_button="button.submit-btn",
            analyzed_mark="div.once-more-img",
            copy_result_button="div.dislike-copy",
        ),
        prompt=ANALYSIS_PROMPT,
        max_uploads_per_session=100,
    ),
}
