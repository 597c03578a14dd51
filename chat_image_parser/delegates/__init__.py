# chat_image_parser/delegates/__init__.py

# This file makes the delegate classes directly available from the 'delegates' package.
# Instead of: from chat_image_parser.delegates.chrome_delegate import ChromeDelegate
# We can now use: from chat_image_parser.delegates import ChromeDelegate

from .chrome_delegate import ChromeDelegate
from .clipboard_delegate import ClipboardDelegate
from .file_manager_delegate import FileManagerDelegate
from .spreadsheet_delegate import SpreadsheetDelegate
from .site_delegates import SiteAdapter, KimiAdapter, IdeaTalkAdapter, get_adapter, get_site_config
