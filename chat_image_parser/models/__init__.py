# chat_image_parser/models/__init__.py

# This file makes the model classes directly available from the 'models' package.
# Instead of: from chat_image_parser.models.site_models import SiteConfig
# We can now use: from chat_image_parser.models import SiteConfig

from .site_models import SiteConfig, SiteSelectors
from .result_models import AggregateRow, BatchReport
from .run_state import RunState, RunTracker
