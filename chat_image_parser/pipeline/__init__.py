# chat_image_parser/pipeline/__init__.py

# This file makes the step functions directly available from the 'pipeline' package.
from .analysis import retry_analyze_image, SessionBatcher
from .aggregate import collect_rows, merge_json_to_excel
from .steps import step_1_analyze_images, step_2_merge_results
