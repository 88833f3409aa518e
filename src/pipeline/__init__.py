from .sanitize import sanitize_json_text
from .normalize import (
    normalize_drill_schema,
    check_drill_structure,
    coerce_drill_fields,
    canonical_team_color,
    canonical_cone_color,
)
from .extract import extract_drill_from_content, DrillExtraction
