"""Application constants.

Contains defaults used by the form builder, the candidate pipeline and
the reporting endpoints.
"""

# ---------------------------------------------------------------------------
# Forms
# ---------------------------------------------------------------------------
DEFAULT_FORM_TITLE: str = "New Application Form"
DUPLICATE_TITLE_SUFFIX: str = " (Copy)"

# Placeholder options seeded into new select / radio / checkbox fields
DEFAULT_CHOICE_OPTIONS: list[str] = ["Option 1", "Option 2"]

# ---------------------------------------------------------------------------
# Candidates
# ---------------------------------------------------------------------------
INITIAL_HISTORY_NOTE: str = "Application submitted"
DEFAULT_PAGE_SIZE: int = 50
MAX_PAGE_SIZE: int = 500

MIN_RATING: int = 1
MAX_RATING: int = 5

# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------
DEFAULT_REPORT_DAYS: int = 30
TOP_CAMPAIGNS_LIMIT: int = 5
