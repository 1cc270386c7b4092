import os
from pathlib import Path

# --------------------------------------------------------
# Environment-driven settings (read once at import)
# --------------------------------------------------------
SERVICE_NAME = os.getenv("DIVECOACH_SERVICE_NAME", "Koval Deep ENCLOSE")
LOG_LEVEL = os.getenv("DIVECOACH_LOG_LEVEL", "INFO").upper()

DEFAULT_RULES_PATH = Path(__file__).parent / "enclose" / "rules.yaml"


def rules_path() -> Path:
    """
    Rules file in effect. DIVECOACH_RULES_PATH overrides the packaged table.
    """
    override = os.getenv("DIVECOACH_RULES_PATH")
    if override:
        return Path(override)
    return DEFAULT_RULES_PATH


DEFAULT_TRIAGE_PATH = Path(__file__).parent / "enclose" / "triage_categories.yaml"


def triage_path() -> Path:
    """
    Issue-triage category table in effect. DIVECOACH_TRIAGE_PATH overrides it.
    """
    override = os.getenv("DIVECOACH_TRIAGE_PATH")
    if override:
        return Path(override)
    return DEFAULT_TRIAGE_PATH
