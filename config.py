"""
Configuration for the Talent Allocation Matching service
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Base directory
BASE_DIR = Path(__file__).parent

# Database configuration
DATABASE_PATH = os.getenv("DATABASE_PATH", str(BASE_DIR / "data" / "talent_allocation.db"))

# API configuration
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
API_RELOAD = os.getenv("API_RELOAD", "True").lower() == "true"

# CORS configuration
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

# Matching weights (mandatory vs optional requirements)
MANDATORY_WEIGHT = int(os.getenv("MANDATORY_WEIGHT", "2"))
OPTIONAL_WEIGHT = int(os.getenv("OPTIONAL_WEIGHT", "1"))

# Exclude candidates missing a mandatory skill instead of penalising them
STRICT_MANDATORY = os.getenv("STRICT_MANDATORY", "False").lower() == "true"

# Skill normalization
ENABLE_FUZZY_SKILL_MATCHING = os.getenv("ENABLE_FUZZY_SKILL_MATCHING", "False").lower() == "true"
FUZZY_MATCH_THRESHOLD = float(os.getenv("FUZZY_MATCH_THRESHOLD", "0.5"))

# Ranking
MAX_RANKED_RESULTS = int(os.getenv("MAX_RANKED_RESULTS", "50"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def validate_config():
    """Validate configuration"""
    if MANDATORY_WEIGHT <= 0 or OPTIONAL_WEIGHT <= 0:
        raise ValueError(
            f"Requirement weights must be positive "
            f"(MANDATORY_WEIGHT={MANDATORY_WEIGHT}, OPTIONAL_WEIGHT={OPTIONAL_WEIGHT})"
        )
    if not 0.0 < FUZZY_MATCH_THRESHOLD <= 1.0:
        raise ValueError(f"FUZZY_MATCH_THRESHOLD must be in (0, 1], got {FUZZY_MATCH_THRESHOLD}")
    if MAX_RANKED_RESULTS <= 0:
        raise ValueError(f"MAX_RANKED_RESULTS must be positive, got {MAX_RANKED_RESULTS}")

    return True
