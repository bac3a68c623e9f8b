from __future__ import annotations

from os.path import abspath, join

# [PATHS]
###############################################################################
ROOT_DIR = abspath(join(__file__, "../../../.."))
PROJECT_DIR = join(ROOT_DIR, "MEDBOX")
SETTING_PATH = join(PROJECT_DIR, "setup", "settings")
RSC_PATH = join(PROJECT_DIR, "resources")
DATA_PATH = join(RSC_PATH, "database")
SOURCES_PATH = join(DATA_PATH, "sources")
LOGS_PATH = join(RSC_PATH, "logs")
ENV_FILE_PATH = join(SETTING_PATH, ".env")

###############################################################################
SERVER_CONFIGURATION_FILE = join(SETTING_PATH, "server_configurations.json")
DEFAULT_CATALOG_FILENAME = "drug_products.csv"

# [ENDPOINTS]
###############################################################################
DRUG_SEARCH_ENDPOINT = "/drugs/search"
DRUG_CATALOG_ENDPOINT = "/drugs/catalog"
REFILL_USAGE_ENDPOINT = "/refills/usage"
REFILL_PREDICTION_ENDPOINT = "/refills/prediction"
REFILL_ALERTS_ENDPOINT = "/refills/alerts"
REFILL_PILL_TAKEN_ENDPOINT = "/refills/pill-taken"
REFILL_RECOMMENDATIONS_ENDPOINT = "/refills/recommendations"
REFILL_ADHERENCE_ENDPOINT = "/refills/adherence"

# [DRUG CATALOG]
###############################################################################
# Dosage form, route and release tokens stripped once each, in this order.
DOSAGE_FORM_SUFFIXES = (
    "TABS",
    "TAB",
    "CAPSULE",
    "CAP",
    "TABLET",
    "INJECTION",
    "ORAL",
    "SOLUTION",
    "SUSPENSION",
    "MG",
    "ML",
    "EXTENDED RELEASE",
    "ER",
    "XR",
    "SR",
    "DR",
    "IR",
)

MISSING_FIELD_MARKERS = frozenset({"null"})

FALLBACK_MEDICATIONS = (
    "Amoxicillin",
    "Metformin",
    "Lisinopril",
    "Ibuprofen",
    "Aspirin",
    "Tylenol",
    "Advil",
    "Lipitor",
    "Zoloft",
    "Prozac",
    "Xanax",
    "Adderall",
    "Synthroid",
    "Levothyroxine",
    "Omeprazole",
    "Prilosec",
    "Zantac",
    "Benadryl",
    "Claritin",
    "Zyrtec",
    "Mucinex",
    "Sudafed",
    "Insulin",
    "Metoprolol",
    "Amlodipine",
    "Simvastatin",
    "Atorvastatin",
    "Hydrochlorothiazide",
    "Losartan",
    "Gabapentin",
    "Tramadol",
    "Oxycodone",
    "Morphine",
    "Codeine",
    "Prednisone",
    "Albuterol",
    "Fluticasone",
    "Montelukast",
    "Warfarin",
    "Apixaban",
    "Clopidogrel",
    "Furosemide",
    "Acetaminophen",
    "Naproxen",
    "Diclofenac",
    "Celecoxib",
    "Meloxicam",
    "Hydroxyzine",
    "Loratadine",
    "Cetirizine",
    "Fexofenadine",
    "Diphenhydramine",
)

# Searched while the first catalog stream has not published anything yet.
FAST_PATH_MEDICATIONS = FALLBACK_MEDICATIONS[:16]

# [REFILLS]
###############################################################################
CONFIDENCE_HIGH_THRESHOLD = 0.8
CONFIDENCE_MEDIUM_THRESHOLD = 0.5
CONFIDENCE_DATA_POINTS_TARGET = 30
CONFIDENCE_ADHERENCE_FLOOR = 0.7
CONFIDENCE_DEFAULT_ADHERENCE = 0.5

ADHERENCE_STREAK_PERCENTAGE = 80.0
ADHERENCE_STREAK_LOOKBACK_DAYS = 30
