from typing import Final, Tuple

ALLERGENS: Final[Tuple[str, ...]] = ("Egg", "Milk", "Peanuts", "Sesame", "Soy", "Tree Nuts", "Wheat")

CHART_TITLE: Final[str] = "Food Allergies and Sensitivities"
NAME_COLUMN: Final[str] = "Name"
SOURCE_TITLE: Final[str] = "Cold Stone Creamery® — Food Allergies and Sensitivities"
SOURCE_URL: Final[str] = "https://www.coldstonecreamery.com/nutrition/index.html"
SOURCE_PDF_URL: Final[str] = (
    "https://www.coldstonecreamery.com/nutrition/pdf/CSC_Food%20Allergies%20and%20Sensitivities.pdf"
)
DISCLAIMER: Final[str] = (
    "Note: Provided for reference; ingredients and cross-contact risk can change. "
    "Verify with Cold Stone and local store practices."
)

CONFIRM_MESSAGE: Final[str] = "Do you see every flavor you carry?"

# Key/value storage entries
STORAGE_SELECTED: Final[str] = "fac_selected_flavors_v1"
STORAGE_MANUAL: Final[str] = "fac_manual_flavors_v2"
STORAGE_UI: Final[str] = "fac_ui_v1"

SHARE_PARAM: Final[str] = "share"
SHARE_VERSION: Final[int] = 1

PRINTED_FORMAT: Final[str] = "%m/%d/%Y, %I:%M %p"
FILE_DATE_FORMAT: Final[str] = "%Y-%m-%d"
EXPORT_FILE_PREFIX: Final[str] = "food-allergy-chart"
