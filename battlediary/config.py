from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="BATTLEDIARY_")

    app_name: str = "MTG Battle Diary"
    debug: bool = False

    # Where LocalFileSaver writes manual downloads
    download_dir: str = "."

    # TrueType candidates; Pillow's bundled font is used when none load
    font_path: str = "DejaVuSans.ttf"
    font_bold_path: str = "DejaVuSans-Bold.ttf"
    font_italic_path: str = "DejaVuSans-Oblique.ttf"

    # Remote (http/https) pictures are omitted from exports unless enabled
    allow_remote_images: bool = False


settings = Settings()


# =============================================================================
# RENDERING CONSTANTS (NOT Configurable)
# =============================================================================

# Fixed horizontal extent of composed layouts, in logical pixels
DESIGN_WIDTH = 600

# Super-sampling factor applied at capture time (must be >= 2)
CAPTURE_SCALE = 3

# Exports are always opaque
BACKGROUND_COLOR = "#ffffff"

EXPORT_MEDIA_TYPE = "image/png"
SHARE_FILENAME = "result.png"


# =============================================================================
# LABELS
# =============================================================================

# Format badge text when a record has no format
DEFAULT_FORMAT_LABEL = "Format?"

# Format used in the share caption when a record has no format
CAPTION_FORMAT_FALLBACK = "Modern"

HASHTAGS = "#MTG #MTGBattleDiary"

UNKNOWN_OPPONENT_LABEL = "Unknown"
NO_MEMO_LABEL = "no memo"

MANUAL_POST_HINT = (
    "Sharing images directly is not supported on this device. "
    "Save the image and post it manually."
)

# Progress text keyed by CaptureState value
BUSY_LABELS = {
    "capturing": "Preparing…",
    "sharing": "Sharing…",
    "downloading": "Saving…",
}
