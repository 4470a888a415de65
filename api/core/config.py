import os

from dotenv import load_dotenv

# Load .env
load_dotenv()


def _optional_float(name: str):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return float(value)


# ---- BIBLE GATEWAY ----
BIBLE_GATEWAY_URL = os.getenv("BIBLE_GATEWAY_URL", "https://www.biblegateway.com/verse/en/")
# None leaves the requests default in place
BIBLE_GATEWAY_TIMEOUT = _optional_float("BIBLE_GATEWAY_TIMEOUT")
USER_AGENT = os.getenv("PARALLEL_VERSIONS_USER_AGENT", "ParallelVersions/1.0 (verse lookup)")

# ---- HISTORY ----
HISTORY_CAPACITY = int(os.getenv("HISTORY_CAPACITY", "25"))

# ---- RESOLVER ----
# ± characters around the caret; long enough for "1 Thessalonians 5:16-18"
REFERENCE_WINDOW = int(os.getenv("REFERENCE_WINDOW", "25"))

# ---- STORAGE ----
DATA_PATH = os.getenv(
    "PARALLEL_VERSIONS_PATH",
    os.path.join(os.path.expanduser("~"), ".parallel_versions"),
)

# ---- USER-FACING MESSAGES ----
MESSAGES = {
    "invalid_scripture": "The scripture reference is not a valid Bible verse",
    "no_result": "Could not find a matching scripture",
    "searching": "Searching for parallel versions from Bible Gateway...",
    "source": "Source: Bible Gateway (https://www.biblegateway.com/)",
}
