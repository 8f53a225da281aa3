"""Build information.

Both values are rewritten by the release build.
"""

BUILD_VERSION = "Unknown"

# git commit id of the build
COMMIT_ID = ""


def get_version() -> str:
    return f"{BUILD_VERSION}.{COMMIT_ID}"
