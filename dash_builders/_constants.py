"""Discord endpoints, error codes, store IDs, and defaults for dash-builders."""

# ---------------------------------------------------------------------------
# Discord webhook endpoint
# ---------------------------------------------------------------------------

WEBHOOK_HOST = "discord.com"
LEGACY_WEBHOOK_PREFIX = "/api/webhooks/"
VERSIONED_WEBHOOK_PREFIX = "/api/v10/webhooks/"

QUERY_WITH_COMPONENTS = "with_components"
QUERY_THREAD_ID = "thread_id"

# Message flag for Components V2 payloads
IS_COMPONENTS_V2 = 1 << 15  # 32768

# "A thread_name or thread_id is required" -- webhook targets a forum channel
THREAD_NAME_REQUIRED = 220001

SUCCESS_STATUS = 204
SUCCESS_MARKER = {"status": "204 Success"}

ATTACHMENT_SCHEME = "attachment://"

# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

WEBHOOK_URL_KEY = "discord.builders__webhookToken"
DEBOUNCE_SECONDS = 1.0
DEFAULT_TIMEOUT = 10
DEFAULT_PORT = 8150

# ---------------------------------------------------------------------------
# Page store IDs
# ---------------------------------------------------------------------------

BUILDER_STORE_KEYS = ("components", "send_state", "attachments")


def get_builder_store_ids(prefix=""):
    """Return a dict mapping store keys to namespaced store IDs.

    With prefix="alt": {"components": "alt-_builders-components", ...}
    Without prefix:    {"components": "_builders-components", ...}
    """
    base = f"{prefix}-_builders" if prefix else "_builders"
    return {key: f"{base}-{key}" for key in BUILDER_STORE_KEYS}


# ---------------------------------------------------------------------------
# Welcome message shown until the user edits the tree
# ---------------------------------------------------------------------------

DEFAULT_COMPONENTS = [
    {
        "type": 17,
        "accent_color": 0x5865F2,
        "components": [
            {"type": 10, "content": "# Welcome to dash-builders"},
            {"type": 14, "divider": True, "spacing": 1},
            {
                "type": 10,
                "content": (
                    "Edit the component tree on the left, paste a webhook URL "
                    "and press **Send**."
                ),
            },
            {
                "type": 1,
                "components": [
                    {
                        "type": 2,
                        "style": 5,
                        "label": "Components reference",
                        "url": "https://discord.com/developers/docs/components/reference",
                    }
                ],
            },
        ],
    }
]
